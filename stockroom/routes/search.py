"""Tray search routes."""
from fastapi import APIRouter, Depends

from stockroom.dependencies import get_manager
from stockroom.layers import WarehouseLevel
from stockroom.routes.shelves import tray_response
from stockroom.routes.warehouses import open_warehouse
from stockroom.schemas.tray import SearchResponse
from stockroom.services.search import SearchQuery, search_trays
from stockroom.services.warehouse_manager import WarehouseManager

router = APIRouter(prefix="/warehouses/{warehouse_id}/search", tags=["Search"])


@router.post("/", response_model=SearchResponse)
async def search(
    warehouse_id: str,
    query: SearchQuery,
    manager: WarehouseManager = Depends(get_manager)
):
    """
    Search the trays of a warehouse.
    
    Loads the whole warehouse down to tray level.
    """
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.TRAY)
    trays = search_trays(warehouse, query)
    return SearchResponse(total=len(trays), trays=[tray_response(tray) for tray in trays])
