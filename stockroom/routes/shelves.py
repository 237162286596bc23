"""Shelf view and tray routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from stockroom.config import settings
from stockroom.dependencies import get_manager
from stockroom.layers import Column, Shelf, Tray, Warehouse, WarehouseLevel
from stockroom.routes.warehouses import find_layer, open_warehouse
from stockroom.schemas.tray import (
    Cell,
    ColumnCreate,
    ColumnUpdate,
    ColumnView,
    ShelfView,
    TrayCreate,
    TrayResponse,
    TrayUpdate,
)
from stockroom.services.expiry import to_expiry_range
from stockroom.services.tray_spaces import TraySpaceCache
from stockroom.services.warehouse_manager import WarehouseManager

router = APIRouter(prefix="/warehouses/{warehouse_id}/shelves", tags=["Shelves"])


# ============================================================================
# Helper Functions
# ============================================================================

def tray_response(tray: Tray) -> TrayResponse:
    category = tray.category
    return TrayResponse(
        id=tray.id,
        index=tray.index,
        category_id=tray.category_id or None,
        category_name=category.name if category else None,
        expiry=tray.expiry,
        weight=tray.weight,
        comment=tray.comment,
        location_name=tray.location_name,
        location_string=tray.location_string,
    )


def column_view(column: Column, tray_spaces: TraySpaceCache) -> ColumnView:
    cells = [
        Cell(kind="tray", index=cell.index, tray=tray_response(cell))
        if isinstance(cell, Tray) else Cell(kind="space", index=cell.index)
        for cell in tray_spaces.get_padded_cells(column, settings.DEFAULT_TRAY_PADDING)
    ]
    return ColumnView(
        id=column.id,
        index=column.index,
        max_height=column.max_height,
        size=column.size,
        cells=cells,
    )


def shelf_view(shelf: Shelf, tray_spaces: TraySpaceCache) -> ShelfView:
    return ShelfView(
        id=shelf.id,
        name=shelf.name,
        location=str(shelf),
        is_picking_area=shelf.is_picking_area,
        columns=[column_view(column, tray_spaces) for column in shelf.columns],
    )


async def open_shelf(manager: WarehouseManager, warehouse_id: str, shelf_id: str):
    """Load the warehouse to shelf level, then only this shelf down to its trays."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.SHELF)
    shelf = find_layer(warehouse, shelf_id, Shelf, "Shelf")
    await shelf.load_children(min_level=WarehouseLevel.TRAY)
    return warehouse, shelf


def validate_category(warehouse: Warehouse, category_id):
    if category_id and warehouse.get_category_by_id(category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category: {category_id}"
        )


# ============================================================================
# Routes
# ============================================================================

@router.get("/{shelf_id}", response_model=ShelfView)
async def get_shelf(
    warehouse_id: str,
    shelf_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Get a shelf with each column padded to its capacity."""
    _, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    return shelf_view(shelf, manager.tray_spaces)


@router.post("/{shelf_id}/columns", response_model=ColumnView, status_code=status.HTTP_201_CREATED)
async def create_column(
    warehouse_id: str,
    shelf_id: str,
    column_data: ColumnCreate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Add a column to a shelf, optionally at a given position."""
    _, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    column = Column.create(shelf, column_data.max_height, column_data.size, column_data.index)
    # Inserting renumbers the sibling columns too
    await shelf.stage(commit=True, min_level=WarehouseLevel.COLUMN)
    return column_view(column, manager.tray_spaces)


@router.put("/{shelf_id}/columns/{column_id}", response_model=ColumnView)
async def update_column(
    warehouse_id: str,
    shelf_id: str,
    column_id: str,
    column_update: ColumnUpdate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Change a column's capacity or size label."""
    _, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    column = find_layer(shelf, column_id, Column, "Column")
    
    update_data = column_update.model_dump(exclude_unset=True)
    max_height = update_data.get("max_height")
    if max_height is not None and max_height < len(column.trays):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Column holds more trays than the new height"
        )
    for field, value in update_data.items():
        setattr(column, field, value)
    
    await column.stage(commit=True, min_level=WarehouseLevel.COLUMN)
    return column_view(column, manager.tray_spaces)


@router.delete("/{shelf_id}/columns/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    warehouse_id: str,
    shelf_id: str,
    column_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Delete a column with its trays."""
    _, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    column = find_layer(shelf, column_id, Column, "Column")
    await column.delete(commit=True)
    manager.tray_spaces.purge(column)
    return None


@router.post("/{shelf_id}/columns/{column_id}/trays", response_model=TrayResponse, status_code=status.HTTP_201_CREATED)
async def create_tray(
    warehouse_id: str,
    shelf_id: str,
    column_id: str,
    tray_data: TrayCreate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Add a tray to a column."""
    warehouse, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    column = find_layer(shelf, column_id, Column, "Column")
    validate_category(warehouse, tray_data.category_id)
    
    if column.max_height and len(column.trays) >= column.max_height:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Column is full"
        )
    
    expiry = to_expiry_range(tray_data.expiry_period) if tray_data.expiry_period else tray_data.expiry
    tray = Tray.create(
        column,
        category=warehouse.get_category_by_id(tray_data.category_id) if tray_data.category_id else None,
        expiry=expiry,
        weight=tray_data.weight,
        comment=tray_data.comment,
        index=tray_data.index,
    )
    await column.stage(commit=True, min_level=WarehouseLevel.TRAY)
    return tray_response(tray)


@router.patch("/{shelf_id}/trays/{tray_id}", response_model=TrayResponse)
async def update_tray(
    warehouse_id: str,
    shelf_id: str,
    tray_id: str,
    tray_update: TrayUpdate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Update a tray's contents."""
    warehouse, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    tray = find_layer(shelf, tray_id, Tray, "Tray")
    
    update_data = {field: getattr(tray_update, field) for field in tray_update.model_fields_set}
    if "category_id" in update_data:
        validate_category(warehouse, update_data["category_id"])
        tray.category = warehouse.get_category_by_id(update_data["category_id"] or "")
    if "expiry_period" in update_data and update_data["expiry_period"] is not None:
        tray.expiry = to_expiry_range(update_data["expiry_period"])
    elif "expiry" in update_data:
        tray.expiry = update_data["expiry"]
    if "weight" in update_data:
        tray.weight = update_data["weight"]
    if "comment" in update_data:
        tray.comment = update_data["comment"]
    
    await tray.stage(commit=True)
    return tray_response(tray)


@router.delete("/{shelf_id}/trays/{tray_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tray(
    warehouse_id: str,
    shelf_id: str,
    tray_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Remove a tray; the trays above it move down one slot."""
    _, shelf = await open_shelf(manager, warehouse_id, shelf_id)
    tray = find_layer(shelf, tray_id, Tray, "Tray")
    await tray.delete(commit=True)
    return None
