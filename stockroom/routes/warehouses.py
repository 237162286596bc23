"""Warehouse and zone routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Query

from stockroom.config import settings
from stockroom.dependencies import get_manager
from stockroom.exceptions import NotFoundError
from stockroom.layers import Layer, ParentLayer, Warehouse, WarehouseLevel, Zone
from stockroom.schemas.warehouse import (
    LayerNode,
    WarehouseCreate,
    WarehouseSummary,
    WarehouseTree,
    ZoneCreate,
    ZoneUpdate,
)
from stockroom.services.warehouse_manager import WarehouseManager

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


# ============================================================================
# Helper Functions
# ============================================================================

def parse_level(level: str) -> WarehouseLevel:
    """Parse a layer name such as ``shelf`` into a level."""
    try:
        return WarehouseLevel[level.upper()]
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown layer: {level}"
        )


async def open_warehouse(
    manager: WarehouseManager,
    warehouse_id: str,
    min_level: WarehouseLevel = WarehouseLevel.SHELF,
    refresh: bool = False
) -> Warehouse:
    """Load a warehouse down to ``min_level`` or raise 404."""
    try:
        return await manager.open_warehouse(warehouse_id, min_level, refresh)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Warehouse not found"
        )


def find_layer(root: ParentLayer, layer_id: str, layer_type: type, name: str):
    """Find a loaded layer of the given type or raise 404."""
    layer = root.find_descendant(layer_id)
    if not isinstance(layer, layer_type):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{name} not found"
        )
    return layer


def layer_node(layer: Layer) -> LayerNode:
    children = None
    if isinstance(layer, ParentLayer) and layer.is_deep_loaded:
        children = [layer_node(child) for child in layer.children]
    return LayerNode(
        id=layer.id,
        level=layer.level.name.lower(),
        index=layer.index,
        name=layer.fields.get("name"),
        color=layer.fields.get("color"),
        max_height=layer.fields.get("max_height"),
        children=children,
    )


def warehouse_summary(warehouse: Warehouse) -> WarehouseSummary:
    return WarehouseSummary(
        id=warehouse.id,
        name=warehouse.name,
        last_modified=warehouse.fields.get("last_modified"),
    )


# ============================================================================
# Warehouses
# ============================================================================

@router.get("/", response_model=List[WarehouseSummary])
async def list_warehouses(manager: WarehouseManager = Depends(get_manager)):
    """List all warehouses."""
    warehouses = await manager.load_warehouses()
    return [warehouse_summary(warehouse) for warehouse in warehouses]


@router.post("/", response_model=WarehouseSummary, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    warehouse_data: WarehouseCreate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Create a new, empty warehouse."""
    warehouse = await manager.create_warehouse(warehouse_data.name)
    return warehouse_summary(warehouse)


@router.get("/{warehouse_id}", response_model=WarehouseTree)
async def get_warehouse(
    warehouse_id: str,
    level: str = Query(settings.DEFAULT_LOAD_LEVEL, description="Deepest layer to load"),
    refresh: bool = Query(False, description="Discard the cached tree and read it again"),
    manager: WarehouseManager = Depends(get_manager)
):
    """Get a warehouse with its layers loaded down to ``level``."""
    warehouse = await open_warehouse(manager, warehouse_id, parse_level(level), refresh)
    summary = warehouse_summary(warehouse)
    return WarehouseTree(
        **summary.model_dump(),
        zones=[layer_node(zone) for zone in warehouse.zones],
    )


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse(
    warehouse_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Delete a warehouse and everything in it."""
    await open_warehouse(manager, warehouse_id, WarehouseLevel.WAREHOUSE)
    await manager.delete_warehouse(warehouse_id)
    return None


# ============================================================================
# Zones
# ============================================================================

@router.post("/{warehouse_id}/zones", response_model=LayerNode, status_code=status.HTTP_201_CREATED)
async def create_zone(
    warehouse_id: str,
    zone_data: ZoneCreate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Add a zone with a grid of bays and shelves, optionally at a given position."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.ZONE)
    zone = Zone.create_with_layout(
        warehouse,
        zone_data.name,
        zone_data.color,
        bays=zone_data.bays,
        shelves=zone_data.shelves,
        mirror_bay_labels=zone_data.mirror_bay_labels,
        add_ground_shelves=zone_data.add_ground_shelves,
        index=zone_data.index,
    )
    # Inserting renumbers the sibling zones too
    await warehouse.stage(commit=True, min_level=WarehouseLevel.SHELF)
    return layer_node(zone)


@router.put("/{warehouse_id}/zones/{zone_id}", response_model=LayerNode)
async def update_zone(
    warehouse_id: str,
    zone_id: str,
    zone_update: ZoneUpdate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Rename or recolour a zone."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.ZONE)
    zone = find_layer(warehouse, zone_id, Zone, "Zone")
    
    update_data = zone_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(zone, field, value)

    # Trays carry the zone name in their location, so restage them too
    await zone.load_children(min_level=WarehouseLevel.TRAY)
    await zone.stage(commit=True)
    return layer_node(zone)


@router.delete("/{warehouse_id}/zones/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_zone(
    warehouse_id: str,
    zone_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Delete a zone with all of its bays, shelves, columns and trays."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.ZONE)
    zone = find_layer(warehouse, zone_id, Zone, "Zone")
    await zone.delete(commit=True)
    manager.tray_spaces.purge()
    return None
