"""Warehouse layer schemas for request/response validation."""
from typing import Optional, List
from pydantic import BaseModel, Field


class WarehouseCreate(BaseModel):
    """Schema for creating a warehouse."""
    name: str = Field(..., min_length=1, max_length=100)


class WarehouseSummary(BaseModel):
    """Schema for a warehouse in the warehouse list."""
    id: str
    name: str
    last_modified: Optional[int] = None


class LayerNode(BaseModel):
    """
    A node of the warehouse tree as loaded.
    
    ``children`` is None when the node's children are not loaded, which is
    different from an empty list.
    """
    id: str
    level: str
    index: int
    name: Optional[str] = None
    color: Optional[str] = None
    max_height: Optional[int] = None
    children: Optional[List["LayerNode"]] = None


class WarehouseTree(WarehouseSummary):
    """Schema for a warehouse with its loaded layers."""
    zones: Optional[List[LayerNode]] = None


class ZoneCreate(BaseModel):
    """Schema for creating a zone."""
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#000000", pattern=r"^#[0-9a-fA-F]{6}$")
    index: Optional[int] = Field(None, ge=0)
    # Layout built with the zone
    bays: int = Field(1, ge=1, le=100)
    shelves: int = Field(1, ge=1, le=50)
    mirror_bay_labels: bool = False
    add_ground_shelves: bool = False


class ZoneUpdate(BaseModel):
    """Schema for updating a zone."""
    name: str = Field(None, min_length=1, max_length=100)
    color: str = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")


LayerNode.model_rebuild()
