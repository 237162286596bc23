"""Tray and shelf view schemas for request/response validation."""
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from stockroom.schemas.expiry import ExpiryRange, SimpleExpiry


class TrayBase(BaseModel):
    """Base tray schema."""
    category_id: Optional[str] = None
    expiry: Optional[ExpiryRange] = None
    weight: Optional[float] = Field(None, ge=0)
    comment: Optional[str] = None


class TrayCreate(TrayBase):
    """Schema for adding a tray to a column."""
    expiry_period: Optional[SimpleExpiry] = None
    index: Optional[int] = Field(None, ge=0)


class TrayUpdate(BaseModel):
    """
    Schema for updating a tray.
    
    ``expiry_period`` is a calendar shorthand that takes precedence over
    ``expiry`` when both are given.
    """
    category_id: Optional[str] = None
    expiry: Optional[ExpiryRange] = None
    expiry_period: Optional[SimpleExpiry] = None
    weight: Optional[float] = Field(None, ge=0)
    comment: Optional[str] = None


class TrayResponse(TrayBase):
    """Schema for tray response."""
    id: str
    index: int
    category_name: Optional[str] = None
    location_name: str = ""
    location_string: str


class Cell(BaseModel):
    """A slot of a column: a tray or an empty space."""
    kind: Literal["tray", "space"]
    index: int
    tray: Optional[TrayResponse] = None


class ColumnCreate(BaseModel):
    """Schema for adding a column to a shelf; no ``max_height`` means uncapped."""
    max_height: Optional[int] = Field(None, ge=1)
    size: Optional[str] = Field(None, max_length=50)
    index: Optional[int] = Field(None, ge=0)


class ColumnUpdate(BaseModel):
    """Schema for updating a column."""
    max_height: Optional[int] = Field(None, ge=1)
    size: Optional[str] = Field(None, max_length=50)


class ColumnView(BaseModel):
    """A column padded with empty spaces up to its capacity."""
    id: str
    index: int
    max_height: Optional[int] = None
    size: Optional[str] = None
    cells: List[Cell] = []


class ShelfView(BaseModel):
    """Schema for the shelf view."""
    id: str
    name: str
    location: str
    is_picking_area: bool = False
    columns: List[ColumnView] = []


class SearchResponse(BaseModel):
    """Schema for tray search results."""
    total: int
    trays: List[TrayResponse] = []
