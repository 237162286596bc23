"""Category schemas for request/response validation."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from stockroom.schemas.expiry import ExpiryRange


class CategoryBase(BaseModel):
    """Base category schema."""
    name: str = Field(..., min_length=1, max_length=100)
    short_name: Optional[str] = Field(None, max_length=20)
    under_stock_threshold: Optional[int] = Field(None, ge=0)
    over_stock_threshold: Optional[int] = Field(None, ge=0)
    group: Optional[str] = None
    default_expiry: Optional[ExpiryRange] = None


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""
    pass


class CategoryUpdate(BaseModel):
    """
    Schema for updating a category.
    
    ``name`` may be left out but not cleared.
    """
    name: str = Field(None, min_length=1, max_length=100)
    short_name: Optional[str] = Field(None, max_length=20)
    under_stock_threshold: Optional[int] = Field(None, ge=0)
    over_stock_threshold: Optional[int] = Field(None, ge=0)
    group: Optional[str] = None
    default_expiry: Optional[ExpiryRange] = None


class Category(CategoryBase):
    """
    A tray category as stored on its warehouse.
    
    Trays reference categories by ``id`` only, so editing a category never
    rewrites trays.
    """
    model_config = ConfigDict(frozen=True)
    
    id: str = ""
    index: int = 0
    
    def to_fields(self) -> dict:
        """Record stored in the warehouse's category mapping (keyed by id)."""
        return self.model_dump(exclude={"id"}, by_alias=True)
