"""Expiry range schemas."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExpiryRange(BaseModel):
    """
    Immutable expiry interval ``[from, to)`` in UTC epoch milliseconds.
    
    Both bounds null is the "indefinite" marker (never expires).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None
    label: str
    
    @model_validator(mode="after")
    def check_bounds(self):
        if (self.from_ is None) != (self.to is None):
            raise ValueError("Expiry range bounds must both be set or both be null")
        if self.from_ is not None and self.from_ >= self.to:
            raise ValueError("Expiry range must end after it starts")
        return self
    
    @property
    def is_indefinite(self) -> bool:
        return self.from_ is None
    
    def to_fields(self) -> dict:
        """Record stored on a tray document."""
        return self.model_dump(by_alias=True)


class SimpleExpiry(BaseModel):
    """Calendar description of an expiry: a year, optionally narrowed to a quarter or month."""
    year: int = Field(..., ge=1970, le=9999)
    quarter: Optional[int] = Field(None, ge=1, le=4)
    month: Optional[int] = Field(None, ge=1, le=12)
    
    @model_validator(mode="after")
    def check_precision(self):
        if self.quarter is not None and self.month is not None:
            raise ValueError("Give either a quarter or a month, not both")
        return self
