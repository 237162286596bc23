"""Tray layer - the leaf of the warehouse tree."""
from typing import Optional

from stockroom.layers.base import BottomLayer, WarehouseLevel, now_millis
from stockroom.schemas.category import Category
from stockroom.schemas.expiry import ExpiryRange

NULL_CATEGORY_ID = ""


class Tray(BottomLayer):
    """
    A tray of stock within a column.
    
    The category is stored as the id of a category on the warehouse, and
    ``location_name`` is a denormalized copy of the shelf name that is
    refreshed every time the tray is staged.
    """
    level = WarehouseLevel.TRAY
    collection_name = "trays"

    @classmethod
    def create(
        cls,
        parent,
        category: Optional[Category] = None,
        expiry: Optional[ExpiryRange] = None,
        weight: Optional[float] = None,
        comment: Optional[str] = None,
        index: Optional[int] = None,
    ) -> "Tray":
        return cls.create_child_of(parent, {
            "index": len(parent.children),
            "last_modified": now_millis(),
            "location_name": "",
            "category_id": category.id if category else NULL_CATEGORY_ID,
            "expiry": expiry.to_fields() if expiry else None,
            "weight": weight,
            "comment": comment,
        }, index)

    def __str__(self):
        category = self.category.name if self.category else "Mixed"
        expiry = self.expiry.label if self.expiry else "?"
        return f"Tray({self.index}, {category}, {expiry}, {self.weight} kg, {self.comment!r})"

    def before_stage(self) -> None:
        shelf = self.parent_shelf
        if shelf is not None:
            self.fields["location_name"] = str(shelf)

    @property
    def category_id(self) -> str:
        return self.fields.get("category_id") or NULL_CATEGORY_ID

    @property
    def category(self) -> Optional[Category]:
        warehouse = self.parent_warehouse
        if warehouse is None or not self.category_id:
            return None
        return warehouse.get_category_by_id(self.category_id)

    @category.setter
    def category(self, category: Optional[Category]):
        self.fields["category_id"] = category.id if category else NULL_CATEGORY_ID

    @property
    def expiry(self) -> Optional[ExpiryRange]:
        expiry = self.fields.get("expiry")
        return ExpiryRange.model_validate(expiry) if expiry else None

    @expiry.setter
    def expiry(self, expiry: Optional[ExpiryRange]):
        self.fields["expiry"] = expiry.to_fields() if expiry else None

    @property
    def weight(self) -> Optional[float]:
        return self.fields.get("weight")

    @weight.setter
    def weight(self, weight: Optional[float]):
        self.fields["weight"] = weight

    @property
    def comment(self) -> Optional[str]:
        return self.fields.get("comment")

    @comment.setter
    def comment(self, comment: Optional[str]):
        self.fields["comment"] = comment or None

    @property
    def location_name(self) -> str:
        return self.fields.get("location_name", "")

    @property
    def location_string(self) -> str:
        """Ordering indices from zone down to tray, e.g. ``0_2_1_3_0``."""
        return "_".join(str(layer.index) for layer in (
            self.parent_zone, self.parent_bay, self.parent_shelf, self.parent_column, self,
        ))
