"""Shelf layer."""
from typing import List, Optional

from stockroom.layers.base import MiddleLayer, WarehouseLevel, now_millis
from stockroom.layers.column import Column


class Shelf(MiddleLayer):
    level = WarehouseLevel.SHELF
    collection_name = "shelves"
    child_class = Column

    @classmethod
    def create(cls, parent, name: str, is_picking_area: bool = False, index: Optional[int] = None) -> "Shelf":
        return cls.create_child_of(parent, {
            "index": len(parent.children),
            "last_modified": now_millis(),
            "name": name,
            "is_picking_area": is_picking_area,
        }, index)

    def __str__(self):
        zone = self.parent_zone
        bay = self.parent_bay
        return f"{zone.name if zone else ''} {bay.name if bay else ''}{self.name}"

    @property
    def name(self) -> str:
        return self.fields.get("name", "")

    @name.setter
    def name(self, name: str):
        self.fields["name"] = name

    @property
    def is_picking_area(self) -> bool:
        return bool(self.fields.get("is_picking_area"))

    @is_picking_area.setter
    def is_picking_area(self, is_picking_area: bool):
        self.fields["is_picking_area"] = is_picking_area

    @property
    def columns(self) -> List[Column]:
        return self.children

    @property
    def trays(self):
        return self.descendants(WarehouseLevel.TRAY)
