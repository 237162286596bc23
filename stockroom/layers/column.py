"""Column layer - a stack of trays on a shelf."""
from typing import List, Optional

from stockroom.layers.base import MiddleLayer, WarehouseLevel, now_millis
from stockroom.layers.tray import Tray


class Column(MiddleLayer):
    """A column of trays; ``max_height`` is its tray capacity (None when uncapped)."""
    level = WarehouseLevel.COLUMN
    collection_name = "columns"
    child_class = Tray

    @classmethod
    def create(cls, parent, max_height: Optional[int] = None, size: Optional[str] = None,
               index: Optional[int] = None) -> "Column":
        return cls.create_child_of(parent, {
            "index": len(parent.children),
            "last_modified": now_millis(),
            "max_height": max_height,
            "size": size,
        }, index)

    @property
    def max_height(self) -> Optional[int]:
        return self.fields.get("max_height")

    @max_height.setter
    def max_height(self, max_height: Optional[int]):
        self.fields["max_height"] = max_height

    @property
    def size(self) -> Optional[str]:
        return self.fields.get("size")

    @size.setter
    def size(self, size: Optional[str]):
        self.fields["size"] = size

    @property
    def trays(self) -> List[Tray]:
        return self.children
