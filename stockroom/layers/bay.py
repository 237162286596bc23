"""Bay layer."""
from typing import List, Optional

from stockroom.layers.base import MiddleLayer, WarehouseLevel, now_millis
from stockroom.layers.shelf import Shelf


def bay_label(number: int) -> str:
    """Letters for the bay at ``number``: A..Z, then BA, BB.. (base 26 with A as zero)."""
    label = ""
    while True:
        number, digit = divmod(number, 26)
        label = chr(ord("A") + digit) + label
        if number == 0:
            return label


class Bay(MiddleLayer):
    level = WarehouseLevel.BAY
    collection_name = "bays"
    child_class = Shelf

    @classmethod
    def create(cls, parent, name: str, index: Optional[int] = None) -> "Bay":
        return cls.create_child_of(parent, {
            "index": len(parent.children),
            "last_modified": now_millis(),
            "name": name,
        }, index)

    @property
    def name(self) -> str:
        return self.fields.get("name", "")

    @name.setter
    def name(self, name: str):
        self.fields["name"] = name

    @property
    def shelves(self) -> List[Shelf]:
        return self.children

    @property
    def columns(self):
        return self.descendants(WarehouseLevel.COLUMN)

    @property
    def trays(self):
        return self.descendants(WarehouseLevel.TRAY)
