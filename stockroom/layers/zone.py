"""Zone layer - a coloured area of the warehouse containing bays."""
from typing import List, Optional

from stockroom.layers.base import MiddleLayer, WarehouseLevel, now_millis
from stockroom.layers.bay import Bay, bay_label
from stockroom.layers.shelf import Shelf

GROUND_SHELF_NAME = "G"


class Zone(MiddleLayer):
    level = WarehouseLevel.ZONE
    collection_name = "zones"
    child_class = Bay

    @classmethod
    def create(cls, parent, name: str, color: str = "#000000", index: Optional[int] = None) -> "Zone":
        return cls.create_child_of(parent, {
            "index": len(parent.children),
            "last_modified": now_millis(),
            "name": name,
            "color": color,
        }, index)

    @classmethod
    def create_with_layout(
        cls,
        parent,
        name: str,
        color: str = "#000000",
        bays: int = 1,
        shelves: int = 1,
        mirror_bay_labels: bool = False,
        add_ground_shelves: bool = False,
        index: Optional[int] = None,
    ) -> "Zone":
        """
        Create a zone filled with ``bays`` bays of ``shelves`` shelves each.

        Bays are lettered from A, or from the far end with ``mirror_bay_labels``.
        Shelves are numbered from 1; with ``add_ground_shelves`` the lowest
        shelf of each bay is the ground shelf "G" and numbering starts above it.
        """
        bays, shelves = max(bays, 1), max(shelves, 1)
        zone = cls.create(parent, name, color, index)
        for i in range(bays):
            bay = Bay.create(zone, bay_label(bays - i - 1 if mirror_bay_labels else i))
            for j in range(shelves):
                if add_ground_shelves:
                    shelf_name = GROUND_SHELF_NAME if j == 0 else str(j)
                else:
                    shelf_name = str(j + 1)
                Shelf.create(bay, shelf_name)
        return zone

    @property
    def name(self) -> str:
        return self.fields.get("name", "")

    @name.setter
    def name(self, name: str):
        self.fields["name"] = name

    @property
    def color(self) -> str:
        return self.fields.get("color", "#000000")

    @color.setter
    def color(self, color: str):
        self.fields["color"] = color

    @property
    def bays(self) -> List[Bay]:
        return self.children

    @property
    def shelves(self):
        return self.descendants(WarehouseLevel.SHELF)

    @property
    def columns(self):
        return self.descendants(WarehouseLevel.COLUMN)

    @property
    def trays(self):
        return self.descendants(WarehouseLevel.TRAY)
