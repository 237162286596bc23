"""Warehouse layer - the root of the tree, owning zones and tray categories."""
from typing import Any, Dict, List, Optional

from stockroom.exceptions import NotFoundError
from stockroom.layers.base import TopLayer, WarehouseLevel, generate_id, now_millis
from stockroom.layers.zone import Zone
from stockroom.schemas.category import Category
from stockroom.services.document_store import DocumentStore


class Warehouse(TopLayer):
    """
    A warehouse and its tray categories.
    
    Categories are stored on the warehouse document keyed by a stable id;
    trays hold only that id.
    """
    level = WarehouseLevel.WAREHOUSE
    collection_name = "warehouses"
    child_class = Zone

    @classmethod
    def create(cls, store: DocumentStore, name: str, id: Optional[str] = None) -> "Warehouse":
        """A new, never persisted warehouse with no zones."""
        warehouse = cls(id or generate_id(), {
            "last_modified": now_millis(),
            "name": name,
            "categories": {},
        }, store)
        warehouse.loaded = True
        warehouse.mark_children_loaded()
        return warehouse

    @classmethod
    def create_from_fields(cls, id: str, fields: Dict[str, Any], store: DocumentStore) -> "Warehouse":
        warehouse = cls(id, fields, store)
        warehouse.fields_saved()
        warehouse.loaded = True
        return warehouse

    @classmethod
    def reference(cls, store: DocumentStore, id: str) -> "Warehouse":
        """An unloaded handle on a stored warehouse; call ``load`` before use."""
        return cls(id, {}, store)

    def __str__(self):
        return self.name

    @property
    def name(self) -> str:
        return self.fields.get("name", "")

    @name.setter
    def name(self, name: str):
        self.fields["name"] = name

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @property
    def _category_fields(self) -> Dict[str, Dict[str, Any]]:
        return self.fields.setdefault("categories", {})

    @property
    def categories(self) -> List[Category]:
        categories = [
            Category.model_validate({**fields, "id": category_id})
            for category_id, fields in self._category_fields.items()
        ]
        return sorted(categories, key=lambda category: category.index)

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        fields = self._category_fields.get(category_id)
        if fields is None:
            return None
        return Category.model_validate({**fields, "id": category_id})

    def get_category_id(self, category: Optional[Category]) -> str:
        if category is None:
            return ""
        if category.id in self._category_fields:
            return category.id
        # A category built without an id, match it by value
        for candidate in self.categories:
            if candidate.model_copy(update={"id": "", "index": 0}) == category.model_copy(update={"id": "", "index": 0}):
                return candidate.id
        return ""

    def add_category(self, category: Category) -> Category:
        category_id = generate_id()
        stored = category.model_copy(update={"id": category_id, "index": len(self._category_fields)})
        self._category_fields[category_id] = stored.to_fields()
        return stored

    def edit_category(self, category_id: str, category: Category) -> Category:
        current = self._category_fields.get(category_id)
        if current is None:
            raise NotFoundError(f"{self.path}#categories/{category_id}")
        stored = category.model_copy(update={"id": category_id, "index": current.get("index", 0)})
        self._category_fields[category_id] = stored.to_fields()
        return stored

    def remove_category(self, category_id: str) -> None:
        """Remove a category; trays still pointing at it read as uncategorised."""
        if self._category_fields.pop(category_id, None) is None:
            raise NotFoundError(f"{self.path}#categories/{category_id}")
        for i, category in enumerate(self.categories):
            self._category_fields[category.id]["index"] = i

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    @property
    def zones(self) -> List[Zone]:
        return self.children

    @property
    def bays(self):
        return self.descendants(WarehouseLevel.BAY)

    @property
    def shelves(self):
        return self.descendants(WarehouseLevel.SHELF)

    @property
    def columns(self):
        return self.descendants(WarehouseLevel.COLUMN)

    @property
    def trays(self):
        return self.descendants(WarehouseLevel.TRAY)
