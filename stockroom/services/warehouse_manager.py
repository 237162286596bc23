"""Warehouse manager - the registry of warehouses open in one session."""
import logging
from typing import Dict, List, Optional

from stockroom.exceptions import NotFoundError
from stockroom.layers import Warehouse, WarehouseLevel
from stockroom.services.document_store import DocumentStore
from stockroom.services.tray_spaces import TraySpaceCache

logger = logging.getLogger(__name__)


class WarehouseManager:
    """
    Session-scoped registry of warehouses.
    
    Created when a session starts and closed when it ends; nothing here is
    shared between sessions.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.tray_spaces = TraySpaceCache()
        self._warehouses: Dict[str, Warehouse] = {}

    @property
    def warehouse_list(self) -> List[Warehouse]:
        return list(self._warehouses.values())

    def get(self, id: str) -> Optional[Warehouse]:
        return self._warehouses.get(id)

    async def load_warehouses(self) -> List[Warehouse]:
        """Load the flat list of warehouses, replacing any previously registered."""
        documents = await self.store.load_collection(Warehouse.collection_name, order_by="name")
        self._warehouses = {
            document.id: Warehouse.create_from_fields(document.id, document.fields, self.store)
            for document in documents
        }
        logger.debug("Loaded %d warehouses", len(self._warehouses))
        return self.warehouse_list

    async def load_warehouse(
        self,
        warehouse: Warehouse,
        min_level: WarehouseLevel = WarehouseLevel.SHELF,
        refresh: bool = False,
    ) -> Warehouse:
        """
        Load a warehouse down to ``min_level``.

        With ``refresh`` the resident tree is dropped and read again from the
        store, discarding unstaged local edits.
        """
        if refresh:
            warehouse.unload_children()
            self.tray_spaces.purge()
        await warehouse.load(force_load=refresh)
        await warehouse.load_children(min_level=min_level)
        return warehouse

    async def load_warehouse_by_id(
        self, id: str, min_level: WarehouseLevel = WarehouseLevel.SHELF, refresh: bool = False
    ) -> Warehouse:
        warehouse = self._warehouses.get(id)
        if warehouse is None:
            raise NotFoundError(f"{Warehouse.collection_name}/{id}")
        return await self.load_warehouse(warehouse, min_level, refresh)

    async def open_warehouse(
        self, id: str, min_level: WarehouseLevel = WarehouseLevel.SHELF, refresh: bool = False
    ) -> Warehouse:
        """Load a warehouse by id, refreshing the warehouse list first if it is not registered."""
        if id not in self._warehouses:
            await self.load_warehouses()
        return await self.load_warehouse_by_id(id, min_level, refresh)

    async def create_warehouse(self, name: str) -> Warehouse:
        """Create and commit an empty warehouse."""
        warehouse = Warehouse.create(self.store, name)
        await warehouse.stage(commit=True)
        self._warehouses[warehouse.id] = warehouse
        logger.info("Created warehouse %s (%s)", name, warehouse.id)
        return warehouse

    def register(self, warehouse: Warehouse) -> None:
        self._warehouses[warehouse.id] = warehouse

    async def delete_warehouse(self, id: str) -> None:
        warehouse = self._warehouses.get(id)
        if warehouse is None:
            raise NotFoundError(f"{Warehouse.collection_name}/{id}")
        await warehouse.delete(commit=True)
        del self._warehouses[id]
        self.tray_spaces.purge()

    def close(self) -> None:
        """Tear down the session: forget every warehouse and cached tray space."""
        self._warehouses.clear()
        self.tray_spaces.purge()
