import pytest

from stockroom.exceptions import NotFoundError
from stockroom.layers import WarehouseLevel
from stockroom.services.warehouse_manager import WarehouseManager


@pytest.fixture
def manager(store):
    return WarehouseManager(store)


async def test_created_warehouses_are_listed_by_name(store, manager):
    await manager.create_warehouse("Sunderland")
    await manager.create_warehouse("Chester-le-Street")

    other = WarehouseManager(store)
    warehouses = await other.load_warehouses()
    assert [warehouse.name for warehouse in warehouses] == ["Chester-le-Street", "Sunderland"]
    assert all(not warehouse.is_deep_loaded for warehouse in warehouses)


async def test_open_warehouse_refreshes_the_list(store, saved_warehouse, manager):
    assert manager.get(saved_warehouse.id) is None

    warehouse = await manager.open_warehouse(saved_warehouse.id)
    assert manager.get(saved_warehouse.id) is warehouse
    assert len(warehouse.shelves) == 6
    assert not warehouse.shelves[0].is_deep_loaded


async def test_open_warehouse_to_tray_level(saved_warehouse, manager):
    warehouse = await manager.open_warehouse(saved_warehouse.id, WarehouseLevel.TRAY)
    assert len(warehouse.trays) == 24


async def test_open_unknown_warehouse(manager):
    with pytest.raises(NotFoundError):
        await manager.open_warehouse("missing")


async def test_delete_warehouse_removes_everything(store, saved_warehouse, manager):
    await manager.open_warehouse(saved_warehouse.id)
    await manager.delete_warehouse(saved_warehouse.id)

    assert manager.get(saved_warehouse.id) is None
    assert await store.load_document(saved_warehouse.path) is None
    assert await store.load_collection(saved_warehouse.child_collection_path) == []
    assert await WarehouseManager(store).load_warehouses() == []


async def test_delete_unknown_warehouse(manager):
    with pytest.raises(NotFoundError):
        await manager.delete_warehouse("missing")


async def test_close_forgets_the_session(saved_warehouse, manager):
    manager.register(saved_warehouse)
    manager.tray_spaces.get_padded_cells(saved_warehouse.columns[0])

    manager.close()
    assert manager.warehouse_list == []
    assert len(manager.tray_spaces) == 0


async def test_refresh_drops_the_resident_tree(store, saved_warehouse, manager):
    warehouse = await manager.open_warehouse(saved_warehouse.id, WarehouseLevel.TRAY)
    stale_zone = warehouse.zones[0]
    manager.tray_spaces.get_padded_cells(warehouse.columns[0])

    other = WarehouseManager(store)
    elsewhere = await other.open_warehouse(saved_warehouse.id, WarehouseLevel.ZONE)
    elsewhere.zones[0].name = "Crimson"
    await elsewhere.stage(commit=True)

    assert (await manager.open_warehouse(saved_warehouse.id)).zones[0].name == "Red"

    refreshed = await manager.open_warehouse(saved_warehouse.id, WarehouseLevel.ZONE, refresh=True)
    assert refreshed is warehouse
    assert refreshed.zones[0].name == "Crimson"
    assert refreshed.zones[0] is not stale_zone
    assert not refreshed.zones[0].is_deep_loaded
    assert len(manager.tray_spaces) == 0
