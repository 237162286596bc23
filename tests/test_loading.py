import pytest

from stockroom.exceptions import NotFoundError, PartialLoadError, StoreError
from stockroom.layers import Warehouse, WarehouseLevel


async def reload(store, warehouse_id, **kwargs):
    warehouse = Warehouse.reference(store, warehouse_id)
    await warehouse.load()
    await warehouse.load_children(**kwargs)
    return warehouse


async def test_loading_a_missing_warehouse_raises(store):
    with pytest.raises(NotFoundError):
        await Warehouse.reference(store, "missing").load()


async def test_created_warehouse_does_not_hit_the_store(store):
    # Never persisted, but its fields are already resident
    warehouse = Warehouse.create(store, "Fresh")
    assert await warehouse.load() is warehouse


async def test_load_stops_at_min_level(store, saved_warehouse):
    reloaded = await reload(store, saved_warehouse.id, min_level=WarehouseLevel.SHELF)
    assert len(reloaded.shelves) == 6
    assert all(not shelf.is_deep_loaded for shelf in reloaded.shelves)
    assert reloaded.columns == []
    assert not any(node.is_dirty() for node in [reloaded, *reloaded.zones, *reloaded.shelves])


async def test_flat_load_only_loads_direct_children(store, saved_warehouse):
    reloaded = await reload(store, saved_warehouse.id, flat=True)
    assert [zone.name for zone in reloaded.zones] == ["Red", "Blue"]
    assert not reloaded.zones[0].is_deep_loaded


async def test_children_are_sorted_by_index(store, saved_warehouse):
    red, blue = saved_warehouse.zones
    saved_warehouse.remove_child(blue)
    saved_warehouse.add_child(blue, 0)
    await saved_warehouse.stage(commit=True, min_level=WarehouseLevel.ZONE)

    reloaded = await reload(store, saved_warehouse.id, min_level=WarehouseLevel.ZONE)
    assert [(zone.name, zone.index) for zone in reloaded.zones] == [("Blue", 0), ("Red", 1)]


async def test_deeper_load_keeps_resident_nodes(store, saved_warehouse):
    reloaded = await reload(store, saved_warehouse.id, min_level=WarehouseLevel.SHELF)
    shelves = reloaded.shelves

    await reloaded.load_children()
    assert reloaded.shelves == shelves
    assert all(a is b for a, b in zip(reloaded.shelves, shelves))
    assert len(reloaded.trays) == 24
    assert reloaded.trays[0].location_name == "Red A1"


async def test_loaded_layers_resolve_categories(store, saved_warehouse):
    reloaded = await reload(store, saved_warehouse.id)
    assert reloaded.trays[0].category.name == "Beans"
    assert reloaded.trays[1].category.name == "Soup"
    assert reloaded.trays[0].expiry.label == "2024"


async def test_failed_subtree_stays_flat(store, saved_warehouse):
    bay = saved_warehouse.zones[0].bays[0]
    store.fail_collections.add(bay.child_collection_path)

    reloaded = Warehouse.reference(store, saved_warehouse.id)
    await reloaded.load()
    with pytest.raises(PartialLoadError) as exc_info:
        await reloaded.load_children()

    assert [path for path, _ in exc_info.value.failures] == [bay.path]
    failed = reloaded.find_descendant(bay.id)
    assert not failed.is_deep_loaded
    # Siblings are loaded regardless
    assert len(reloaded.zones[0].bays[1].trays) == 8
    assert len(reloaded.zones[1].trays) == 8

    store.fail_collections.clear()
    await reloaded.load_children()
    assert len(reloaded.trays) == 24


async def test_failure_at_the_top_leaves_the_warehouse_flat(store, saved_warehouse):
    store.fail_collections.add(saved_warehouse.child_collection_path)

    reloaded = Warehouse.reference(store, saved_warehouse.id)
    await reloaded.load()
    with pytest.raises(StoreError):
        await reloaded.load_children()
    assert not reloaded.is_deep_loaded
