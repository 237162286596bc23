import random

from stockroom.layers import WarehouseLevel
from stockroom.services.mock_warehouse import CATEGORY_NAMES, generate_random_warehouse
from stockroom.services.warehouse_manager import WarehouseManager


def test_generated_layout(store):
    warehouse = generate_random_warehouse(store, "Demo", rng=random.Random(7))

    assert [zone.name for zone in warehouse.zones] == ["White", "Yellow", "Green", "Blue", "Red", "Pink"]
    assert len(warehouse.bays) == 4 * 5 + 2 * 2
    assert len(warehouse.shelves) == 4 * 5 * 5 + 2 * 2 * 4
    assert all(len(column.trays) == column.max_height == 3 for column in warehouse.columns)
    assert len(warehouse.trays) == len(warehouse.columns) * 3
    assert [category.name for category in warehouse.categories] == CATEGORY_NAMES

    picking = [shelf for shelf in warehouse.shelves if shelf.is_picking_area]
    assert {shelf.name for shelf in picking} == {"2"}
    assert len(picking) == 4 * 5


def test_generation_is_reproducible(store):
    first = generate_random_warehouse(store, "Demo", rng=random.Random(42))
    second = generate_random_warehouse(store, "Demo", rng=random.Random(42))
    assert [tray.weight for tray in first.trays] == [tray.weight for tray in second.trays]
    assert [tray.category.name if tray.category else None for tray in first.trays] == \
        [tray.category.name if tray.category else None for tray in second.trays]


async def test_generated_warehouse_can_be_opened(store):
    warehouse = generate_random_warehouse(store, "Demo", id="demo", rng=random.Random(1))
    await warehouse.stage(commit=True, min_level=WarehouseLevel.SHELF)

    manager = WarehouseManager(store)
    opened = await manager.open_warehouse("demo")
    assert opened.name == "Demo"
    assert len(opened.shelves) == len(warehouse.shelves)
    assert len(opened.categories) == len(CATEGORY_NAMES)
