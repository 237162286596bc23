import pytest

from stockroom.exceptions import InvalidStateError, NotFoundError
from stockroom.layers import GROUND_SHELF_NAME, Bay, Column, Shelf, Tray, Warehouse, WarehouseLevel, Zone, bay_label
from stockroom.schemas.category import Category


def test_paths_follow_the_layer_collections(warehouse):
    tray = warehouse.trays[0]
    column = tray.parent_column
    assert tray.path == "/".join([
        "warehouses", warehouse.id,
        "zones", tray.parent_zone.id,
        "bays", tray.parent_bay.id,
        "shelves", tray.parent_shelf.id,
        "columns", column.id,
        "trays", tray.id,
    ])
    assert column.child_collection_path == f"{column.path}/trays"


def test_ancestor_getters_walk_up_to_each_level(warehouse):
    tray = warehouse.trays[-1]
    assert tray.parent_warehouse is warehouse
    assert tray.parent_zone.name == "Blue"
    assert tray.parent_bay.name == "A"
    assert tray.parent_shelf.name == "2"
    assert tray.parent_column.max_height is None
    assert warehouse.parent is None
    assert warehouse.zones[0].parent_column is None


def test_aggregate_getters_flatten_resident_descendants(warehouse):
    assert len(warehouse.zones) == 2
    assert len(warehouse.bays) == 3
    assert len(warehouse.shelves) == 6
    assert len(warehouse.columns) == 12
    assert len(warehouse.trays) == 24
    assert len(warehouse.zones[0].trays) == 16
    assert len(warehouse.bays[0].columns) == 4


def test_new_nodes_are_dirty_until_staged(warehouse):
    assert warehouse.is_dirty()
    assert all(tray.is_dirty() for tray in warehouse.trays)
    assert all(tray.persisted_fields is None for tray in warehouse.trays)


def test_setters_only_touch_fields(store, warehouse):
    tray = warehouse.trays[0]
    tray.weight = 12.5
    tray.comment = "top shelf"
    assert tray.fields["weight"] == 12.5
    assert tray.fields["comment"] == "top shelf"
    assert store.pending_count == 0
    assert store.writes == []


def test_location_string_uses_ordering_indices(warehouse):
    tray = warehouse.zones[0].bays[1].shelves[0].columns[1].trays[1]
    assert tray.location_string == "0_1_0_1_1"


def test_shelf_string_names_zone_bay_and_shelf(warehouse):
    assert str(warehouse.zones[0].bays[1].shelves[1]) == "Red B2"


def test_create_appends_with_dense_indices(warehouse):
    column = warehouse.columns[0]
    tray = Tray.create(column)
    assert tray.index == 2
    assert [t.index for t in column.trays] == [0, 1, 2]


def test_create_at_position_renumbers_siblings(warehouse):
    zone = Zone.create(warehouse, "Green", "#00ff00", index=0)
    assert warehouse.zones[0] is zone
    assert [z.index for z in warehouse.zones] == [0, 1, 2]
    assert [z.name for z in warehouse.zones] == ["Green", "Red", "Blue"]


def test_remove_child_renumbers_survivors(warehouse):
    bay = warehouse.bays[0]
    first, second = bay.shelves
    position = bay.remove_child(first)
    assert position == 0
    assert bay.shelves == [second]
    assert second.index == 0


def test_reading_children_of_a_flat_node_is_an_error(store):
    warehouse = Warehouse.reference(store, "unknown")
    assert not warehouse.is_deep_loaded
    with pytest.raises(InvalidStateError):
        warehouse.children
    with pytest.raises(InvalidStateError):
        Zone.create(warehouse, "Red")


def test_find_descendant_searches_resident_nodes(warehouse):
    tray = warehouse.trays[7]
    assert warehouse.find_descendant(tray.id) is tray
    assert warehouse.zones[1].find_descendant(tray.id) is None
    assert warehouse.find_descendant("missing") is None


def test_descendants_above_the_node_are_empty(warehouse):
    shelf = warehouse.shelves[0]
    assert shelf.descendants(WarehouseLevel.ZONE) == []
    assert shelf.descendants(WarehouseLevel.COLUMN) == shelf.columns


class TestCategories:

    def test_trays_reference_categories_by_id(self, warehouse):
        tray = warehouse.trays[0]
        category = warehouse.categories[0]
        assert tray.category_id == category.id
        assert tray.category == category

    def test_renaming_a_category_does_not_touch_trays(self, warehouse):
        tray = warehouse.trays[0]
        before = dict(tray.fields)
        category = tray.category
        warehouse.edit_category(category.id, category.model_copy(update={"name": "Baked Beans"}))
        assert tray.fields == before
        assert tray.category.name == "Baked Beans"

    def test_removing_a_category_renumbers_and_uncategorises(self, warehouse):
        beans, soup = warehouse.categories
        tray = warehouse.trays[0]
        warehouse.remove_category(beans.id)
        assert tray.category is None
        assert [c.name for c in warehouse.categories] == ["Soup"]
        assert warehouse.categories[0].index == 0

    def test_removing_an_unknown_category_raises(self, warehouse):
        with pytest.raises(NotFoundError):
            warehouse.remove_category("nope")

    def test_category_id_lookup(self, warehouse):
        soup = warehouse.categories[1]
        assert warehouse.get_category_id(soup) == soup.id
        assert warehouse.get_category_id(Category(name="Soup")) == soup.id
        assert warehouse.get_category_id(None) == ""

    def test_setting_tray_category(self, warehouse):
        tray = warehouse.trays[0]
        soup = warehouse.categories[1]
        tray.category = soup
        assert tray.fields["category_id"] == soup.id
        tray.category = None
        assert tray.fields["category_id"] == ""
        assert tray.category is None


def test_layer_levels_are_ordered():
    assert Tray.level < Column.level < Shelf.level < Bay.level < Zone.level < Warehouse.level
    assert Column.child_class is Tray
    assert Warehouse.child_class is Zone


@pytest.mark.parametrize("number, label", [(0, "A"), (1, "B"), (25, "Z"), (26, "BA"), (27, "BB")])
def test_bay_labels(number, label):
    assert bay_label(number) == label


def test_zone_layout(warehouse):
    zone = Zone.create_with_layout(warehouse, "Green", "#00ff00", bays=3, shelves=2)
    assert [bay.name for bay in zone.bays] == ["A", "B", "C"]
    assert [shelf.name for shelf in zone.bays[0].shelves] == ["1", "2"]
    assert zone.index == 2
    assert all(shelf.is_deep_loaded and shelf.columns == [] for shelf in zone.shelves)


def test_zone_layout_with_mirrored_bays_and_ground_shelves(warehouse):
    zone = Zone.create_with_layout(
        warehouse, "Green", bays=3, shelves=3, mirror_bay_labels=True, add_ground_shelves=True, index=0,
    )
    assert [bay.name for bay in zone.bays] == ["C", "B", "A"]
    assert [shelf.name for shelf in zone.bays[0].shelves] == [GROUND_SHELF_NAME, "1", "2"]
    assert [z.index for z in warehouse.zones] == [0, 1, 2]
    assert warehouse.zones[0] is zone


def test_zone_layout_has_at_least_one_bay_and_shelf(warehouse):
    zone = Zone.create_with_layout(warehouse, "Green", bays=0, shelves=-2, mirror_bay_labels=True)
    assert [bay.name for bay in zone.bays] == ["A"]
    assert [shelf.name for shelf in zone.shelves] == ["1"]
