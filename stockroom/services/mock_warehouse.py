"""Random warehouse generation for demos and seeding."""
import logging
import random
from typing import Optional

from stockroom.layers import Bay, Column, Shelf, Tray, Warehouse, Zone
from stockroom.schemas.category import Category
from stockroom.services.document_store import DocumentStore
from stockroom.services.expiry import month_range, never, quarter_range, year_range

logger = logging.getLogger(__name__)

CATEGORY_NAMES = [
    "Baby Care", "Baby Food", "Nappies", "Beans", "Biscuits", "Cereal", "Choc/Sweet", "Coffee", "Cleaning", "Custard",
    "Feminine Hygiene", "Fish", "Fruit", "Fruit Juice", "Hot Choc", "Instant Meals", "Jam", "Meat", "Milk", "Misc",
    "Pasta", "Pasta Sauce", "Pet Food", "Potatoes", "Rice", "Rice Pud.", "Savoury Treats", "Soup", "Spaghetti",
    "Sponge Pud.", "Sugar", "Tea Bags", "Toiletries", "Tomatoes", "Vegetables", "Christmas",
]

AISLE_ZONES = [
    {"name": "White", "color": "#ffffff"},
    {"name": "Yellow", "color": "#f0e68c"},
    {"name": "Green", "color": "#4caf50"},
    {"name": "Blue", "color": "#2196f3"},
]

END_ZONES = [
    {"name": "Red", "color": "#f44336"},
    {"name": "Pink", "color": "#ff69b4"},
]

TRAY_EXPIRIES = [
    never(),
    month_range(2020, 2),
    month_range(2020, 3),
    quarter_range(2020, 1),
    quarter_range(2020, 2),
    year_range(2020),
    year_range(2021),
] + [year_range(2022 + j) for j in range(10)]


def generate_random_warehouse(
    store: DocumentStore,
    name: str,
    id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Warehouse:
    """
    Build an unstaged warehouse down to tray level.
    
    Aisle zones get five bays of five shelves, end zones two bays of four;
    every shelf has four columns of capacity three holding three trays.
    """
    rng = rng or random.Random()
    warehouse = Warehouse.create(store, name, id)
    categories = [
        warehouse.add_category(Category(name=category_name, under_stock_threshold=0, over_stock_threshold=100))
        for category_name in CATEGORY_NAMES
    ]

    def make_random_tray(column: Column):
        category = None if rng.random() < 0.25 else rng.choice(categories)
        expiry = None if rng.random() < 0.25 else rng.choice(TRAY_EXPIRIES)
        weight = None if rng.random() < 0.25 else round(15 * rng.random(), 2)
        comment = "This is a custom comment, it might be very long" if rng.random() < 0.1 else None
        Tray.create(column, category, expiry, weight, comment)

    def build_zones(zone_specs, bay_count, shelf_count, picking_shelf):
        for zone_spec in zone_specs:
            zone = Zone.create(warehouse, zone_spec["name"], zone_spec["color"])
            for j in range(bay_count):
                bay = Bay.create(zone, chr(65 + j))
                for k in range(shelf_count):
                    shelf = Shelf.create(bay, str(k + 1), k == picking_shelf)
                    for _ in range(4):
                        column = Column.create(shelf, max_height=3)
                        for _ in range(3):
                            make_random_tray(column)

    build_zones(AISLE_ZONES, 5, 5, picking_shelf=1)
    build_zones(END_ZONES, 2, 4, picking_shelf=None)

    logger.info("Generated warehouse %s with %d trays", name, len(warehouse.trays))
    return warehouse
