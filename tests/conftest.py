import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stockroom.database import Base
from stockroom.exceptions import StageConflictError, StoreError
from stockroom.layers import Bay, Column, Shelf, Tray, Warehouse, Zone
from stockroom.schemas.category import Category
from stockroom.services.document_store import SqlDocumentStore
from stockroom.services.expiry import year_range
import stockroom.models  # noqa: F401  registers the documents table


class RecordingStore(SqlDocumentStore):
    """SQL store that records writes and can be told to fail."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.writes = []
        self.fail_commits = False
        self.fail_collections = set()

    def set(self, path, fields):
        self.writes.append(path)
        super().set(path, fields)

    async def load_collection(self, path, order_by=None):
        if path in self.fail_collections:
            raise StoreError(f"unavailable: {path}")
        return await super().load_collection(path, order_by)

    async def _apply(self, operations):
        if self.fail_commits:
            raise StageConflictError("rejected")
        await super()._apply(operations)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return RecordingStore(session_factory)


def build_warehouse(store) -> Warehouse:
    """
    Two zones, three bays, six shelves, twelve columns and 24 trays.

    Every shelf has a column capped at three trays and an uncapped one, each
    holding two trays.
    """
    warehouse = Warehouse.create(store, "Durham")
    beans = warehouse.add_category(Category(name="Beans"))
    soup = warehouse.add_category(Category(name="Soup"))

    for zone_name, color, bay_names in (("Red", "#ff0000", "AB"), ("Blue", "#0000ff", "A")):
        zone = Zone.create(warehouse, zone_name, color)
        for bay_name in bay_names:
            bay = Bay.create(zone, bay_name)
            for shelf_name in ("1", "2"):
                shelf = Shelf.create(bay, shelf_name)
                for max_height in (3, None):
                    column = Column.create(shelf, max_height=max_height)
                    Tray.create(column, beans, year_range(2024), 5.0)
                    Tray.create(column, soup, None, None, "dented")
    return warehouse


@pytest.fixture
def warehouse(store):
    return build_warehouse(store)


@pytest.fixture
async def saved_warehouse(store):
    warehouse = build_warehouse(store)
    await warehouse.stage(commit=True)
    store.writes.clear()
    return warehouse
