"""Script to seed the database with randomly generated warehouses."""
import asyncio
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stockroom.database import SessionLocal, engine, Base
from stockroom.services.document_store import SqlDocumentStore
from stockroom.services.mock_warehouse import generate_random_warehouse
from stockroom.services.warehouse_manager import WarehouseManager

WAREHOUSE_NAMES = ["Chester-le-Street", "Sunderland"]


async def seed_warehouses():
    """Create the demo warehouses if none exist."""
    # Create tables
    Base.metadata.create_all(bind=engine)
    
    manager = WarehouseManager(SqlDocumentStore(SessionLocal))
    try:
        existing = await manager.load_warehouses()
        if existing:
            print(f"Warehouses already exist: {', '.join(w.name for w in existing)}")
            return
        
        for name in WAREHOUSE_NAMES:
            warehouse = generate_random_warehouse(manager.store, name)
            written = await warehouse.stage(force_stage=True, commit=True)
            manager.register(warehouse)
            print(f"Created {name}: {written} documents")
    finally:
        manager.close()


if __name__ == "__main__":
    asyncio.run(seed_warehouses())
