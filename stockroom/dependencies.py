"""FastAPI dependencies."""
from fastapi import Request

from stockroom.services.warehouse_manager import WarehouseManager


def get_manager(request: Request) -> WarehouseManager:
    """The warehouse manager of the running application."""
    return request.app.state.manager
