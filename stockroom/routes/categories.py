"""Category routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from stockroom.dependencies import get_manager
from stockroom.exceptions import NotFoundError
from stockroom.layers import WarehouseLevel
from stockroom.routes.warehouses import open_warehouse
from stockroom.schemas.category import Category, CategoryCreate, CategoryUpdate
from stockroom.services.warehouse_manager import WarehouseManager

router = APIRouter(prefix="/warehouses/{warehouse_id}/categories", tags=["Categories"])


@router.get("/", response_model=List[Category])
async def list_categories(
    warehouse_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """List the tray categories of a warehouse in display order."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.WAREHOUSE)
    return warehouse.categories


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    warehouse_id: str,
    category_data: CategoryCreate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Add a category to the end of the list."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.WAREHOUSE)
    category = warehouse.add_category(Category(**category_data.model_dump()))
    await warehouse.stage(commit=True, min_level=WarehouseLevel.WAREHOUSE)
    return category


@router.put("/{category_id}", response_model=Category)
async def update_category(
    warehouse_id: str,
    category_id: str,
    category_update: CategoryUpdate,
    manager: WarehouseManager = Depends(get_manager)
):
    """Edit a category. Trays keep pointing at it by id."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.WAREHOUSE)
    category = warehouse.get_category_by_id(category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    
    update_data = {field: getattr(category_update, field) for field in category_update.model_fields_set}
    try:
        edited = Category.model_validate({**dict(category), **update_data})
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"loc": error["loc"], "msg": error["msg"]} for error in e.errors()]
        )
    category = warehouse.edit_category(category_id, edited)
    await warehouse.stage(commit=True, min_level=WarehouseLevel.WAREHOUSE)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    warehouse_id: str,
    category_id: str,
    manager: WarehouseManager = Depends(get_manager)
):
    """Delete a category; trays that used it become uncategorised."""
    warehouse = await open_warehouse(manager, warehouse_id, WarehouseLevel.WAREHOUSE)
    try:
        warehouse.remove_category(category_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    await warehouse.stage(commit=True, min_level=WarehouseLevel.WAREHOUSE)
    return None
