# Warehouse layers package
from stockroom.layers.base import WarehouseLevel, Layer, ParentLayer, TopLayer, MiddleLayer, BottomLayer, UNLOADED, Loaded
from stockroom.layers.tray import Tray, NULL_CATEGORY_ID
from stockroom.layers.column import Column
from stockroom.layers.shelf import Shelf
from stockroom.layers.bay import Bay, bay_label
from stockroom.layers.zone import Zone, GROUND_SHELF_NAME
from stockroom.layers.warehouse import Warehouse
