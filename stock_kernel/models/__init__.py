"""ORM models, one per record-store collection."""

from stock_kernel.models.app_user import AppUserModel
from stock_kernel.models.inventory_item import InventoryItemModel
from stock_kernel.models.location import LocationModel
from stock_kernel.models.transaction import TransactionModel

__all__ = [
    "AppUserModel",
    "InventoryItemModel",
    "LocationModel",
    "TransactionModel",
]
