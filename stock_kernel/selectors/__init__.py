"""Read-only selectors over the client caches."""

from stock_kernel.selectors.inventory_selector import InventorySelector, ItemTotal
from stock_kernel.selectors.transaction_selector import (
    DailySummary,
    ReportTotals,
    TransactionSelector,
    TransferGroupView,
)

__all__ = [
    "DailySummary",
    "InventorySelector",
    "ItemTotal",
    "ReportTotals",
    "TransactionSelector",
    "TransferGroupView",
]
