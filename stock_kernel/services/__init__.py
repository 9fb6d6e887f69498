"""Kernel services: record store, write queue, caches and client state."""

from stock_kernel.services.client_state import ClientState
from stock_kernel.services.inventory_repository import InventoryRepository
from stock_kernel.services.record_store import (
    Collection,
    RecordStore,
    SqlAlchemyRecordStore,
)
from stock_kernel.services.transaction_log import TransactionLog
from stock_kernel.services.write_queue import (
    FlushResult,
    PendingWrite,
    WriteKind,
    WriteQueue,
)

__all__ = [
    "ClientState",
    "Collection",
    "FlushResult",
    "InventoryRepository",
    "PendingWrite",
    "RecordStore",
    "SqlAlchemyRecordStore",
    "TransactionLog",
    "WriteKind",
    "WriteQueue",
]
