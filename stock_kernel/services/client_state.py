"""
Module: stock_kernel.services.client_state
Responsibility: One client's view of the system.  Composes the write queue,
    the inventory cache, the transaction log and the user/location records;
    loads them from the record store, drains pending writes, and resyncs from
    the store when a write fails.
Architecture position: Kernel > Services.  The object every orchestrator in
    stock_modules is constructed around.

Invariants enforced:
    - Placeholder ids are reconciled in every cache the moment the store
      assigns an id.
    - After a failed flush no optimistic state survives: pending writes are
      discarded and every cache is re-read from the store before the error
      reaches the caller.

Failure modes:
    - PersistenceFailedError from ``flush()`` (after resync).
    - PersistenceError from ``load()`` if the store cannot be read.
"""

from __future__ import annotations

from dataclasses import replace

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.dtos import InventoryItem, Location, Transaction, User
from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.exceptions import PersistenceError
from stock_kernel.logging_config import get_logger
from stock_kernel.services.inventory_repository import InventoryRepository
from stock_kernel.services.record_store import Collection, RecordStore
from stock_kernel.services.transaction_log import TransactionLog
from stock_kernel.services.write_queue import FlushResult, WriteQueue

logger = get_logger("services.client_state")


class ClientState:
    """
    Caches plus pending writes for a single client.

    Contract:
        Orchestrators mutate the caches through ``inventory`` and
        ``transactions`` and then call ``after_mutation()``; with
        ``auto_flush=True`` that drains the queue immediately.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        auto_flush: bool = False,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.ids = ids or IdGenerator(self.clock)
        self.auto_flush = auto_flush

        self.queue = WriteQueue(store, self.ids)
        self.inventory = InventoryRepository(self.queue, self.clock, self.ids)
        self.transactions = TransactionLog(self.queue)
        self.users: dict[str, User] = {}
        self.locations: tuple[Location, ...] = ()

        self.queue.add_reconcile_listener(self.inventory.reconcile_id)
        self.queue.add_reconcile_listener(self.transactions.reconcile_id)
        self.queue.add_reconcile_listener(self._reconcile_user_id)

    def add_reconcile_listener(self, listener) -> None:
        self.queue.add_reconcile_listener(listener)

    def load(self) -> None:
        """Read every collection from the store into the caches."""
        items = [
            InventoryItem.from_record(r)
            for r in self.store.select(Collection.INVENTORY_ITEMS)
        ]
        transactions = [
            Transaction.from_record(r)
            for r in self.store.select(
                Collection.TRANSACTIONS, order_by="date", descending=True,
            )
        ]
        users = [User.from_record(r) for r in self.store.select(Collection.APP_USERS)]
        locations = [
            Location.from_record(r) for r in self.store.select(Collection.LOCATIONS)
        ]

        self.inventory.load(items)
        self.transactions.load(transactions)
        self.users = {u.id: u for u in users}
        self.locations = tuple(locations)

        logger.info(
            "client_state_loaded",
            extra={
                "items": len(items),
                "transactions": len(transactions),
                "users": len(users),
                "locations": len(locations),
            },
        )

    def flush(self) -> FlushResult:
        """
        Drain pending writes to the store.

        Raises:
            PersistenceFailedError: After the caches were resynced.
        """
        try:
            return self.queue.flush()
        except PersistenceError:
            logger.error(
                "flush_failed_resyncing",
                extra={"pending": len(self.queue)},
            )
            self.resync()
            raise

    def resync(self) -> None:
        """Discard optimistic state and re-read the store."""
        discarded = self.queue.discard()
        self.load()
        logger.warning("client_state_resynced", extra={"discarded": discarded})

    def after_mutation(self) -> None:
        if self.auto_flush:
            self.flush()

    @property
    def has_pending_writes(self) -> bool:
        return len(self.queue) > 0

    def _reconcile_user_id(
        self, collection: Collection, placeholder_id: str, store_id: str,
    ) -> None:
        if collection is not Collection.APP_USERS:
            return
        user = self.users.pop(placeholder_id, None)
        if user is not None:
            self.users[store_id] = replace(user, id=store_id)
