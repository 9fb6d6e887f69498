"""
Module: stock_kernel.services.transaction_log
Responsibility: Append-only record of every stock movement, newest first.
    Status is the only mutable part of a transaction and changes only through
    ``transition``, a compare-and-swap on the expected status.
Architecture position: Kernel > Services.  Depends on the write queue.

Invariants enforced:
    - New transactions are prepended, preserving newest-first order.
    - ``transition`` is a no-op (returns None) when the cached status is not
      the expected one; the queued update carries the expected status as a
      store-side precondition.
    - Transactions are never removed.

Failure modes:
    - TransactionNotFoundError from ``get``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator, Sequence

from stock_kernel.domain.dtos import Transaction
from stock_kernel.domain.values import TransactionStatus
from stock_kernel.exceptions import TransactionNotFoundError
from stock_kernel.logging_config import get_logger
from stock_kernel.services.record_store import Collection
from stock_kernel.services.write_queue import WriteQueue

logger = get_logger("services.transaction_log")


class TransactionLog:
    """Newest-first list of transactions with guarded status changes."""

    def __init__(self, queue: WriteQueue):
        self._queue = queue
        self._entries: list[Transaction] = []

    def load(self, transactions: Iterable[Transaction]) -> None:
        """Replace the log with store contents (expected date-descending)."""
        self._entries = sorted(transactions, key=lambda t: t.date, reverse=True)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def all(self) -> tuple[Transaction, ...]:
        return tuple(self._entries)

    def find(self, transaction_id: str) -> Transaction | None:
        for tx in self._entries:
            if tx.id == transaction_id:
                return tx
        return None

    def get(self, transaction_id: str) -> Transaction:
        tx = self.find(transaction_id)
        if tx is None:
            raise TransactionNotFoundError(transaction_id)
        return tx

    def by_group(self, group_id: str) -> tuple[Transaction, ...]:
        return tuple(t for t in self._entries if t.transfer_group_id == group_id)

    def append(self, transactions: Sequence[Transaction]) -> None:
        """Prepend ``transactions`` and queue one bulk insert."""
        if not transactions:
            return
        self._entries[0:0] = list(transactions)
        self._queue.insert(
            Collection.TRANSACTIONS, [t.to_record() for t in transactions],
        )
        logger.debug(
            "transactions_appended",
            extra={
                "count": len(transactions),
                "transaction_ids": [t.id for t in transactions],
            },
        )

    def transition(
        self,
        transaction_id: str,
        expected_status: TransactionStatus,
        new_status: TransactionStatus,
        rejection_reason: str | None = None,
    ) -> Transaction | None:
        """
        Move a transaction from ``expected_status`` to ``new_status``.

        Returns the updated transaction, or None when the cached status has
        already moved on.
        """
        current = self.get(transaction_id)
        if current.status is not expected_status:
            logger.info(
                "transaction_status_stale",
                extra={
                    "transaction_id": transaction_id,
                    "expected_status": expected_status.value,
                    "actual_status": current.status.value,
                },
            )
            return None

        updated = current.with_status(new_status, rejection_reason)
        index = next(i for i, t in enumerate(self._entries) if t is current)
        self._entries[index] = updated

        changes: dict[str, str] = {"status": new_status.value}
        if rejection_reason is not None:
            changes["rejection_reason"] = rejection_reason
        self._queue.update(
            Collection.TRANSACTIONS,
            transaction_id,
            changes,
            expected={"status": expected_status.value},
        )
        logger.debug(
            "transaction_status_changed",
            extra={
                "transaction_id": transaction_id,
                "from_status": expected_status.value,
                "to_status": new_status.value,
            },
        )
        return updated

    def reconcile_id(
        self, collection: Collection, placeholder_id: str, store_id: str,
    ) -> None:
        if collection is not Collection.TRANSACTIONS:
            return
        for index, tx in enumerate(self._entries):
            if tx.id == placeholder_id:
                self._entries[index] = replace(tx, id=store_id)
                return
