"""
Module: stock_kernel.services.write_queue
Responsibility: The pending-writes index.  Optimistic mutations enqueue the
    durable write that mirrors their local change, keyed by a client-generated
    correlation id; ``flush()`` drains the writes in order against the record
    store and reconciles placeholder ids with store-assigned ids.
Architecture position: Kernel > Services.  Depends on the record store
    protocol only.

Invariants enforced:
    - Writes are applied in enqueue order, one at a time.
    - A write leaves the index only after the store accepted it.
    - Every placeholder id inserted is mapped to exactly one store id, and
      every reconcile listener hears about it before later writes run.
    - Later writes that target a placeholder are rewritten to the store id.

Failure modes:
    - PersistenceFailedError on the first write the store refuses.  That
      write and every write after it stay pending; the caller decides whether
      to retry ``flush()`` or ``discard()`` and resync.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.exceptions import PersistenceFailedError, StockKernelError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.record_store import Collection, RecordStore

logger = get_logger("services.write_queue")

ReconcileListener = Callable[[Collection, str, str], None]


class WriteKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingWrite:
    """One durable write waiting to be applied."""

    correlation_id: str
    kind: WriteKind
    collection: Collection
    records: tuple[dict[str, Any], ...] = ()
    target_id: str | None = None
    changes: dict[str, Any] = field(default_factory=dict)
    expected: dict[str, Any] | None = None
    target_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class FlushResult:
    """Outcome of a successful flush."""

    applied: int
    reconciled: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.applied == 0


class WriteQueue:
    """
    Ordered index of pending writes keyed by correlation id.

    Contract:
        ``insert``/``update``/``delete`` only enqueue; nothing touches the
        store until ``flush()``.
    """

    def __init__(self, store: RecordStore, ids: IdGenerator):
        self._store = store
        self._ids = ids
        self._pending: OrderedDict[str, PendingWrite] = OrderedDict()
        self._id_map: dict[str, str] = {}
        self._listeners: list[ReconcileListener] = []

    # -- enqueue ------------------------------------------------------------

    def insert(
        self, collection: Collection, records: Sequence[Mapping[str, Any]],
    ) -> str:
        return self._enqueue(PendingWrite(
            correlation_id=self._ids.correlation_id(),
            kind=WriteKind.INSERT,
            collection=collection,
            records=tuple(dict(r) for r in records),
        ))

    def update(
        self,
        collection: Collection,
        target_id: str,
        changes: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> str:
        return self._enqueue(PendingWrite(
            correlation_id=self._ids.correlation_id(),
            kind=WriteKind.UPDATE,
            collection=collection,
            target_id=target_id,
            changes=dict(changes),
            expected=dict(expected) if expected is not None else None,
        ))

    def delete(self, collection: Collection, target_ids: Sequence[str]) -> str:
        return self._enqueue(PendingWrite(
            correlation_id=self._ids.correlation_id(),
            kind=WriteKind.DELETE,
            collection=collection,
            target_ids=tuple(target_ids),
        ))

    def _enqueue(self, write: PendingWrite) -> str:
        self._pending[write.correlation_id] = write
        logger.debug(
            "write_enqueued",
            extra={
                "correlation_id": write.correlation_id,
                "kind": write.kind.value,
                "collection": write.collection.value,
            },
        )
        return write.correlation_id

    # -- inspection ---------------------------------------------------------

    def pending(self) -> tuple[PendingWrite, ...]:
        return tuple(self._pending.values())

    def __len__(self) -> int:
        return len(self._pending)

    def resolve(self, record_id: str) -> str:
        """Store id for a reconciled placeholder, else the id unchanged."""
        return self._id_map.get(record_id, record_id)

    def add_reconcile_listener(self, listener: ReconcileListener) -> None:
        self._listeners.append(listener)

    # -- draining -----------------------------------------------------------

    def discard(self) -> int:
        """Drop every pending write (used before a resync)."""
        count = len(self._pending)
        self._pending.clear()
        if count:
            logger.warning("write_queue_discarded", extra={"count": count})
        return count

    def flush(self) -> FlushResult:
        """
        Apply pending writes in order.

        Raises:
            PersistenceFailedError: On the first refused write.
        """
        applied = 0
        reconciled: dict[str, str] = {}
        while self._pending:
            correlation_id, write = next(iter(self._pending.items()))
            with LogContext.bind(correlation_id=correlation_id):
                try:
                    reconciled.update(self._apply(write))
                except StockKernelError as exc:
                    logger.error(
                        "write_failed",
                        extra={
                            "kind": write.kind.value,
                            "collection": write.collection.value,
                            "remaining": len(self._pending),
                        },
                        exc_info=True,
                    )
                    raise PersistenceFailedError(
                        correlation_id=correlation_id,
                        operation=write.kind.value,
                        collection=write.collection.value,
                        reason=str(exc),
                        cause_code=exc.code,
                    ) from exc
            del self._pending[correlation_id]
            applied += 1

        if applied:
            logger.info(
                "write_queue_flushed",
                extra={"applied": applied, "reconciled": len(reconciled)},
            )
        return FlushResult(applied=applied, reconciled=reconciled)

    def _apply(self, write: PendingWrite) -> dict[str, str]:
        if write.kind is WriteKind.INSERT:
            return self._apply_insert(write)
        if write.kind is WriteKind.UPDATE:
            self._store.update(
                write.collection,
                self.resolve(write.target_id),
                write.changes,
                write.expected,
            )
        else:
            self._store.delete(
                write.collection, [self.resolve(i) for i in write.target_ids],
            )
        return {}

    def _apply_insert(self, write: PendingWrite) -> dict[str, str]:
        placeholders: list[str | None] = []
        payload: list[dict[str, Any]] = []
        for record in write.records:
            record_id = record.get("id")
            if IdGenerator.is_placeholder(record_id):
                placeholders.append(record_id)
                record = {k: v for k, v in record.items() if k != "id"}
            else:
                placeholders.append(None)
            payload.append(record)

        store_ids = self._store.insert(write.collection, payload)

        mapping: dict[str, str] = {}
        for placeholder, store_id in zip(placeholders, store_ids):
            if placeholder is None:
                continue
            self._id_map[placeholder] = store_id
            mapping[placeholder] = store_id
            for listener in self._listeners:
                listener(write.collection, placeholder, store_id)
            logger.debug(
                "placeholder_reconciled",
                extra={
                    "collection": write.collection.value,
                    "placeholder_id": placeholder,
                    "store_id": store_id,
                },
            )
        return mapping
