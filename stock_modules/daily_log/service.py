"""
Daily-Log Orchestrator (``stock_modules.daily_log.service``).

Responsibility
--------------
Records single-location usage (deduct) and receive (add) entries.  There is
no approval step: every transaction is created ``completed``.

Architecture
------------
Layer: **Modules** -- orchestration over a kernel ``ClientState``.

Invariants
----------
- Usage never drives a quantity negative; receive has no upper bound.
- ``submit_bulk`` validates the whole batch before applying anything, then
  applies every receive before any usage, so an item may be used up to its
  quantity plus what the same batch receives.
- Usage transactions go from the location to ``Consumed``; receive
  transactions come from ``External Supplier``.

Failure Modes
-------------
- ``InvalidLocationError`` for a missing or global location.
- ``InvalidEntryTypeError`` for a type other than usage / receive.
- ``NonPositiveQuantityError`` / ``NegativeQuantityError`` on bad amounts.
- ``ItemNotFoundError`` for an item not stocked at the location.
- ``InsufficientStockError`` when usage exceeds what is available.
- ``EmptyBatchError`` for a bulk submission with nothing to record.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from stock_kernel.domain.dtos import Actor, InventoryItem, Transaction
from stock_kernel.domain.values import (
    CONSUMED,
    EXTERNAL_SUPPLIER,
    TransactionStatus,
    TransactionType,
    is_stock_location,
    to_quantity,
)
from stock_kernel.exceptions import (
    EmptyBatchError,
    InsufficientStockError,
    InvalidEntryTypeError,
    InvalidLocationError,
    NegativeQuantityError,
    NonPositiveQuantityError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.client_state import ClientState
from stock_modules.daily_log.models import BulkLogEntry

logger = get_logger("modules.daily_log.service")

_ENTRY_TYPES = (TransactionType.USAGE, TransactionType.RECEIVE)


class DailyLogService:
    """Single-location usage and receive entries."""

    def __init__(self, state: ClientState):
        self._state = state

    def record_entry(
        self,
        entry_type: TransactionType | str,
        item_id: str,
        quantity: Decimal | int | str,
        notes: str | None,
        location_id: str | None,
        actor: Actor,
    ) -> Transaction:
        """Record one usage or receive entry at ``location_id``."""
        _require_location(location_id)
        kind = _entry_type(entry_type)
        amount = to_quantity(quantity)
        if amount <= 0:
            raise NonPositiveQuantityError(str(amount), item_id)

        with LogContext.bind(actor_id=actor.id, location_id=location_id):
            item = self._state.inventory.get(location_id, item_id)
            delta = amount if kind is TransactionType.RECEIVE else -amount
            # adjust_quantity refuses a usage larger than the stock on hand
            self._state.inventory.adjust_quantity(location_id, item.id, delta)
            tx = self._transaction(kind, item, amount, notes, location_id, actor)
            self._state.transactions.append([tx])
            logger.info(
                "daily_log_entry_recorded",
                extra={
                    "entry_type": kind.value,
                    "item_id": item.id,
                    "quantity": amount,
                },
            )

        self._state.after_mutation()
        return tx

    def submit_bulk(
        self,
        entries: Sequence[BulkLogEntry],
        location_id: str | None,
        actor: Actor,
    ) -> tuple[Transaction, ...]:
        """
        Validate a batch of per-item received/used amounts, then apply it.

        Returns the transactions created: all receives first, then all usages.
        """
        _require_location(location_id)
        inventory = self._state.inventory

        with LogContext.bind(actor_id=actor.id, location_id=location_id):
            # Phase 1: validate everything against whole-batch totals per item
            total_received: dict[str, Decimal] = {}
            total_used: dict[str, Decimal] = {}
            items: dict[str, InventoryItem] = {}
            for entry in entries:
                if entry.received < 0:
                    raise NegativeQuantityError(str(entry.received), entry.item_id)
                if entry.used < 0:
                    raise NegativeQuantityError(str(entry.used), entry.item_id)
                if entry.is_empty:
                    continue
                item = items.get(entry.item_id) or inventory.get(
                    location_id, entry.item_id,
                )
                items[item.id] = item
                total_received[item.id] = (
                    total_received.get(item.id, Decimal("0")) + entry.received
                )
                total_used[item.id] = total_used.get(item.id, Decimal("0")) + entry.used

            for item in items.values():
                used = total_used[item.id]
                available = item.quantity + total_received[item.id]
                if used > available:
                    logger.warning(
                        "daily_log_batch_refused",
                        extra={
                            "item_id": item.id,
                            "used": used,
                            "available": available,
                        },
                    )
                    raise InsufficientStockError(
                        item_id=item.id,
                        location_id=location_id,
                        requested=str(used),
                        available=str(available),
                    )

            active = [e for e in entries if not e.is_empty]
            if not active:
                raise EmptyBatchError(location_id)

            # Phase 2: apply receives, then usages
            created: list[Transaction] = []
            for entry in active:
                if entry.received > 0:
                    inventory.adjust_quantity(location_id, entry.item_id, entry.received)
                    created.append(self._transaction(
                        TransactionType.RECEIVE, items[entry.item_id],
                        entry.received, entry.notes, location_id, actor,
                    ))
            for entry in active:
                if entry.used > 0:
                    inventory.adjust_quantity(location_id, entry.item_id, -entry.used)
                    created.append(self._transaction(
                        TransactionType.USAGE, items[entry.item_id],
                        entry.used, entry.notes, location_id, actor,
                    ))

            self._state.transactions.append(created)
            logger.info(
                "daily_log_batch_submitted",
                extra={
                    "entry_count": len(active),
                    "transaction_count": len(created),
                },
            )

        self._state.after_mutation()
        return tuple(created)

    def _transaction(
        self,
        kind: TransactionType,
        item: InventoryItem,
        quantity: Decimal,
        notes: str | None,
        location_id: str,
        actor: Actor,
    ) -> Transaction:
        if kind is TransactionType.USAGE:
            from_location, to_location = location_id, CONSUMED
        else:
            from_location, to_location = EXTERNAL_SUPPLIER, location_id
        return Transaction(
            id=self._state.ids.placeholder_id(),
            type=kind,
            status=TransactionStatus.COMPLETED,
            date=self._state.clock.now(),
            item_name_en=item.name_en,
            item_name_ar=item.name_ar,
            quantity=quantity,
            unit=item.unit,
            performed_by=actor.name,
            from_location=from_location,
            to_location=to_location,
            notes=notes or None,
        )


def _require_location(location_id: str | None) -> None:
    if not is_stock_location(location_id):
        raise InvalidLocationError(
            location_id, "daily log entries need a single stock location",
        )


def _entry_type(entry_type: TransactionType | str) -> TransactionType:
    try:
        kind = TransactionType(entry_type)
    except ValueError:
        raise InvalidEntryTypeError(str(entry_type)) from None
    if kind not in _ENTRY_TYPES:
        raise InvalidEntryTypeError(kind.value)
    return kind
