"""
Transfer Orchestrator (``stock_modules.transfers.service``).

Responsibility
--------------
Moves stock between locations through the approval workflow in
``TRANSFER_WORKFLOW``: decides a new transfer's initial status from the
actor's authority over the source, builds one transaction per item under a
shared group id, and drives confirm / receive / reject / cancel while
reconciling inventory quantities.

Architecture
------------
Layer: **Modules** -- orchestration over a kernel ``ClientState``.  Every
public method applies its changes to the client caches (which queue the
mirroring writes) and then calls ``ClientState.after_mutation()``.

Invariants
----------
- Validation happens before any mutation; a refused call changes nothing.
- Source quantities never go negative: every requested quantity is checked
  against the source before the first deduction.
- Every transition re-reads the transaction's current status and is a no-op
  (``STALE_STATUS``) unless the workflow allows the action from it.
- Stock leaves the source exactly once (at initiation for managers, at
  confirmation otherwise) and returns at most once (reject / cancel from
  ``pending_target``).
- A transition queues its status compare-and-swap before its stock write,
  so a client holding a stale status fails on flush before moving stock.

Failure Modes
-------------
- ``MissingDestinationError``, ``InvalidLocationError``,
  ``SameLocationTransferError``, ``EmptyTransferError``,
  ``NonPositiveQuantityError``, ``InsufficientStockError`` from
  ``initiate_transfer``.
- ``InsufficientStockError`` from ``confirm_outbound``.
- ``MissingRejectionReasonError`` from ``reject_transfer``.
- ``TransactionNotFoundError`` / ``TransferGroupNotFoundError`` for unknown ids.
- An item missing at a later step is NOT raised: the status still advances
  and the result carries ``ITEM_NOT_FOUND``.

Usage::

    service = TransferService(state)
    submission = service.initiate_transfer(
        [TransferLine(item_id, Decimal("5"))], "riyadh-01", "warehouse", actor,
    )
    service.bulk_accept(submission.group_id, receiver)
"""

from __future__ import annotations

from collections import OrderedDict
from decimal import Decimal
from typing import Sequence

from stock_kernel.domain.dtos import Actor, InventoryItem, ItemDraft, Transaction
from stock_kernel.domain.values import (
    GLOBAL_VIEW,
    TransactionStatus,
    TransactionType,
    is_stock_location,
)
from stock_kernel.exceptions import (
    EmptyTransferError,
    InsufficientStockError,
    InvalidLocationError,
    ItemNotFoundError,
    MissingDestinationError,
    MissingRejectionReasonError,
    NonPositiveQuantityError,
    SameLocationTransferError,
    TransferGroupNotFoundError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.client_state import ClientState
from stock_modules.transfers.authority import source_authority
from stock_modules.transfers.config import TransferConfig
from stock_modules.transfers.models import (
    StockEffect,
    TransferLine,
    TransferSubmission,
    TransitionOutcome,
    TransitionResult,
)
from stock_modules.transfers.workflows import (
    CANCEL,
    CONFIRM_OUTBOUND,
    RECEIVE,
    REJECT,
    TRANSFER_WORKFLOW,
)

logger = get_logger("modules.transfers.service")


class TransferService:
    """
    Orchestrates multi-item stock transfers over a ClientState.

    Contract
    --------
    Methods accept a ``Transaction`` or its id; the transaction is always
    re-read from the log so a stale copy held by the caller cannot drive a
    transition.
    """

    def __init__(self, state: ClientState, config: TransferConfig | None = None):
        self._state = state
        self._config = config or TransferConfig()

    @property
    def _inventory(self):
        return self._state.inventory

    @property
    def _log(self):
        return self._state.transactions

    # -------------------------------------------------------------------------
    # Initiation
    # -------------------------------------------------------------------------

    def initiate_transfer(
        self,
        items: Sequence[TransferLine],
        to_location: str | None,
        source_location: str | None,
        actor: Actor,
        notes: str | None = None,
    ) -> TransferSubmission:
        """
        Create one transaction per item under a fresh transfer group.

        Duplicate item ids are summed into one line.  Items not stocked at
        the source are skipped and reported in ``skipped_item_ids``.
        """
        with LogContext.bind(actor_id=actor.id, location_id=source_location):
            self._validate_route(to_location, source_location)
            requested = self._aggregate(items)

            resolved: list[tuple[InventoryItem, Decimal]] = []
            skipped: list[str] = []
            for item_id, quantity in requested.items():
                item = self._inventory.find(source_location, item_id)
                if item is None:
                    skipped.append(item_id)
                else:
                    resolved.append((item, quantity))

            if not resolved:
                logger.warning(
                    "transfer_refused_no_items_at_source",
                    extra={"skipped_item_ids": skipped},
                )
                raise ItemNotFoundError(skipped[0], source_location)

            for item, quantity in resolved:
                if quantity > item.quantity:
                    logger.warning(
                        "transfer_refused_insufficient_stock",
                        extra={
                            "item_id": item.id,
                            "requested": quantity,
                            "available": item.quantity,
                        },
                    )
                    raise InsufficientStockError(
                        item_id=item.id,
                        location_id=source_location,
                        requested=str(quantity),
                        available=str(item.quantity),
                    )

            is_manager, reason = source_authority(
                actor, source_location, self._config.central_locations,
            )
            status = (
                TransactionStatus.PENDING_TARGET if is_manager
                else TransactionStatus.PENDING_SOURCE
            )
            group_id = self._state.ids.group_id()
            now = self._state.clock.now()

            if is_manager:
                for item, quantity in resolved:
                    self._inventory.adjust_quantity(
                        source_location, item.id, -quantity,
                        expected_version=item.version,
                    )

            transactions = tuple(
                Transaction(
                    id=self._state.ids.placeholder_id(),
                    type=TransactionType.TRANSFER,
                    status=status,
                    date=now,
                    item_name_en=item.name_en,
                    item_name_ar=item.name_ar,
                    quantity=quantity,
                    unit=item.unit,
                    performed_by=actor.name,
                    transfer_group_id=group_id,
                    from_location=source_location,
                    to_location=to_location,
                    notes=notes,
                )
                for item, quantity in resolved
            )
            self._log.append(transactions)

            if skipped:
                logger.warning(
                    "transfer_items_skipped",
                    extra={"group_id": group_id, "skipped_item_ids": skipped},
                )
            logger.info(
                "transfer_initiated",
                extra={
                    "group_id": group_id,
                    "status": status.value,
                    "authority": reason,
                    "from_location": source_location,
                    "to_location": to_location,
                    "line_count": len(transactions),
                },
            )

        self._state.after_mutation()
        return TransferSubmission(
            group_id=group_id,
            status=status,
            transactions=transactions,
            skipped_item_ids=tuple(skipped),
        )

    def _validate_route(
        self, to_location: str | None, source_location: str | None,
    ) -> None:
        if not to_location:
            raise MissingDestinationError()
        if not is_stock_location(source_location):
            raise InvalidLocationError(
                source_location, "transfer source must be a stock location",
            )
        if to_location == GLOBAL_VIEW:
            raise InvalidLocationError(
                to_location, "transfer destination must be a stock location",
            )
        if to_location == source_location:
            raise SameLocationTransferError(source_location)

    @staticmethod
    def _aggregate(items: Sequence[TransferLine]) -> OrderedDict[str, Decimal]:
        if not items:
            raise EmptyTransferError()
        requested: OrderedDict[str, Decimal] = OrderedDict()
        for line in items:
            if line.quantity <= 0:
                raise NonPositiveQuantityError(str(line.quantity), line.item_id)
            requested[line.item_id] = (
                requested.get(line.item_id, Decimal("0")) + line.quantity
            )
        return requested

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def confirm_outbound(
        self, transaction: Transaction | str, actor: Actor,
    ) -> TransitionResult:
        """``pending_source -> pending_target``, deducting the source now."""
        result = self._confirm_outbound(transaction, actor)
        self._state.after_mutation()
        return result

    def receive_transfer(
        self, transaction: Transaction | str, actor: Actor,
    ) -> TransitionResult:
        """``pending_target -> completed``, crediting (or creating) at destination."""
        result = self._receive(transaction, actor)
        self._state.after_mutation()
        return result

    def reject_transfer(
        self, transaction: Transaction | str, reason: str, actor: Actor,
    ) -> TransitionResult:
        """``-> rejected``; restocks the source only if it was already deducted."""
        current = self._current(transaction)
        if not reason or not reason.strip():
            raise MissingRejectionReasonError(current.id)
        result = self._reverse(
            current, REJECT, TransactionStatus.REJECTED, actor, reason.strip(),
        )
        self._state.after_mutation()
        return result

    def cancel_transfer(
        self, transaction: Transaction | str, actor: Actor,
    ) -> TransitionResult:
        """``-> cancelled``; same reversal policy as reject, no reason."""
        result = self._reverse(
            self._current(transaction), CANCEL, TransactionStatus.CANCELLED, actor,
        )
        self._state.after_mutation()
        return result

    def bulk_accept(self, group_id: str, actor: Actor) -> tuple[TransitionResult, ...]:
        """Receive every transaction of a transfer group."""
        members = self._log.by_group(group_id)
        if not members:
            raise TransferGroupNotFoundError(group_id)
        with LogContext.bind(group_id=group_id):
            results = tuple(self._receive(tx, actor) for tx in members)
            logger.info(
                "transfer_group_accepted",
                extra={
                    "received": sum(1 for r in results if r.status_changed),
                    "stale": sum(1 for r in results if not r.status_changed),
                },
            )
        self._state.after_mutation()
        return results

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _current(self, transaction: Transaction | str) -> Transaction:
        tx_id = transaction if isinstance(transaction, str) else transaction.id
        return self._log.get(tx_id)

    def _stale(self, current: Transaction, action: str) -> TransitionResult:
        logger.info(
            "transfer_transition_stale",
            extra={
                "transaction_id": current.id,
                "action": action,
                "status": current.status.value,
            },
        )
        return TransitionResult(
            outcome=TransitionOutcome.STALE_STATUS, transaction=current,
        )

    def _confirm_outbound(
        self, transaction: Transaction | str, actor: Actor,
    ) -> TransitionResult:
        current = self._current(transaction)
        step = TRANSFER_WORKFLOW.transition_for(current.status.value, CONFIRM_OUTBOUND)
        if step is None:
            return self._stale(current, CONFIRM_OUTBOUND)

        with LogContext.bind(
            actor_id=actor.id,
            transaction_id=current.id,
            group_id=current.transfer_group_id,
        ):
            source = current.from_location
            item = self._inventory.find_by_name(source, *current.names)
            not_found: ItemNotFoundError | None = None
            effect = StockEffect.NONE
            if item is None:
                not_found = ItemNotFoundError(current.item_name_en, source)
                logger.warning(
                    "transfer_source_item_missing",
                    extra={"item_name": current.item_name_en, "from_location": source},
                )
            elif item.quantity < current.quantity:
                raise InsufficientStockError(
                    item_id=item.id,
                    location_id=source,
                    requested=str(current.quantity),
                    available=str(item.quantity),
                )

            # Status write is queued ahead of the stock write it guards
            updated = self._log.transition(
                current.id, current.status, TransactionStatus(step.to_state),
            )
            if item is not None:
                self._inventory.adjust_quantity(source, item.id, -current.quantity)
                effect = StockEffect.DEDUCTED
            logger.info(
                "transfer_outbound_confirmed",
                extra={"effect": effect.value, "quantity": current.quantity},
            )

        return TransitionResult(
            outcome=(
                TransitionOutcome.ITEM_NOT_FOUND if not_found
                else TransitionOutcome.APPLIED
            ),
            transaction=updated,
            effect=effect,
            item_id=item.id if item else None,
            not_found=not_found,
        )

    def _receive(self, transaction: Transaction | str, actor: Actor) -> TransitionResult:
        current = self._current(transaction)
        step = TRANSFER_WORKFLOW.transition_for(current.status.value, RECEIVE)
        if step is None:
            return self._stale(current, RECEIVE)

        with LogContext.bind(
            actor_id=actor.id,
            transaction_id=current.id,
            group_id=current.transfer_group_id,
        ):
            updated = self._log.transition(
                current.id, current.status, TransactionStatus(step.to_state),
            )
            item, effect = self._credit(
                current,
                current.to_location,
                self._config.received_category,
                StockEffect.CREDITED,
                StockEffect.CREATED,
            )
            logger.info(
                "transfer_received",
                extra={
                    "effect": effect.value,
                    "item_id": item.id,
                    "to_location": current.to_location,
                    "quantity": current.quantity,
                },
            )

        return TransitionResult(
            outcome=TransitionOutcome.APPLIED,
            transaction=updated,
            effect=effect,
            item_id=item.id,
        )

    def _reverse(
        self,
        current: Transaction,
        action: str,
        terminal: TransactionStatus,
        actor: Actor,
        reason: str | None = None,
    ) -> TransitionResult:
        step = TRANSFER_WORKFLOW.transition_for(current.status.value, action)
        if step is None:
            return self._stale(current, action)

        with LogContext.bind(
            actor_id=actor.id,
            transaction_id=current.id,
            group_id=current.transfer_group_id,
        ):
            updated = self._log.transition(
                current.id, current.status, terminal, rejection_reason=reason,
            )
            item: InventoryItem | None = None
            effect = StockEffect.NONE
            if step.moves_stock:
                item, effect = self._credit(
                    current,
                    current.from_location,
                    self._config.returned_category,
                    StockEffect.RESTOCKED,
                    StockEffect.RECREATED,
                )
            logger.info(
                f"transfer_{terminal.value}",
                extra={
                    "from_status": current.status.value,
                    "effect": effect.value,
                    "quantity": current.quantity,
                },
            )

        return TransitionResult(
            outcome=TransitionOutcome.APPLIED,
            transaction=updated,
            effect=effect,
            item_id=item.id if item else None,
        )

    def _credit(
        self,
        tx: Transaction,
        location_id: str,
        category: str,
        credited: StockEffect,
        created: StockEffect,
    ) -> tuple[InventoryItem, StockEffect]:
        """Add ``tx.quantity`` to the matching item, or create one."""
        item = self._inventory.find_by_name(location_id, *tx.names)
        if item is not None:
            return (
                self._inventory.adjust_quantity(location_id, item.id, tx.quantity),
                credited,
            )
        new_item = self._inventory.add_item(
            location_id,
            ItemDraft(
                name_en=tx.item_name_en,
                name_ar=tx.item_name_ar,
                category=category,
                quantity=tx.quantity,
                unit=tx.unit,
                min_threshold=Decimal("0"),
            ),
        )
        return new_item, created
