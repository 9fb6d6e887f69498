"""
Transfer Domain Models.

The nouns of stock transfers: requested lines, the submission result, and the
explicit per-step result returned by every workflow transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from stock_kernel.domain.dtos import Transaction
from stock_kernel.domain.values import TransactionStatus, to_quantity
from stock_kernel.exceptions import ItemNotFoundError


@dataclass(frozen=True)
class TransferLine:
    """One requested item and quantity in a transfer submission."""
    item_id: str
    quantity: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_quantity(self.quantity))


@dataclass(frozen=True)
class TransferSubmission:
    """What ``initiate_transfer`` created."""
    group_id: str
    status: TransactionStatus
    transactions: tuple[Transaction, ...]
    skipped_item_ids: tuple[str, ...] = ()

    @property
    def deducted_at_source(self) -> bool:
        return self.status is TransactionStatus.PENDING_TARGET


class TransitionOutcome(str, Enum):
    """How a workflow step ended."""
    APPLIED = "applied"
    ITEM_NOT_FOUND = "item_not_found"
    STALE_STATUS = "stale_status"


class StockEffect(str, Enum):
    """The inventory side effect of a workflow step."""
    NONE = "none"
    DEDUCTED = "deducted"
    CREDITED = "credited"
    CREATED = "created"
    RESTOCKED = "restocked"
    RECREATED = "recreated"


@dataclass(frozen=True)
class TransitionResult:
    """
    Result of one workflow step.

    ``ITEM_NOT_FOUND`` means the status advanced but the inventory side
    effect was skipped; ``not_found`` carries the error describing what was
    missing.  ``STALE_STATUS`` means nothing changed.
    """
    outcome: TransitionOutcome
    transaction: Transaction
    effect: StockEffect = StockEffect.NONE
    item_id: str | None = None
    not_found: ItemNotFoundError | None = None

    @property
    def is_success(self) -> bool:
        return self.outcome is TransitionOutcome.APPLIED

    @property
    def status_changed(self) -> bool:
        return self.outcome is not TransitionOutcome.STALE_STATUS
