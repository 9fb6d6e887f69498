"""
Values -- Enumerations and sentinel location ids.

Responsibility:
    The closed vocabularies of the stock domain: user roles, transaction
    types and statuses, location kinds, and the well-known location ids and
    sentinels used on usage/receive transactions.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Imported by every other layer.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """Roles that determine source-location authority."""

    ADMIN = "admin"
    BRANCH_MANAGER = "branch_manager"
    WAREHOUSE_MANAGER = "warehouse_manager"
    MAMMAL_EMPLOYEE = "mammal_employee"


class TransactionType(str, Enum):
    """Kinds of stock movement recorded in the transaction log."""

    TRANSFER = "transfer"
    USAGE = "usage"
    RECEIVE = "receive"


class TransactionStatus(str, Enum):
    """Transaction lifecycle states."""

    PENDING_SOURCE = "pending_source"
    PENDING_TARGET = "pending_target"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


PENDING_STATUSES: frozenset[TransactionStatus] = frozenset({
    TransactionStatus.PENDING_SOURCE,
    TransactionStatus.PENDING_TARGET,
})

TERMINAL_STATUSES: frozenset[TransactionStatus] = frozenset({
    TransactionStatus.COMPLETED,
    TransactionStatus.CANCELLED,
    TransactionStatus.REJECTED,
})


class LocationKind(str, Enum):
    """Location classification."""

    CENTRAL = "central"
    BRANCH = "branch"
    GLOBAL = "global"


# Well-known location ids
WAREHOUSE = "warehouse"
MAMMAL = "mammal"
GLOBAL_VIEW = "all"

# Counterparty sentinels for single-location entries
CONSUMED = "Consumed"
EXTERNAL_SUPPLIER = "External Supplier"


def to_quantity(value: Any) -> Decimal:
    """
    Coerce an int/str/Decimal quantity to ``Decimal``.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a quantity: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a quantity: {value!r}") from exc


def is_stock_location(location_id: str | None) -> bool:
    """True when the id names a real stock location (not unset, not global)."""
    return bool(location_id) and location_id != GLOBAL_VIEW
