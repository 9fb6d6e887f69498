"""
Pure domain layer.

This module contains immutable records and value vocabularies with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Time enters only through the injected Clock.
"""

from stock_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stock_kernel.domain.dtos import (
    Actor,
    InventoryItem,
    ItemDraft,
    Location,
    Transaction,
    User,
)
from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.domain.values import (
    CONSUMED,
    EXTERNAL_SUPPLIER,
    GLOBAL_VIEW,
    MAMMAL,
    PENDING_STATUSES,
    TERMINAL_STATUSES,
    WAREHOUSE,
    LocationKind,
    TransactionStatus,
    TransactionType,
    UserRole,
    is_stock_location,
    to_quantity,
)
from stock_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Records
    "Actor",
    "InventoryItem",
    "ItemDraft",
    "Location",
    "Transaction",
    "User",
    # Ids
    "IdGenerator",
    # Vocabularies
    "LocationKind",
    "TransactionStatus",
    "TransactionType",
    "UserRole",
    "PENDING_STATUSES",
    "TERMINAL_STATUSES",
    "WAREHOUSE",
    "MAMMAL",
    "GLOBAL_VIEW",
    "CONSUMED",
    "EXTERNAL_SUPPLIER",
    "is_stock_location",
    "to_quantity",
    # Workflow
    "Guard",
    "Transition",
    "Workflow",
]
