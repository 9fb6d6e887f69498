"""
DTOs -- Immutable domain records.

Responsibility:
    Frozen dataclasses for the nouns of the stock domain: inventory items,
    transactions, locations, users and the acting user.  These flow between
    the cache, the orchestrators and callers; ORM rows never leave the
    persistence boundary.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  ``from_record()`` / ``to_record()``
    are boundary converters for the snake_case record dicts exchanged with
    the record store; they are only called from the services layer.

Invariants enforced:
    - ``InventoryItem.quantity >= 0`` and ``min_threshold >= 0``.
    - ``Transaction.quantity > 0``.
    - Every ``transfer`` transaction carries a ``transfer_group_id``.
    - Quantities are ``Decimal`` (coerced at construction).

Failure modes:
    - ValueError on construction with a violated invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from stock_kernel.domain.values import (
    LocationKind,
    TransactionStatus,
    TransactionType,
    UserRole,
    to_quantity,
)


@dataclass(frozen=True)
class InventoryItem:
    """
    A stock item held at one location.

    Contract: Immutable.  Every mutation produces a new instance with
    ``version`` incremented; the version is the compare-and-swap token
    carried to the store.
    """

    id: str
    location_id: str
    name_en: str
    name_ar: str
    category: str
    quantity: Decimal
    unit: str
    min_threshold: Decimal
    last_updated: datetime
    description: str | None = None
    version: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_quantity(self.quantity))
        object.__setattr__(self, "min_threshold", to_quantity(self.min_threshold))
        if self.quantity < 0:
            raise ValueError(
                f"quantity cannot be negative (item {self.id}: {self.quantity})"
            )
        if self.min_threshold < 0:
            raise ValueError(
                f"min_threshold cannot be negative (item {self.id}: {self.min_threshold})"
            )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_threshold

    def matches_name(self, *names: str | None) -> bool:
        """True when either bilingual name equals any of ``names``."""
        wanted = {n for n in names if n}
        return self.name_en in wanted or self.name_ar in wanted

    def display_name(self, language: str = "en") -> str:
        return self.name_ar if language == "ar" else self.name_en

    def with_quantity(self, quantity: Decimal, when: datetime) -> InventoryItem:
        return replace(
            self, quantity=quantity, last_updated=when, version=self.version + 1,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> InventoryItem:
        return cls(
            id=record["id"],
            location_id=record["location_id"],
            name_en=record["name_en"],
            name_ar=record["name_ar"],
            category=record["category"],
            quantity=record["quantity"],
            unit=record["unit"],
            min_threshold=record.get("min_threshold") or Decimal("0"),
            last_updated=record["last_updated"],
            description=record.get("description"),
            version=record.get("version") or 1,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "location_id": self.location_id,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "description": self.description,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "min_threshold": self.min_threshold,
            "last_updated": self.last_updated,
        }


@dataclass(frozen=True)
class ItemDraft:
    """Fields of an item about to be added; the id is assigned on insert."""

    name_en: str
    name_ar: str
    category: str
    quantity: Decimal
    unit: str
    min_threshold: Decimal = Decimal("0")
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_quantity(self.quantity))
        object.__setattr__(self, "min_threshold", to_quantity(self.min_threshold))


@dataclass(frozen=True)
class Transaction:
    """
    One stock movement.

    Contract: Immutable.  Status changes produce a new instance via
    ``with_status``.  ``group_key`` always yields a grouping key, synthesizing
    ``UNGROUPED-<iso date>`` for single-item entries.
    """

    id: str
    type: TransactionType
    status: TransactionStatus
    date: datetime
    item_name_en: str
    item_name_ar: str
    quantity: Decimal
    unit: str
    performed_by: str
    transfer_group_id: str | None = None
    from_location: str | None = None
    to_location: str | None = None
    notes: str | None = None
    rejection_reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", TransactionType(self.type))
        object.__setattr__(self, "status", TransactionStatus(self.status))
        object.__setattr__(self, "quantity", to_quantity(self.quantity))
        if self.quantity <= 0:
            raise ValueError(
                f"transaction quantity must be positive (got {self.quantity})"
            )
        if self.type is TransactionType.TRANSFER and not self.transfer_group_id:
            raise ValueError(f"transfer {self.id} must belong to a transfer group")

    @property
    def group_key(self) -> str:
        return self.transfer_group_id or f"UNGROUPED-{self.date.isoformat()}"

    @property
    def names(self) -> tuple[str, str]:
        return (self.item_name_en, self.item_name_ar)

    def display_name(self, language: str = "en") -> str:
        return self.item_name_ar if language == "ar" else self.item_name_en

    def with_status(
        self,
        status: TransactionStatus,
        rejection_reason: str | None = None,
    ) -> Transaction:
        return replace(
            self,
            status=status,
            rejection_reason=rejection_reason if rejection_reason is not None
            else self.rejection_reason,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Transaction:
        return cls(
            id=record["id"],
            type=record["type"],
            status=record["status"],
            date=record["date"],
            item_name_en=record["item_name_en"],
            item_name_ar=record.get("item_name_ar") or record["item_name_en"],
            quantity=record["quantity"],
            unit=record["unit"],
            performed_by=record["performed_by"],
            transfer_group_id=record.get("transfer_group_id"),
            from_location=record.get("from_location"),
            to_location=record.get("to_location"),
            notes=record.get("notes"),
            rejection_reason=record.get("rejection_reason"),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "transfer_group_id": self.transfer_group_id,
            "date": self.date,
            "type": self.type.value,
            "status": self.status.value,
            "from_location": self.from_location,
            "to_location": self.to_location,
            "item_name_en": self.item_name_en,
            "item_name_ar": self.item_name_ar,
            "quantity": self.quantity,
            "unit": self.unit,
            "performed_by": self.performed_by,
            "notes": self.notes,
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class Location:
    """A stock location (or the global view pseudo-location)."""

    id: str
    name: str
    description: str
    icon: str
    kind: LocationKind = LocationKind.CENTRAL

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Location:
        return cls(
            id=record["id"],
            name=record["name"],
            description=record.get("description") or "",
            icon=record.get("icon") or "",
            kind=LocationKind(record.get("type") or LocationKind.CENTRAL.value),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "type": self.kind.value,
        }


@dataclass(frozen=True)
class User:
    """An application user record (credentials are not modelled)."""

    id: str
    username: str
    name: str
    role: UserRole
    branch_code: str | None = None
    branch_name: str | None = None
    accessible_branches: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", UserRole(self.role))
        object.__setattr__(
            self, "accessible_branches", tuple(self.accessible_branches or ()),
        )

    def as_actor(self) -> Actor:
        return Actor(
            id=self.id, name=self.name, role=self.role, branch_code=self.branch_code,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> User:
        return cls(
            id=record["id"],
            username=record["username"],
            name=record["name"],
            role=record["role"],
            branch_code=record.get("branch_code"),
            branch_name=record.get("branch_name"),
            accessible_branches=tuple(record.get("accessible_branches") or ()),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role.value,
            "branch_code": self.branch_code,
            "branch_name": self.branch_name,
            "accessible_branches": list(self.accessible_branches),
        }


@dataclass(frozen=True)
class Actor:
    """The acting user, as an opaque authority descriptor."""

    id: str
    name: str
    role: UserRole
    branch_code: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", UserRole(self.role))
