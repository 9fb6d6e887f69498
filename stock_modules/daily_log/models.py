"""
Daily Log Domain Models.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stock_kernel.domain.values import to_quantity


@dataclass(frozen=True)
class BulkLogEntry:
    """Per-item amounts received and used in one bulk daily log submission."""
    item_id: str
    received: Decimal = Decimal("0")
    used: Decimal = Decimal("0")
    notes: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "received", to_quantity(self.received))
        object.__setattr__(self, "used", to_quantity(self.used))

    @property
    def is_empty(self) -> bool:
        return self.received == 0 and self.used == 0
