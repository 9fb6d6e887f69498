"""
Module: stock_kernel.selectors.inventory_selector
Responsibility: Read-only views over the inventory cache: a location's items,
    the cross-location global view, low-stock flags, totals by name and the
    category list.
Architecture position: Kernel > Selectors.  Reads the InventoryRepository
    cache; NEVER mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stock_kernel.domain.dtos import InventoryItem
from stock_kernel.domain.values import GLOBAL_VIEW
from stock_kernel.services.inventory_repository import InventoryRepository


@dataclass(frozen=True)
class ItemTotal:
    """One item name summed across every location that stocks it."""

    name_en: str
    name_ar: str
    unit: str
    total_quantity: Decimal
    by_location: tuple[tuple[str, Decimal], ...]


class InventorySelector:
    """Queries over the cached inventory."""

    def __init__(self, repository: InventoryRepository):
        self._repository = repository

    def items_at(self, location_id: str) -> tuple[InventoryItem, ...]:
        if location_id == GLOBAL_VIEW:
            return self._repository.all_items()
        return self._repository.items_at(location_id)

    def global_view(self) -> tuple[ItemTotal, ...]:
        """Every item name with its quantity per location, sorted by name."""
        totals: dict[str, list[InventoryItem]] = {}
        for item in self._repository.all_items():
            totals.setdefault(item.name_en, []).append(item)
        rows = []
        for name_en in sorted(totals):
            items = totals[name_en]
            rows.append(ItemTotal(
                name_en=name_en,
                name_ar=items[0].name_ar,
                unit=items[0].unit,
                total_quantity=sum((i.quantity for i in items), Decimal("0")),
                by_location=tuple((i.location_id, i.quantity) for i in items),
            ))
        return tuple(rows)

    def low_stock(self, location_id: str) -> tuple[InventoryItem, ...]:
        return tuple(i for i in self.items_at(location_id) if i.is_low_stock)

    def total_quantity(self, name: str) -> Decimal:
        """Sum of quantities across locations for items named ``name``."""
        return sum(
            (i.quantity for i in self._repository.all_items() if i.matches_name(name)),
            Decimal("0"),
        )

    def categories(self, location_id: str | None = None) -> tuple[str, ...]:
        items = (
            self._repository.all_items() if location_id is None
            else self.items_at(location_id)
        )
        return tuple(sorted({i.category for i in items}))
