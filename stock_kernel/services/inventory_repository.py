"""
Module: stock_kernel.services.inventory_repository
Responsibility: The per-location authoritative cache of stock items.  Every
    read and write names its location explicitly; each mutation updates the
    cache synchronously and enqueues the mirroring durable write.
Architecture position: Kernel > Services.  Depends on the write queue, the
    clock and the id generator.

Invariants enforced:
    - A cached item's quantity is never negative: ``adjust_quantity`` refuses
      a delta that would take it below zero before touching anything.
    - ``version`` increases by exactly one per mutation, matching the store's
      version column, and every quantity write carries the pre-mutation
      version as its precondition.
    - Items are never deleted by reaching zero, only by ``delete_item``.

Failure modes:
    - ItemNotFoundError when the id is not cached at the location.
    - InsufficientStockError on a negative result.
    - OptimisticLockError when ``expected_version`` does not match the cache.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Iterable

from stock_kernel.domain.clock import Clock
from stock_kernel.domain.dtos import InventoryItem, ItemDraft
from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.exceptions import (
    InsufficientStockError,
    ItemNotFoundError,
    OptimisticLockError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.services.record_store import Collection
from stock_kernel.services.write_queue import WriteQueue

logger = get_logger("services.inventory_repository")

# Fields an edit may change; id, location and version are owned here.
_EDITABLE_FIELDS = (
    "name_en",
    "name_ar",
    "description",
    "category",
    "quantity",
    "unit",
    "min_threshold",
    "last_updated",
)


class InventoryRepository:
    """Cache of items keyed by location, then item id."""

    def __init__(self, queue: WriteQueue, clock: Clock, ids: IdGenerator):
        self._queue = queue
        self._clock = clock
        self._ids = ids
        self._by_location: dict[str, dict[str, InventoryItem]] = {}

    def load(self, items: Iterable[InventoryItem]) -> None:
        """Replace the cache with ``items`` as read from the store."""
        self._by_location = {}
        for item in items:
            self._by_location.setdefault(item.location_id, {})[item.id] = item

    # -- reads --------------------------------------------------------------

    def items_at(self, location_id: str) -> tuple[InventoryItem, ...]:
        return tuple(self._by_location.get(location_id, {}).values())

    def all_items(self) -> tuple[InventoryItem, ...]:
        return tuple(
            item
            for items in self._by_location.values()
            for item in items.values()
        )

    def locations(self) -> tuple[str, ...]:
        return tuple(self._by_location)

    def find(self, location_id: str, item_id: str) -> InventoryItem | None:
        return self._by_location.get(location_id, {}).get(item_id)

    def get(self, location_id: str, item_id: str) -> InventoryItem:
        item = self.find(location_id, item_id)
        if item is None:
            raise ItemNotFoundError(item_id, location_id)
        return item

    def find_by_name(
        self, location_id: str, *names: str | None,
    ) -> InventoryItem | None:
        """First item at the location whose English or Arabic name matches."""
        for item in self._by_location.get(location_id, {}).values():
            if item.matches_name(*names):
                return item
        return None

    # -- writes -------------------------------------------------------------

    def adjust_quantity(
        self,
        location_id: str,
        item_id: str,
        delta: Decimal,
        expected_version: int | None = None,
    ) -> InventoryItem:
        """
        Add ``delta`` (negative to deduct) to an item's quantity.

        Preconditions: item cached at location; result >= 0.
        Postconditions: cache holds the new item (version + 1); one update
            write is queued with ``expected={"version": old}``.
        """
        item = self.get(location_id, item_id)
        if expected_version is not None and item.version != expected_version:
            raise OptimisticLockError(
                entity_type="inventory_item",
                entity_id=item_id,
                expected=str(expected_version),
                actual=str(item.version),
            )
        new_quantity = item.quantity + delta
        if new_quantity < 0:
            raise InsufficientStockError(
                item_id=item_id,
                location_id=location_id,
                requested=str(-delta),
                available=str(item.quantity),
            )

        now = self._clock.now()
        updated = item.with_quantity(new_quantity, now)
        self._by_location[location_id][item_id] = updated
        self._queue.update(
            Collection.INVENTORY_ITEMS,
            item_id,
            {"quantity": new_quantity, "last_updated": now},
            expected={"version": item.version},
        )
        logger.debug(
            "item_quantity_adjusted",
            extra={
                "item_id": item_id,
                "location_id": location_id,
                "delta": delta,
                "quantity": new_quantity,
                "version": updated.version,
            },
        )
        return updated

    def add_item(self, location_id: str, draft: ItemDraft) -> InventoryItem:
        """Insert a new item under a placeholder id."""
        item = InventoryItem(
            id=self._ids.placeholder_id(),
            location_id=location_id,
            name_en=draft.name_en,
            name_ar=draft.name_ar,
            category=draft.category,
            quantity=draft.quantity,
            unit=draft.unit,
            min_threshold=draft.min_threshold,
            last_updated=self._clock.now(),
            description=draft.description,
        )
        self._by_location.setdefault(location_id, {})[item.id] = item
        self._queue.insert(Collection.INVENTORY_ITEMS, [item.to_record()])
        logger.info(
            "item_added",
            extra={
                "item_id": item.id,
                "location_id": location_id,
                "item_name": item.name_en,
                "quantity": item.quantity,
            },
        )
        return item

    def update_item(self, item: InventoryItem) -> InventoryItem:
        """Replace the editable fields of a cached item."""
        current = self.get(item.location_id, item.id)
        updated = replace(
            item,
            last_updated=self._clock.now(),
            version=current.version + 1,
        )
        self._by_location[item.location_id][item.id] = updated
        record = updated.to_record()
        self._queue.update(
            Collection.INVENTORY_ITEMS,
            item.id,
            {k: record[k] for k in _EDITABLE_FIELDS},
            expected={"version": current.version},
        )
        logger.info(
            "item_updated",
            extra={"item_id": item.id, "location_id": item.location_id},
        )
        return updated

    def delete_item(self, location_id: str, item_id: str) -> InventoryItem:
        item = self.get(location_id, item_id)
        del self._by_location[location_id][item_id]
        self._queue.delete(Collection.INVENTORY_ITEMS, [item_id])
        logger.info(
            "item_deleted",
            extra={"item_id": item_id, "location_id": location_id},
        )
        return item

    def reconcile_id(
        self, collection: Collection, placeholder_id: str, store_id: str,
    ) -> None:
        """Re-key a cached item from its placeholder to its store id."""
        if collection is not Collection.INVENTORY_ITEMS:
            return
        for items in self._by_location.values():
            item = items.pop(placeholder_id, None)
            if item is not None:
                items[store_id] = replace(item, id=store_id)
                return
