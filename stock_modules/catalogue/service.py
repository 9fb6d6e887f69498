"""
Catalogue Service (``stock_modules.catalogue.service``).

Responsibility
--------------
Explicit item maintenance at one location: add, edit, delete.  The only
path by which an item disappears; reaching zero quantity never deletes.

Failure Modes
-------------
- ``InvalidLocationError`` for a missing or global location.
- ``NegativeQuantityError`` for a negative quantity or threshold.
- ``ItemNotFoundError`` when editing or deleting an unknown item.
"""

from __future__ import annotations

from dataclasses import replace

from stock_kernel.domain.dtos import InventoryItem, ItemDraft
from stock_kernel.domain.values import is_stock_location
from stock_kernel.exceptions import InvalidLocationError, NegativeQuantityError
from stock_kernel.logging_config import LogContext
from stock_kernel.services.client_state import ClientState


class CatalogueService:
    """Add, edit and delete items at a location."""

    def __init__(self, state: ClientState):
        self._state = state

    def add_item(self, location_id: str | None, draft: ItemDraft) -> InventoryItem:
        _require_location(location_id)
        _require_non_negative(draft)
        with LogContext.bind(location_id=location_id):
            item = self._state.inventory.add_item(location_id, draft)
        self._state.after_mutation()
        return item

    def edit_item(self, location_id: str | None, item: InventoryItem) -> InventoryItem:
        """Replace an item's editable fields; the item stays at ``location_id``."""
        _require_location(location_id)
        with LogContext.bind(location_id=location_id):
            updated = self._state.inventory.update_item(
                replace(item, location_id=location_id),
            )
        self._state.after_mutation()
        return updated

    def delete_item(self, location_id: str | None, item_id: str) -> InventoryItem:
        _require_location(location_id)
        with LogContext.bind(location_id=location_id):
            removed = self._state.inventory.delete_item(location_id, item_id)
        self._state.after_mutation()
        return removed


def _require_location(location_id: str | None) -> None:
    if not is_stock_location(location_id):
        raise InvalidLocationError(
            location_id, "items are maintained at a single stock location",
        )


def _require_non_negative(draft: ItemDraft) -> None:
    for value in (draft.quantity, draft.min_threshold):
        if value < 0:
            raise NegativeQuantityError(str(value))
