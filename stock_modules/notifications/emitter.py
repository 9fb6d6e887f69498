"""
Notification Emitter (``stock_modules.notifications.emitter``).

Responsibility
--------------
Watches the transaction log for transfers awaiting acceptance at the
viewer's location and raises exactly one alert per transaction id through an
external sink.

Invariants
----------
- A transaction id is added to the notified set synchronously, before the
  sink is called, so repeated or rapid refreshes never alert twice.
- The set is per session: ``reset()`` (called on logout) clears it.
- Placeholder ids reconciled to store ids stay deduplicated.

Failure Modes
-------------
- A sink that raises is logged with its traceback; the id stays notified
  and the scan continues with the next transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Mapping

from stock_kernel.domain.dtos import Transaction
from stock_kernel.domain.values import TransactionStatus, is_stock_location
from stock_kernel.logging_config import get_logger
from stock_kernel.services.record_store import Collection

logger = get_logger("modules.notifications.emitter")

NotificationSink = Callable[[str, str], None]


@dataclass(frozen=True)
class NotificationText:
    """Localized pieces of an incoming-transfer alert."""
    title: str
    from_word: str


DEFAULT_TEXTS: dict[str, NotificationText] = {
    "en": NotificationText(title="Incoming Requests", from_word="from"),
    "ar": NotificationText(title="طلبات واردة", from_word="من"),
}


@dataclass(frozen=True)
class Notification:
    transaction_id: str
    title: str
    body: str


def format_quantity(quantity: Decimal) -> str:
    """``Decimal('5.0000')`` -> ``'5'``, ``Decimal('2.50')`` -> ``'2.5'``."""
    return format(quantity.normalize(), "f")


class NotificationEmitter:
    """One-shot incoming-transfer alerts, deduplicated by transaction id."""

    def __init__(
        self,
        sink: NotificationSink,
        texts: Mapping[str, NotificationText] | None = None,
        default_language: str = "en",
    ):
        self._sink = sink
        self._texts = dict(texts or DEFAULT_TEXTS)
        self._default_language = default_language
        self._notified: set[str] = set()

    @property
    def notified_ids(self) -> frozenset[str]:
        return frozenset(self._notified)

    def observe(
        self,
        transactions: Iterable[Transaction],
        viewer_location: str | None,
        language: str | None = None,
    ) -> tuple[Notification, ...]:
        """Alert for each new pending transfer addressed to ``viewer_location``."""
        if not is_stock_location(viewer_location):
            return ()
        text = self._text(language)
        delivered: list[Notification] = []
        for tx in transactions:
            if (
                tx.to_location != viewer_location
                or tx.status is not TransactionStatus.PENDING_TARGET
                or tx.id in self._notified
            ):
                continue
            self._notified.add(tx.id)
            note = Notification(
                transaction_id=tx.id,
                title=text.title,
                body=(
                    f"{tx.display_name(language or self._default_language)}: "
                    f"{format_quantity(tx.quantity)} {tx.unit} "
                    f"{text.from_word} {tx.from_location}"
                ),
            )
            try:
                self._sink(note.title, note.body)
            except Exception:
                logger.exception(
                    "notification_sink_failed",
                    extra={"transaction_id": tx.id},
                )
                continue
            delivered.append(note)
            logger.info(
                "notification_emitted",
                extra={"transaction_id": tx.id, "viewer_location": viewer_location},
            )
        return tuple(delivered)

    def reset(self) -> None:
        """Forget every notified id (session end)."""
        count = len(self._notified)
        self._notified.clear()
        logger.debug("notifications_reset", extra={"cleared": count})

    def reconcile_id(
        self, collection: Collection, placeholder_id: str, store_id: str,
    ) -> None:
        if collection is Collection.TRANSACTIONS and placeholder_id in self._notified:
            self._notified.add(store_id)

    def _text(self, language: str | None) -> NotificationText:
        return (
            self._texts.get(language or self._default_language)
            or self._texts[self._default_language]
        )
