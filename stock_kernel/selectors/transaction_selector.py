"""
Module: stock_kernel.selectors.transaction_selector
Responsibility: Read-only views over the transaction log: transfer inboxes
    and outboxes for a location, grouped transfer listings, a per-location
    daily summary, and report totals.
Architecture position: Kernel > Selectors.  Reads the TransactionLog cache;
    NEVER mutates it.

Invariants enforced:
    - Every view preserves the log's newest-first order.
    - ``grouped`` yields one group per ``group_key``, groups ordered by their
      newest member's date, descending.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from stock_kernel.domain.dtos import Transaction
from stock_kernel.domain.values import (
    PENDING_STATUSES,
    TransactionStatus,
    TransactionType,
)
from stock_kernel.services.transaction_log import TransactionLog


@dataclass(frozen=True)
class TransferGroupView:
    """Transactions sharing a group key, for grouped listings."""

    group_key: str
    transactions: tuple[Transaction, ...]

    @property
    def date(self):
        return self.transactions[0].date

    @property
    def is_grouped(self) -> bool:
        return not self.group_key.startswith("UNGROUPED-")

    @property
    def from_location(self) -> str | None:
        return self.transactions[0].from_location

    @property
    def to_location(self) -> str | None:
        return self.transactions[0].to_location

    @property
    def is_pending_target(self) -> bool:
        return any(
            t.status is TransactionStatus.PENDING_TARGET for t in self.transactions
        )


@dataclass(frozen=True)
class DailySummary:
    """What came into and went out of a location on one day."""

    location_id: str
    day: date
    received: tuple[Transaction, ...]
    used: tuple[Transaction, ...]

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self.received + self.used


@dataclass(frozen=True)
class ReportTotals:
    """Counts of receipts and usages on the report for a location and day."""

    location_id: str
    day: date
    transactions: tuple[Transaction, ...]
    total_received: int
    total_used: int


class TransactionSelector:
    """Queries over the cached transaction log."""

    def __init__(self, log: TransactionLog):
        self._log = log

    def incoming(self, location_id: str) -> tuple[Transaction, ...]:
        """Transfers awaiting acceptance at ``location_id``."""
        return tuple(
            t for t in self._log
            if t.to_location == location_id
            and t.status is TransactionStatus.PENDING_TARGET
        )

    def outgoing(self, location_id: str) -> tuple[Transaction, ...]:
        """Transfers leaving ``location_id`` that are still in flight."""
        return tuple(
            t for t in self._log
            if t.from_location == location_id and t.status in PENDING_STATUSES
        )

    def outgoing_approvals(self, location_id: str) -> tuple[Transaction, ...]:
        """Transfers the source manager has not yet confirmed."""
        return tuple(
            t for t in self._log
            if t.from_location == location_id
            and t.status is TransactionStatus.PENDING_SOURCE
        )

    def grouped(
        self, transactions: tuple[Transaction, ...] | None = None,
    ) -> tuple[TransferGroupView, ...]:
        """Group ``transactions`` (default: the whole log) by group key."""
        source = self._log.all() if transactions is None else transactions
        groups: dict[str, list[Transaction]] = {}
        for tx in source:
            groups.setdefault(tx.group_key, []).append(tx)
        views = [
            TransferGroupView(group_key=key, transactions=tuple(members))
            for key, members in groups.items()
        ]
        views.sort(key=lambda v: max(t.date for t in v.transactions), reverse=True)
        return tuple(views)

    def daily_summary(self, location_id: str, day: date) -> DailySummary:
        todays = [t for t in self._log if t.date.date() == day]
        received = tuple(
            t for t in todays
            if (t.type is TransactionType.RECEIVE and t.to_location == location_id)
            or (t.type is TransactionType.TRANSFER and t.to_location == location_id)
        )
        used = tuple(
            t for t in todays
            if t.type is TransactionType.USAGE and t.from_location == location_id
        )
        return DailySummary(
            location_id=location_id, day=day, received=received, used=used,
        )

    def report_totals(self, location_id: str, day: date) -> ReportTotals:
        """Receipts (incl. transfers in) and usages for a location on a day."""
        rows = tuple(
            t for t in self._log
            if t.date.date() == day and _on_report(t, location_id)
        )
        return ReportTotals(
            location_id=location_id,
            day=day,
            transactions=rows,
            total_received=sum(
                1 for t in rows
                if t.type in (TransactionType.RECEIVE, TransactionType.TRANSFER)
            ),
            total_used=sum(1 for t in rows if t.type is TransactionType.USAGE),
        )


def _on_report(tx: Transaction, location_id: str) -> bool:
    if tx.type is TransactionType.USAGE:
        return tx.from_location == location_id or tx.to_location == location_id
    return tx.to_location == location_id
