"""
Tests for DailyLogService -- usage and receive entries at one location.

Covers single entries, the all-or-nothing bulk submission (receives applied
before usages), and refusal without mutation.
"""

from decimal import Decimal

import pytest

from stock_kernel.domain.values import (
    CONSUMED,
    EXTERNAL_SUPPLIER,
    TransactionStatus,
    TransactionType,
)
from stock_kernel.exceptions import (
    EmptyBatchError,
    InsufficientStockError,
    InvalidEntryTypeError,
    InvalidLocationError,
    ItemNotFoundError,
    NegativeQuantityError,
    NonPositiveQuantityError,
)
from stock_modules.daily_log import BulkLogEntry, DailyLogService
from tests.helpers import item_named, make_state


@pytest.fixture
def daily_log(state) -> DailyLogService:
    return DailyLogService(state)


class TestRecordEntry:

    def test_usage_deducts_and_logs_consumed(self, state, daily_log, mammal_employee):
        milk = item_named(state, "mammal", "Fresh Milk")
        tx = daily_log.record_entry("usage", milk.id, 3, "morning shift", "mammal", mammal_employee)

        assert tx.type is TransactionType.USAGE
        assert tx.status is TransactionStatus.COMPLETED
        assert tx.from_location == "mammal"
        assert tx.to_location == CONSUMED
        assert tx.transfer_group_id is None
        assert tx.notes == "morning shift"
        assert state.inventory.get("mammal", milk.id).quantity == Decimal("9")
        assert state.transactions.all()[0] == tx

    def test_receive_adds_from_external_supplier(self, state, daily_log, warehouse_manager):
        sugar = item_named(state, "warehouse", "Sugar Sticks")
        tx = daily_log.record_entry(
            TransactionType.RECEIVE, sugar.id, "250", "", "warehouse", warehouse_manager,
        )
        assert tx.from_location == EXTERNAL_SUPPLIER
        assert tx.to_location == "warehouse"
        assert tx.notes is None
        assert state.inventory.get("warehouse", sugar.id).quantity == Decimal("10250")

    def test_usage_to_exactly_zero(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        daily_log.record_entry("usage", syrup.id, 5, None, "mammal", mammal_employee)
        assert state.inventory.get("mammal", syrup.id).quantity == 0

    def test_usage_beyond_stock_changes_nothing(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        with pytest.raises(InsufficientStockError):
            daily_log.record_entry("usage", syrup.id, 6, None, "mammal", mammal_employee)
        assert state.inventory.get("mammal", syrup.id).quantity == Decimal("5")
        assert len(state.transactions) == 0
        assert not state.has_pending_writes

    @pytest.mark.parametrize("entry_type", ["transfer", "waste", ""])
    def test_invalid_entry_type(self, state, daily_log, admin, entry_type):
        milk = item_named(state, "mammal", "Fresh Milk")
        with pytest.raises(InvalidEntryTypeError):
            daily_log.record_entry(entry_type, milk.id, 1, None, "mammal", admin)

    @pytest.mark.parametrize("location", [None, "all"])
    def test_requires_single_location(self, daily_log, admin, location):
        with pytest.raises(InvalidLocationError):
            daily_log.record_entry("usage", "x", 1, None, location, admin)

    @pytest.mark.parametrize("qty", [0, -2])
    def test_non_positive_quantity(self, state, daily_log, admin, qty):
        milk = item_named(state, "mammal", "Fresh Milk")
        with pytest.raises(NonPositiveQuantityError):
            daily_log.record_entry("usage", milk.id, qty, None, "mammal", admin)

    def test_item_must_be_at_location(self, state, daily_log, admin):
        sugar = item_named(state, "warehouse", "Sugar Sticks")
        with pytest.raises(ItemNotFoundError):
            daily_log.record_entry("usage", sugar.id, 1, None, "mammal", admin)

    def test_entry_persists(self, state, daily_log, seeded_store, deterministic_clock, admin):
        milk = item_named(state, "mammal", "Fresh Milk")
        daily_log.record_entry("usage", milk.id, 2, None, "mammal", admin)
        state.flush()

        fresh = make_state(seeded_store, deterministic_clock)
        (tx,) = fresh.transactions.all()
        assert tx.type is TransactionType.USAGE
        assert tx.performed_by == admin.name
        assert fresh.inventory.get("mammal", milk.id).quantity == Decimal("10")


class TestSubmitBulk:

    def test_receives_applied_before_usages(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        created = daily_log.submit_bulk(
            [BulkLogEntry(syrup.id, received=10, used=12)], "mammal", mammal_employee,
        )

        assert [t.type for t in created] == [TransactionType.RECEIVE, TransactionType.USAGE]
        assert state.inventory.get("mammal", syrup.id).quantity == Decimal("3")

    def test_usage_listed_before_receive_of_same_item(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        created = daily_log.submit_bulk(
            [
                BulkLogEntry(syrup.id, used=12),
                BulkLogEntry(syrup.id, received=10),
            ],
            "mammal", mammal_employee,
        )

        assert [t.type for t in created] == [TransactionType.RECEIVE, TransactionType.USAGE]
        assert state.inventory.get("mammal", syrup.id).quantity == Decimal("3")

    def test_split_usage_checked_against_batch_total(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        with pytest.raises(InsufficientStockError) as exc_info:
            daily_log.submit_bulk(
                [
                    BulkLogEntry(syrup.id, used=8),
                    BulkLogEntry(syrup.id, received=10),
                    BulkLogEntry(syrup.id, used=8),
                ],
                "mammal", mammal_employee,
            )
        assert Decimal(exc_info.value.requested) == Decimal("16")
        assert Decimal(exc_info.value.available) == Decimal("15")
        assert state.inventory.get("mammal", syrup.id).quantity == Decimal("5")
        assert not state.has_pending_writes

    def test_over_use_refuses_whole_batch(self, state, daily_log, mammal_employee):
        syrup = item_named(state, "mammal", "Vanilla Syrup")
        milk = item_named(state, "mammal", "Fresh Milk")
        with pytest.raises(InsufficientStockError) as exc_info:
            daily_log.submit_bulk(
                [
                    BulkLogEntry(milk.id, used=1),
                    BulkLogEntry(syrup.id, received=10, used=16),
                ],
                "mammal", mammal_employee,
            )
        assert Decimal(exc_info.value.available) == Decimal("15")
        assert state.inventory.get("mammal", milk.id).quantity == Decimal("12")
        assert state.inventory.get("mammal", syrup.id).quantity == Decimal("5")
        assert not state.has_pending_writes

    def test_negative_amount(self, state, daily_log, admin):
        milk = item_named(state, "mammal", "Fresh Milk")
        with pytest.raises(NegativeQuantityError):
            daily_log.submit_bulk([BulkLogEntry(milk.id, received=-1)], "mammal", admin)

    def test_all_empty_entries(self, state, daily_log, admin):
        milk = item_named(state, "mammal", "Fresh Milk")
        with pytest.raises(EmptyBatchError):
            daily_log.submit_bulk([BulkLogEntry(milk.id)], "mammal", admin)
        with pytest.raises(EmptyBatchError):
            daily_log.submit_bulk([], "mammal", admin)

    def test_empty_entries_skipped(self, state, daily_log, admin):
        milk = item_named(state, "mammal", "Fresh Milk")
        cups = item_named(state, "mammal", "Paper Cups (12oz)")
        created = daily_log.submit_bulk(
            [BulkLogEntry(milk.id), BulkLogEntry(cups.id, used=50, notes="rush")],
            "mammal", admin,
        )
        (tx,) = created
        assert tx.item_name_en == "Paper Cups (12oz)"
        assert tx.notes == "rush"

    def test_batch_is_one_insert(self, state, daily_log, admin):
        milk = item_named(state, "mammal", "Fresh Milk")
        cups = item_named(state, "mammal", "Paper Cups (12oz)")
        daily_log.submit_bulk(
            [BulkLogEntry(milk.id, received=2, used=1), BulkLogEntry(cups.id, used=10)],
            "mammal", admin,
        )
        inserts = [w for w in state.queue.pending() if w.kind.value == "insert"]
        assert len(inserts) == 1
        assert len(inserts[0].records) == 3

    def test_global_view_refused(self, daily_log, admin):
        with pytest.raises(InvalidLocationError):
            daily_log.submit_bulk([BulkLogEntry("x", used=1)], "all", admin)
