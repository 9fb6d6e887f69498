"""
Property-based tests for quantity conservation.

Random sequences of transfers and follow-up actions (confirm, receive,
reject, cancel) by actors with and without source authority.  Whatever the
sequence, per item name:

    on hand at every location + in transit (pending_target) == seeded total

and no quantity is ever negative.  Transfers and reversals only move stock;
refused steps change nothing.

Each example builds a fresh ClientState over the seeded store and never
flushes, so examples do not leak into each other.
"""

from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from stock_kernel.domain.dtos import Actor
from stock_kernel.domain.values import (
    TERMINAL_STATUSES,
    TransactionStatus,
    TransactionType,
    UserRole,
)
from stock_kernel.exceptions import EmptyBatchError, InsufficientStockError
from stock_modules.daily_log import BulkLogEntry, DailyLogService
from stock_modules.transfers import TransferLine, TransferService
from tests.helpers import BRANCH, make_state

LOCATIONS = ("warehouse", "mammal", BRANCH)
NAMES = ("Arabica Coffee Beans", "Paper Cups (12oz)", "Fresh Milk")
ACTIONS = ("confirm", "receive", "reject", "cancel")

MANAGER = Actor(id="fuzz-admin", name="Fuzz Admin", role=UserRole.ADMIN)
REQUESTER = Actor(id="fuzz-staff", name="Fuzz Staff", role=UserRole.MAMMAL_EMPLOYEE)

transfer_steps = st.lists(
    st.tuples(
        st.sampled_from(LOCATIONS),
        st.sampled_from(LOCATIONS),
        st.sampled_from(NAMES),
        st.integers(min_value=1, max_value=600),
        st.booleans(),
        st.lists(st.sampled_from(ACTIONS), max_size=3),
    ),
    min_size=1,
    max_size=8,
)

FUZZ_SETTINGS = settings(
    max_examples=40,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


def _on_hand(state, name) -> Decimal:
    return sum(
        (i.quantity for i in state.inventory.all_items() if i.name_en == name),
        Decimal("0"),
    )


def _in_transit(state, name) -> Decimal:
    return sum(
        (
            t.quantity for t in state.transactions
            if t.type is TransactionType.TRANSFER
            and t.status is TransactionStatus.PENDING_TARGET
            and t.item_name_en == name
        ),
        Decimal("0"),
    )


class TestTransferConservation:

    @FUZZ_SETTINGS
    @given(steps=transfer_steps)
    def test_stock_is_only_moved(self, seeded_store, deterministic_clock, steps):
        state = make_state(seeded_store, deterministic_clock)
        service = TransferService(state)
        seeded = {name: _on_hand(state, name) for name in NAMES}

        for source, dest, name, qty, as_manager, actions in steps:
            if source == dest:
                continue
            item = state.inventory.find_by_name(source, name)
            if item is None:
                continue
            actor = MANAGER if as_manager else REQUESTER
            try:
                sub = service.initiate_transfer(
                    [TransferLine(item.id, qty)], dest, source, actor,
                )
            except InsufficientStockError:
                continue
            tx = sub.transactions[0]
            for action in actions:
                try:
                    if action == "confirm":
                        service.confirm_outbound(tx, MANAGER)
                    elif action == "receive":
                        service.receive_transfer(tx, MANAGER)
                    elif action == "reject":
                        service.reject_transfer(tx, "fuzz", MANAGER)
                    else:
                        service.cancel_transfer(tx, MANAGER)
                except InsufficientStockError:
                    pass

        for name in NAMES:
            assert _on_hand(state, name) + _in_transit(state, name) == seeded[name]
        assert all(i.quantity >= 0 for i in state.inventory.all_items())

    @FUZZ_SETTINGS
    @given(steps=transfer_steps)
    def test_terminal_transactions_stay_terminal(self, seeded_store, deterministic_clock, steps):
        state = make_state(seeded_store, deterministic_clock)
        service = TransferService(state)
        terminal: dict[str, TransactionStatus] = {}

        for source, dest, name, qty, as_manager, actions in steps:
            item = state.inventory.find_by_name(source, name)
            if source == dest or item is None:
                continue
            try:
                sub = service.initiate_transfer(
                    [TransferLine(item.id, qty)], dest, source,
                    MANAGER if as_manager else REQUESTER,
                )
            except InsufficientStockError:
                continue
            tx_id = sub.transactions[0].id
            for action in actions:
                if action == "receive":
                    service.receive_transfer(tx_id, MANAGER)
                elif action == "cancel":
                    service.cancel_transfer(tx_id, MANAGER)
                elif action == "reject":
                    service.reject_transfer(tx_id, "fuzz", MANAGER)
                current = state.transactions.get(tx_id).status
                if tx_id in terminal:
                    assert current is terminal[tx_id]
                elif current in TERMINAL_STATUSES:
                    terminal[tx_id] = current


class TestDailyLogBatch:

    @FUZZ_SETTINGS
    @given(
        received=st.integers(min_value=0, max_value=20),
        used=st.integers(min_value=0, max_value=40),
    )
    def test_batch_applies_fully_or_not_at_all(
        self, seeded_store, deterministic_clock, received, used,
    ):
        state = make_state(seeded_store, deterministic_clock)
        syrup = state.inventory.find_by_name("mammal", "Vanilla Syrup")
        entry = BulkLogEntry(syrup.id, received=received, used=used)

        try:
            created = DailyLogService(state).submit_bulk([entry], "mammal", MANAGER)
        except InsufficientStockError:
            assert used > syrup.quantity + received
            assert state.inventory.get("mammal", syrup.id).quantity == syrup.quantity
            assert not state.has_pending_writes
            return
        except EmptyBatchError:
            assert received == 0 and used == 0
            return

        expected = syrup.quantity + received - used
        assert state.inventory.get("mammal", syrup.id).quantity == expected
        assert len(created) == (received > 0) + (used > 0)
