"""
Tests for TransactionLog and ClientState.

TransactionLog: newest-first ordering, group lookup, and the guarded
status change.  ClientState: loading, placeholder reconciliation across
caches, and resync after a failed flush.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from stock_kernel.domain.dtos import Transaction
from stock_kernel.domain.values import TransactionStatus, TransactionType
from stock_kernel.exceptions import PersistenceFailedError, TransactionNotFoundError
from stock_kernel.services.record_store import Collection
from tests.helpers import item_named, make_state


def _transfer(state, group_id="GRP-1", status=TransactionStatus.PENDING_TARGET):
    return Transaction(
        id=state.ids.placeholder_id(),
        type=TransactionType.TRANSFER,
        status=status,
        date=state.clock.now(),
        item_name_en="Fresh Milk",
        item_name_ar="حليب طازج",
        quantity=Decimal("2"),
        unit="liters",
        performed_by="Main Supervisor",
        transfer_group_id=group_id,
        from_location="mammal",
        to_location="warehouse",
    )


class TestTransactionLog:

    def test_append_prepends(self, state, deterministic_clock):
        first = _transfer(state, "GRP-1")
        state.transactions.append([first])
        deterministic_clock.advance(60)
        second = _transfer(state, "GRP-2")
        state.transactions.append([second])
        assert [t.id for t in state.transactions] == [second.id, first.id]

    def test_append_queues_one_bulk_insert(self, state):
        state.transactions.append([_transfer(state), _transfer(state)])
        (write,) = state.queue.pending()
        assert write.collection is Collection.TRANSACTIONS
        assert len(write.records) == 2

    def test_append_nothing(self, state):
        state.transactions.append([])
        assert not state.has_pending_writes

    def test_by_group(self, state):
        a, b, c = _transfer(state, "GRP-1"), _transfer(state, "GRP-1"), _transfer(state, "GRP-2")
        state.transactions.append([a, b, c])
        assert {t.id for t in state.transactions.by_group("GRP-1")} == {a.id, b.id}
        assert state.transactions.by_group("GRP-404") == ()

    def test_get_unknown(self, state):
        with pytest.raises(TransactionNotFoundError):
            state.transactions.get("nope")

    def test_transition_applies_with_expected_status(self, state):
        tx = _transfer(state)
        state.transactions.append([tx])
        updated = state.transactions.transition(
            tx.id, TransactionStatus.PENDING_TARGET, TransactionStatus.REJECTED, "broken seal",
        )
        assert updated.status is TransactionStatus.REJECTED
        assert state.transactions.get(tx.id).rejection_reason == "broken seal"
        write = state.queue.pending()[-1]
        assert write.changes == {"status": "rejected", "rejection_reason": "broken seal"}
        assert write.expected == {"status": "pending_target"}

    def test_transition_is_noop_when_status_moved_on(self, state, captured_logs):
        tx = _transfer(state, status=TransactionStatus.COMPLETED)
        state.transactions.append([tx])
        pending_before = len(state.queue)

        result = state.transactions.transition(
            tx.id, TransactionStatus.PENDING_TARGET, TransactionStatus.COMPLETED,
        )

        assert result is None
        assert len(state.queue) == pending_before
        assert any(r["message"] == "transaction_status_stale" for r in captured_logs())

    def test_load_sorts_newest_first(self, state, deterministic_clock):
        old = _transfer(state, "GRP-old")
        deterministic_clock.advance(3600)
        new = _transfer(state, "GRP-new")
        state.transactions.load([old, new])
        assert state.transactions.all()[0].id == new.id


class TestClientState:

    def test_load(self, state):
        assert len(state.inventory.items_at("warehouse")) == 5
        assert len(state.inventory.items_at("mammal")) == 5
        assert {u.username for u in state.users.values()} == {
            "admin", "warehouse", "employee", "riyadh",
        }
        assert {loc.id for loc in state.locations} == {"warehouse", "mammal"}
        assert len(state.transactions) == 0

    def test_flush_reconciles_transactions(self, state, seeded_store, deterministic_clock):
        tx = _transfer(state)
        state.transactions.append([tx])
        result = state.flush()

        store_id = result.reconciled[tx.id]
        assert state.transactions.find(tx.id) is None
        assert state.transactions.get(store_id).status is TransactionStatus.PENDING_TARGET

        fresh = make_state(seeded_store, deterministic_clock)
        assert fresh.transactions.get(store_id).quantity == Decimal("2")

    def test_status_change_on_placeholder_reaches_store(self, state, seeded_store, deterministic_clock):
        tx = _transfer(state)
        state.transactions.append([tx])
        state.transactions.transition(
            tx.id, TransactionStatus.PENDING_TARGET, TransactionStatus.COMPLETED,
        )
        result = state.flush()

        fresh = make_state(seeded_store, deterministic_clock)
        stored = fresh.transactions.get(result.reconciled[tx.id])
        assert stored.status is TransactionStatus.COMPLETED

    def test_failed_flush_resyncs_and_reraises(self, state, seeded_store, deterministic_clock):
        item = item_named(state, "warehouse", "Whole Milk (UHT)")
        # Another client moves the row's version underneath this one
        other = make_state(seeded_store, deterministic_clock)
        other.inventory.adjust_quantity("warehouse", item.id, Decimal("-50"))
        other.flush()

        state.inventory.adjust_quantity("warehouse", item.id, Decimal("-10"))
        with pytest.raises(PersistenceFailedError) as exc_info:
            state.flush()

        assert exc_info.value.cause_code == "OPTIMISTIC_LOCK_CONFLICT"
        assert not state.has_pending_writes
        assert state.inventory.get("warehouse", item.id).quantity == Decimal("150")

    def test_after_mutation_respects_auto_flush(self, seeded_store, deterministic_clock):
        state = make_state(seeded_store, deterministic_clock)
        state.transactions.append([_transfer(state)])
        state.after_mutation()
        assert state.has_pending_writes

        state.auto_flush = True
        state.after_mutation()
        assert not state.has_pending_writes
        assert len(seeded_store.select(Collection.TRANSACTIONS)) == 1

    def test_resync_discards_optimistic_state(self, state):
        item = item_named(state, "mammal", "Fresh Milk")
        state.inventory.adjust_quantity("mammal", item.id, Decimal("-12"))
        state.resync()
        assert state.inventory.get("mammal", item.id).quantity == Decimal("12")
        assert not state.has_pending_writes

    def test_load_reads_dates_newest_first(self, state, seeded_store, deterministic_clock):
        early = _transfer(state, "GRP-early")
        state.transactions.append([early])
        deterministic_clock.advance(timedelta(days=1).total_seconds())
        late = _transfer(state, "GRP-late")
        state.transactions.append([late])
        state.flush()

        fresh = make_state(seeded_store, deterministic_clock)
        assert [t.transfer_group_id for t in fresh.transactions] == ["GRP-late", "GRP-early"]
