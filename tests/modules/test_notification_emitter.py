"""
Tests for NotificationEmitter -- one alert per incoming pending transfer.
"""

from decimal import Decimal

from stock_modules.notifications import NotificationEmitter, format_quantity
from stock_modules.transfers import TransferLine, TransferService
from tests.helpers import BRANCH, item_named


def _send_beans(state, actor, quantity=5):
    beans = item_named(state, "warehouse", "Arabica Coffee Beans")
    return TransferService(state).initiate_transfer(
        [TransferLine(beans.id, quantity)], BRANCH, "warehouse", actor,
    )


class TestFormatQuantity:

    def test_trailing_zeros_dropped(self):
        assert format_quantity(Decimal("5.0000")) == "5"
        assert format_quantity(Decimal("2.50")) == "2.5"

    def test_no_exponent_for_round_numbers(self):
        assert format_quantity(Decimal("1000.0000")) == "1000"


class TestObserve:

    def test_alert_for_pending_incoming(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append((t, b)))
        sub = _send_beans(state, warehouse_manager)

        notes = emitter.observe(state.transactions, BRANCH)

        assert delivered == [("Incoming Requests", "Arabica Coffee Beans: 5 kg from warehouse")]
        assert [n.transaction_id for n in notes] == [sub.transactions[0].id]

    def test_each_transaction_alerts_once(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append(b))
        _send_beans(state, warehouse_manager)

        emitter.observe(state.transactions, BRANCH)
        emitter.observe(state.transactions, BRANCH)
        _send_beans(state, warehouse_manager, quantity=2)
        emitter.observe(state.transactions, BRANCH)

        assert len(delivered) == 2
        assert delivered[1] == "Arabica Coffee Beans: 2 kg from warehouse"

    def test_only_viewer_location_and_pending_target(self, state, warehouse_manager, mammal_employee):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append(b))
        milk = item_named(state, "mammal", "Fresh Milk")
        TransferService(state).initiate_transfer(
            [TransferLine(milk.id, 1)], "warehouse", "mammal", mammal_employee,
        )
        _send_beans(state, warehouse_manager)

        assert emitter.observe(state.transactions, "warehouse") == ()
        assert emitter.observe(state.transactions, "mammal") == ()
        assert emitter.observe(state.transactions, "all") == ()
        assert emitter.observe(state.transactions, None) == ()
        assert delivered == []

    def test_arabic_texts(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append((t, b)))
        _send_beans(state, warehouse_manager)

        emitter.observe(state.transactions, BRANCH, language="ar")

        assert delivered == [("طلبات واردة", "بن قهوة أرابيكا: 5 kg من warehouse")]

    def test_unknown_language_falls_back(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append(t))
        _send_beans(state, warehouse_manager)
        emitter.observe(state.transactions, BRANCH, language="fr")
        assert delivered == ["Incoming Requests"]

    def test_raising_sink_is_logged_and_scan_continues(self, state, warehouse_manager, captured_logs):
        calls = []

        def flaky_sink(title, body):
            calls.append(body)
            if len(calls) == 1:
                raise OSError("display unavailable")

        emitter = NotificationEmitter(flaky_sink)
        first = _send_beans(state, warehouse_manager, quantity=1)
        second = _send_beans(state, warehouse_manager, quantity=2)

        notes = emitter.observe(state.transactions, BRANCH)

        assert len(calls) == 2
        assert len(notes) == 1
        assert emitter.notified_ids == {
            first.transactions[0].id, second.transactions[0].id,
        }
        failed = [r for r in captured_logs() if r["message"] == "notification_sink_failed"]
        assert len(failed) == 1
        assert failed[0]["exc_type"] == "OSError"

        emitter.observe(state.transactions, BRANCH)
        assert len(calls) == 2

    def test_reset_allows_alert_again(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append(b))
        _send_beans(state, warehouse_manager)
        emitter.observe(state.transactions, BRANCH)

        emitter.reset()
        emitter.observe(state.transactions, BRANCH)

        assert len(delivered) == 2

    def test_dedup_survives_placeholder_reconciliation(self, state, warehouse_manager):
        delivered = []
        emitter = NotificationEmitter(lambda t, b: delivered.append(b))
        state.add_reconcile_listener(emitter.reconcile_id)
        sub = _send_beans(state, warehouse_manager)
        emitter.observe(state.transactions, BRANCH)

        result = state.flush()
        emitter.observe(state.transactions, BRANCH)

        assert len(delivered) == 1
        assert result.reconciled[sub.transactions[0].id] in emitter.notified_ids
