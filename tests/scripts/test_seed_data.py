"""
Tests for scripts/seed_data.py against an in-memory database.
"""

from datetime import datetime, timezone

from scripts.seed_data import seed
from stock_kernel.services.record_store import Collection
from tests.helpers import item_named, make_state


class TestSeed:

    def test_counts(self, store, stock_config):
        counts = seed(store, stock_config, datetime(2025, 3, 1, tzinfo=timezone.utc))
        assert counts == {
            "locations": 2,
            "app_users": 3,
            "inventory_items": 10,
        }

    def test_seeded_client_loads(self, store, stock_config, deterministic_clock):
        seed(store, stock_config, deterministic_clock.now())
        state = make_state(store, deterministic_clock)

        assert item_named(state, "warehouse", "Sugar Sticks").quantity == 10000
        assert item_named(state, "mammal", "Vanilla Syrup").unit == "bottles"
        assert {u.username for u in state.users.values()} == {"admin", "warehouse", "employee"}
        assert len(store.select(Collection.TRANSACTIONS)) == 0
