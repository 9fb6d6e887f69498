"""
Pytest fixtures for the stock kernel test suite.

Provides:
- An in-memory SQLite database per test (tables created and dropped)
- A record store seeded from the default configuration plus one branch
- Loaded client state and a fully wired StockApp
- Actors for every role
- Structured-log capture
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from stock_config import get_active_config
from stock_config.bridges import (
    seed_item_records,
    seed_location_records,
    seed_user_records,
)
from stock_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.dtos import Actor
from stock_kernel.domain.values import UserRole
from stock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from stock_kernel.services.record_store import Collection, SqlAlchemyRecordStore
from stock_modules.app import StockApp
from tests.helpers import BRANCH, OTHER_BRANCH, make_state

SEED_TIME = datetime(2025, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture stock_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, transfers):
            transfers.initiate_transfer(...)
            logs = captured_logs()
            assert any(r["message"] == "transfer_initiated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("stock_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with every table created."""
    eng = init_engine_from_url("sqlite://")
    create_tables()
    yield eng
    drop_tables()
    reset_engine()


@pytest.fixture
def store(engine) -> SqlAlchemyRecordStore:
    """Empty record store."""
    return SqlAlchemyRecordStore(get_session_factory())


@pytest.fixture
def stock_config():
    return get_active_config()


@pytest.fixture
def seeded_store(store, stock_config) -> SqlAlchemyRecordStore:
    """
    Record store holding the default seed data plus one provisioned branch.

    The branch ``riyadh-01`` has a manager and a small stock of coffee beans.
    """
    store.insert(Collection.LOCATIONS, seed_location_records(stock_config))
    store.insert(Collection.APP_USERS, seed_user_records(stock_config))
    store.insert(Collection.INVENTORY_ITEMS, seed_item_records(stock_config, SEED_TIME))
    store.insert(Collection.APP_USERS, [{
        "username": "riyadh",
        "name": "Riyadh Manager",
        "role": UserRole.BRANCH_MANAGER.value,
        "branch_code": BRANCH,
        "branch_name": "Riyadh Branch",
        "accessible_branches": [],
    }])
    store.insert(Collection.INVENTORY_ITEMS, [{
        "location_id": BRANCH,
        "name_en": "Arabica Coffee Beans",
        "name_ar": "بن قهوة أرابيكا",
        "category": "Raw Material",
        "quantity": Decimal("10"),
        "unit": "kg",
        "min_threshold": Decimal("5"),
        "last_updated": SEED_TIME,
    }])
    return store


# =============================================================================
# Clock and actor fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()


@pytest.fixture
def admin() -> Actor:
    return Actor(id="user-admin", name="System Administrator", role=UserRole.ADMIN)


@pytest.fixture
def warehouse_manager() -> Actor:
    return Actor(
        id="user-warehouse", name="Main Supervisor", role=UserRole.WAREHOUSE_MANAGER,
    )


@pytest.fixture
def branch_manager() -> Actor:
    return Actor(
        id="user-riyadh",
        name="Riyadh Manager",
        role=UserRole.BRANCH_MANAGER,
        branch_code=BRANCH,
    )


@pytest.fixture
def other_branch_manager() -> Actor:
    return Actor(
        id="user-jeddah",
        name="Jeddah Manager",
        role=UserRole.BRANCH_MANAGER,
        branch_code=OTHER_BRANCH,
    )


@pytest.fixture
def mammal_employee() -> Actor:
    return Actor(id="user-employee", name="Mammal Staff", role=UserRole.MAMMAL_EMPLOYEE)


# =============================================================================
# Client fixtures
# =============================================================================


@pytest.fixture
def state(seeded_store, deterministic_clock):
    return make_state(seeded_store, deterministic_clock)


@pytest.fixture
def notifications() -> list[tuple[str, str]]:
    """Every (title, body) delivered to the app's sink."""
    return []


@pytest.fixture
def app(seeded_store, stock_config, deterministic_clock, notifications) -> StockApp:
    stock_app = StockApp.create(
        seeded_store,
        stock_config,
        clock=deterministic_clock,
        sink=lambda title, body: notifications.append((title, body)),
    )
    stock_app.state.load()
    return stock_app

