#!/usr/bin/env python3
"""
Seed the database with the configured locations, users and starting stock.

Creates the tables (dropping them first with --reset), then inserts the
static locations, seed users and per-location items from the active
configuration.

Usage:
    python3 scripts/seed_data.py
    python3 scripts/seed_data.py --db-url sqlite:///demo.db --reset
"""

import argparse
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def seed(store, config, now) -> dict[str, int]:
    """Insert seed records through ``store``; returns counts per collection."""
    from stock_config.bridges import (
        seed_item_records,
        seed_location_records,
        seed_user_records,
    )
    from stock_kernel.services.record_store import Collection

    counts = {
        Collection.LOCATIONS.value: len(
            store.insert(Collection.LOCATIONS, seed_location_records(config))
        ),
        Collection.APP_USERS.value: len(
            store.insert(Collection.APP_USERS, seed_user_records(config))
        ),
        Collection.INVENTORY_ITEMS.value: len(
            store.insert(Collection.INVENTORY_ITEMS, seed_item_records(config, now))
        ),
    }
    return counts


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create tables and load seed data")
    p.add_argument("--config", default=None, help="Path to a stock YAML config")
    p.add_argument("--db-url", default=None, help="Database URL (default: from config)")
    p.add_argument(
        "--reset", action="store_true", help="Drop all tables before seeding",
    )
    return p.parse_args()


def main() -> int:
    args = _parse_args()

    from stock_config import get_active_config
    from stock_kernel.db.engine import (
        create_tables,
        drop_tables,
        get_session_factory,
        init_engine_from_url,
    )
    from stock_kernel.domain.clock import SystemClock
    from stock_kernel.logging_config import configure_logging
    from stock_kernel.services.record_store import SqlAlchemyRecordStore

    configure_logging()
    config = get_active_config(args.config)
    db_url = args.db_url or config.database_url

    print()
    print(f"  [1/3] Connecting to {db_url} ...")
    init_engine_from_url(db_url)

    print("  [2/3] Creating tables ...")
    if args.reset:
        drop_tables()
    create_tables()

    print("  [3/3] Inserting seed data ...")
    store = SqlAlchemyRecordStore(get_session_factory())
    counts = seed(store, config, SystemClock().now())
    for collection, count in counts.items():
        print(f"         {collection}: {count}")

    print()
    print("  Done.")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
