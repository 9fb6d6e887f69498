"""
Config -> Kernel Bridges.

Functions that convert ``StockConfig`` pieces into kernel types.  These live
in stock_config (the producer) because the kernel must NEVER import
stock_config.

Usage:
    from stock_config.bridges import build_locations

    config = get_active_config()
    static = build_locations(config)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from stock_config.schema import StockConfig
from stock_kernel.domain.dtos import Location
from stock_kernel.domain.values import LocationKind


def build_locations(config: StockConfig) -> tuple[Location, ...]:
    """Static locations as kernel ``Location`` records."""
    return tuple(
        Location(
            id=loc.id,
            name=loc.name,
            description=loc.description,
            icon=loc.icon,
            kind=LocationKind(loc.type),
        )
        for loc in config.locations
    )


def seed_location_records(config: StockConfig) -> list[dict[str, Any]]:
    return [loc.to_record() for loc in build_locations(config)]


def seed_user_records(config: StockConfig) -> list[dict[str, Any]]:
    return [
        {
            "username": u.username,
            "name": u.name,
            "role": u.role,
            "branch_code": u.branch_code,
            "branch_name": u.branch_name,
            "accessible_branches": [],
        }
        for u in config.seed_users
    ]


def seed_item_records(config: StockConfig, now: datetime) -> list[dict[str, Any]]:
    return [
        {
            "location_id": i.location_id,
            "name_en": i.name_en,
            "name_ar": i.name_ar,
            "description": i.description,
            "category": i.category,
            "quantity": i.quantity,
            "unit": i.unit,
            "min_threshold": i.min_threshold,
            "last_updated": now,
        }
        for i in config.seed_items
    ]
