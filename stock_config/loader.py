"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the typed
``stock_config.schema`` dataclasses.  Callers use
``stock_config.get_active_config()``; this module is the parsing layer
beneath it.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields have no silent defaults.
* Quantities are parsed to ``Decimal`` via ``str`` (never float).
* ``compute_checksum`` is deterministic for identical input.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from stock_config.schema import (
    LocationDef,
    NotificationTextDef,
    SeedItem,
    SeedUser,
    StockConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any) -> Decimal:
    """Parse a YAML number or string as ``Decimal``."""
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse quantity from {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse quantity from {value!r}") from exc


def parse_location(data: dict[str, Any]) -> LocationDef:
    return LocationDef(
        id=data["id"],
        name=data["name"],
        description=data.get("description", ""),
        icon=data.get("icon", ""),
        type=data.get("type", "central"),
    )


def parse_notification_texts(data: dict[str, Any]) -> tuple[NotificationTextDef, ...]:
    """Parse ``{language: {title, from_word}}`` into text definitions."""
    return tuple(
        NotificationTextDef(
            language=language,
            title=text["title"],
            from_word=text["from_word"],
        )
        for language, text in sorted(data.items())
    )


def parse_seed_user(data: dict[str, Any]) -> SeedUser:
    return SeedUser(
        username=data["username"],
        name=data["name"],
        role=data["role"],
        branch_code=data.get("branch_code"),
        branch_name=data.get("branch_name"),
    )


def parse_seed_items(data: dict[str, Any]) -> tuple[SeedItem, ...]:
    """Parse ``{location_id: [item, ...]}``."""
    items: list[SeedItem] = []
    for location_id, entries in data.items():
        for entry in entries or ():
            items.append(SeedItem(
                location_id=location_id,
                name_en=entry["name_en"],
                name_ar=entry["name_ar"],
                category=entry["category"],
                quantity=parse_decimal(entry["quantity"]),
                unit=entry["unit"],
                min_threshold=parse_decimal(entry.get("min_threshold", 0)),
                description=entry.get("description"),
            ))
    return tuple(items)


def parse_config(data: dict[str, Any]) -> StockConfig:
    """
    Parse the root mapping of a stock configuration file.

    Raises:
        KeyError: if ``database_url`` or ``locations`` is missing.
        ValueError: on duplicate locations or unparsable quantities.
    """
    categories = data.get("categories", {})
    branches = data.get("branches", {})
    seed = data.get("seed", {})
    return StockConfig(
        database_url=data["database_url"],
        locations=tuple(parse_location(loc) for loc in data["locations"]),
        received_category=categories.get("received", "Received"),
        returned_category=categories.get("returned", "Returned"),
        branch_description=branches.get("description", "Branch Inventory"),
        branch_icon=branches.get("icon", "store"),
        group_id_prefix=data.get("group_id_prefix", "GRP"),
        default_language=data.get("default_language", "en"),
        notification_texts=parse_notification_texts(data.get("notifications", {})),
        seed_users=tuple(parse_seed_user(u) for u in seed.get("users", ())),
        seed_items=parse_seed_items(seed.get("items", {})),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> StockConfig:
    return parse_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
