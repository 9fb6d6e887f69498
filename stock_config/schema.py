"""
Stock configuration schema.

The human-authored configuration parsed from YAML by the loader: database
location, static locations, category names for workflow-created items,
branch presentation, notification wording and seed data.  Every type is a
frozen dataclass; the kernel never sees these directly (see ``bridges``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class LocationDef:
    """A static location."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    type: str = "central"


@dataclass(frozen=True)
class NotificationTextDef:
    """Wording of the incoming-transfer alert in one language."""

    language: str
    title: str
    from_word: str


@dataclass(frozen=True)
class SeedUser:
    username: str
    name: str
    role: str
    branch_code: str | None = None
    branch_name: str | None = None


@dataclass(frozen=True)
class SeedItem:
    location_id: str
    name_en: str
    name_ar: str
    category: str
    quantity: Decimal
    unit: str
    min_threshold: Decimal = Decimal("0")
    description: str | None = None


@dataclass(frozen=True)
class StockConfig:
    """The complete configuration of one deployment."""

    database_url: str
    locations: tuple[LocationDef, ...]
    received_category: str = "Received"
    returned_category: str = "Returned"
    branch_description: str = "Branch Inventory"
    branch_icon: str = "store"
    group_id_prefix: str = "GRP"
    default_language: str = "en"
    notification_texts: tuple[NotificationTextDef, ...] = ()
    seed_users: tuple[SeedUser, ...] = ()
    seed_items: tuple[SeedItem, ...] = ()
    checksum: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        ids = [loc.id for loc in self.locations]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate location ids in configuration: {ids}")
        languages = {t.language for t in self.notification_texts}
        if self.notification_texts and self.default_language not in languages:
            raise ValueError(
                f"default_language {self.default_language!r} has no notification text"
            )

    @property
    def central_location_ids(self) -> frozenset[str]:
        return frozenset(loc.id for loc in self.locations if loc.type == "central")
