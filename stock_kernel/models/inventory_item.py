"""
Module: stock_kernel.models.inventory_item
Responsibility: ORM persistence for per-location stock items
    (``inventory_items``).
Architecture position: Kernel > Models.  Imports only db/base.py.

Invariants enforced:
    - quantity and min_threshold use Decimal (Numeric) -- NEVER float.
    - ``version`` is SQLAlchemy's version_id_col: every UPDATE increments it
      and a flush against a row whose version moved underneath raises
      StaleDataError (translated to OptimisticLockError by the record store).

Failure modes:
    - StaleDataError on concurrent modification.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base, as_aware


class InventoryItemModel(Base):
    """
    ORM model for a stock item held at one location.

    Maps to: stock_kernel.domain.dtos.InventoryItem (frozen dataclass).
    """

    __tablename__ = "inventory_items"

    __table_args__ = (
        Index("idx_inv_item_location", "location_id"),
        Index("idx_inv_item_name_en", "name_en"),
    )

    location_id: Mapped[str] = mapped_column(String(50))
    name_en: Mapped[str] = mapped_column(String(200))
    name_ar: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100))
    quantity: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    unit: Mapped[str] = mapped_column(String(30))
    min_threshold: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    last_updated: Mapped[datetime] = mapped_column()
    version: Mapped[int] = mapped_column(nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "location_id": self.location_id,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "description": self.description,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "min_threshold": self.min_threshold,
            "last_updated": as_aware(self.last_updated),
            "version": self.version,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "InventoryItemModel":
        model = cls(
            location_id=record["location_id"],
            name_en=record["name_en"],
            name_ar=record["name_ar"],
            description=record.get("description"),
            category=record["category"],
            quantity=record["quantity"],
            unit=record["unit"],
            min_threshold=record.get("min_threshold") or Decimal("0"),
            last_updated=record["last_updated"],
        )
        if record.get("id"):
            model.id = record["id"]
        return model

    def __repr__(self) -> str:
        return (
            f"<InventoryItemModel {self.id} {self.name_en!r} @ {self.location_id} "
            f"qty={self.quantity} v{self.version}>"
        )
