"""
Module: stock_kernel.models.location
Responsibility: ORM persistence for static stock locations (``locations``).
Architecture position: Kernel > Models.  Imports only db/base.py.

Invariants enforced:
    - The id is the location code itself (``warehouse``, ``mammal``), not a
      generated uuid; branches are derived from users and are not stored here.
"""

from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base


class LocationModel(Base):
    """
    ORM model for a static location.

    Maps to: stock_kernel.domain.dtos.Location (frozen dataclass).
    """

    __tablename__ = "locations"

    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str] = mapped_column(String(20), default="central")

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "type": self.type,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "LocationModel":
        model = cls(
            name=record["name"],
            description=record.get("description"),
            icon=record.get("icon"),
            type=record.get("type") or "central",
        )
        if record.get("id"):
            model.id = record["id"]
        return model

    def __repr__(self) -> str:
        return f"<LocationModel {self.id} {self.type}>"
