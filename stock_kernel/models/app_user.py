"""
Module: stock_kernel.models.app_user
Responsibility: ORM persistence for application users (``app_users``).
    Branch-manager rows double as the source of dynamic branch locations.
Architecture position: Kernel > Models.  Imports only db/base.py.

Invariants enforced:
    - username is unique.
    - Roles stored as String(30) (UserRole values).
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base


class AppUserModel(Base):
    """
    ORM model for an application user.

    Maps to: stock_kernel.domain.dtos.User (frozen dataclass).
    """

    __tablename__ = "app_users"

    username: Mapped[str] = mapped_column(String(100), unique=True)
    name: Mapped[str] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(30))
    branch_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    branch_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    accessible_branches: Mapped[list | None] = mapped_column(JSON, nullable=True)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role,
            "branch_code": self.branch_code,
            "branch_name": self.branch_name,
            "accessible_branches": list(self.accessible_branches or []),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "AppUserModel":
        model = cls(
            username=record["username"],
            name=record["name"],
            role=record["role"],
            branch_code=record.get("branch_code"),
            branch_name=record.get("branch_name"),
            accessible_branches=list(record.get("accessible_branches") or []),
        )
        if record.get("id"):
            model.id = record["id"]
        return model

    def __repr__(self) -> str:
        return f"<AppUserModel {self.username} role={self.role}>"
