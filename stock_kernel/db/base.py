"""
Module: stock_kernel.db.base
Responsibility: Declarative base class for all SQLAlchemy ORM models.  Provides
    the string primary key convention and the type annotation map for
    consistent column types.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - String primary keys: every model inherits a uuid4-generated primary key
      stored as String(36).  The store assigns ids; clients only ever hold
      ``tmp-`` placeholders until reconciliation.
    - Decimal precision: type_annotation_map maps Python Decimal to
      Numeric(18, 4).  NEVER use float for stock quantities.
    - Timestamps are timezone-aware.

Failure modes:
    - IntegrityError if a model attempts to INSERT a duplicate id.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_record_id() -> str:
    """Store-side id for a freshly inserted row."""
    return str(uuid4())


def as_aware(value: datetime | None) -> datetime | None:
    """
    Reattach UTC to a datetime read back from a backend that drops tzinfo.

    SQLite stores ``DateTime(timezone=True)`` values without an offset.
    """
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Contract:
        Every ORM model in the system inherits from Base.  Base provides a
        string primary key and a type_annotation_map that enforces
        consistent column types across the schema.

    Guarantees:
        - id defaults to a uuid4 string.
        - Decimal maps to Numeric(18, 4).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        # Stock quantities: fractional units (kg, liters) to four places
        Decimal: Numeric(18, 4),
        datetime: DateTime(timezone=True),
        int: Integer,
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_record_id,
    )
