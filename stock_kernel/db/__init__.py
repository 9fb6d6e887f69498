"""Database layer - engine and declarative base."""

from stock_kernel.db.base import Base, as_aware, new_record_id
from stock_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)

__all__ = [
    "Base",
    "as_aware",
    "new_record_id",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
]
