"""
Module: stock_kernel.db.engine
Responsibility: Build the process-wide engine and session factory the
    record store draws its sessions from.
Architecture position: Kernel > DB.  Imports db/base.py (and the models,
    lazily, so their tables are registered before DDL).

Two targets are supported:
    - PostgreSQL (``postgresql://...``, needs the ``postgres`` extra):
      pooled connections, pre-ping, READ COMMITTED.
    - SQLite (``sqlite://`` or ``sqlite:///file``): in-memory databases use
      a single shared connection so every session sees the same data.

Failure modes:
    - RuntimeError when the factory or engine is requested before
      init_engine_from_url().
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from stock_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None

_NOT_READY = "Engine not initialized. Call init_engine_from_url() first."


def _sqlite_options(database: str | None) -> dict:
    options: dict = {"connect_args": {"check_same_thread": False}}
    if database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


def _postgres_options(pool_size: int, max_overflow: int) -> dict:
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> Engine:
    """
    Create the engine and session factory, replacing any previous pair.

    Sessions from the factory keep attribute values after commit
    (``expire_on_commit=False``) so records can be read once the
    session-per-call scope has closed.
    """
    global _engine, _SessionFactory

    url = make_url(database_url)
    dialect = url.get_backend_name()
    if dialect == "sqlite":
        options = _sqlite_options(url.database)
    else:
        options = _postgres_options(pool_size, max_overflow)

    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(database_url, echo=echo, **options)
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={"dialect": dialect, "echo": echo})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_READY)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """The factory handed to SqlAlchemyRecordStore."""
    if _SessionFactory is None:
        raise RuntimeError(_NOT_READY)
    return _SessionFactory


def create_tables() -> None:
    """Create locations, app_users, inventory_items and transactions."""
    from stock_kernel.db.base import Base
    import stock_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables() -> None:
    from stock_kernel.db.base import Base
    import stock_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())
    logger.info("tables_dropped")


def reset_engine() -> None:
    """Dispose the engine and forget the factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
