"""
Module: stock_kernel.services.record_store
Responsibility: The persistence boundary.  Generic insert / update / delete /
    select over the four collections (``inventory_items``, ``transactions``,
    ``app_users``, ``locations``) exchanging plain snake_case record dicts.
Architecture position: Kernel > Services.  The only module that touches ORM
    models at runtime; everything above it sees record dicts and DTOs.

Invariants enforced:
    - Each call is its own short transactional scope (commit or rollback).
    - ``update`` applies field preconditions (``expected``) before writing;
      a mismatch raises OptimisticLockError and nothing is written.
    - Item rows are versioned (version_id_col); a concurrent bump surfaces as
      OptimisticLockError, never as a silent overwrite.
    - ``insert`` returns store-assigned ids in input order.

Failure modes:
    - UnknownCollectionError for an unmapped collection name.
    - OptimisticLockError on failed precondition, missing row, or StaleDataError.
    - PersistenceError wrapping any other SQLAlchemyError.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Generator, Iterable, Mapping, Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from stock_kernel.db.base import Base
from stock_kernel.exceptions import (
    OptimisticLockError,
    PersistenceError,
    UnknownCollectionError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.models import (
    AppUserModel,
    InventoryItemModel,
    LocationModel,
    TransactionModel,
)

logger = get_logger("services.record_store")


class Collection(str, Enum):
    """Named record collections exposed by the store."""

    INVENTORY_ITEMS = "inventory_items"
    TRANSACTIONS = "transactions"
    APP_USERS = "app_users"
    LOCATIONS = "locations"

    @classmethod
    def coerce(cls, value: Collection | str) -> Collection:
        try:
            return cls(value)
        except ValueError:
            raise UnknownCollectionError(str(value)) from None


_MODELS: dict[Collection, type[Base]] = {
    Collection.INVENTORY_ITEMS: InventoryItemModel,
    Collection.TRANSACTIONS: TransactionModel,
    Collection.APP_USERS: AppUserModel,
    Collection.LOCATIONS: LocationModel,
}


class RecordStore(Protocol):
    """Operations the rest of the kernel needs from durable storage."""

    def insert(
        self, collection: Collection | str, records: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        ...

    def update(
        self,
        collection: Collection | str,
        record_id: str,
        changes: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> None:
        ...

    def delete(self, collection: Collection | str, ids: Iterable[str]) -> int:
        ...

    def select(
        self,
        collection: Collection | str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        ...


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class SqlAlchemyRecordStore:
    """
    RecordStore over the SQLAlchemy ORM models.

    Contract:
        Holds a session factory, opens one session per call.  Callers never
        see ORM instances.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, operation: str, collection: Collection) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except StaleDataError as exc:
            session.rollback()
            raise OptimisticLockError(
                entity_type=collection.value,
                entity_id="<stale row>",
                expected="unchanged version",
                actual=str(exc),
            ) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "record_store_operation_failed",
                extra={"operation": operation, "collection": collection.value},
                exc_info=True,
            )
            raise PersistenceError(
                f"{operation} on {collection.value} failed: {exc}"
            ) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def insert(
        self, collection: Collection | str, records: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        coll = Collection.coerce(collection)
        model_cls = _MODELS[coll]
        with self._scope("insert", coll) as session:
            rows = [model_cls.from_record(dict(r)) for r in records]
            session.add_all(rows)
            session.flush()
            ids = [row.id for row in rows]
        logger.debug(
            "records_inserted",
            extra={"collection": coll.value, "count": len(ids)},
        )
        return ids

    def update(
        self,
        collection: Collection | str,
        record_id: str,
        changes: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> None:
        coll = Collection.coerce(collection)
        model_cls = _MODELS[coll]
        columns = set(model_cls.__table__.columns.keys())
        unknown = set(changes) - columns
        if unknown:
            raise ValueError(
                f"Unknown fields for {coll.value}: {sorted(unknown)}"
            )

        with self._scope("update", coll) as session:
            row = session.get(model_cls, record_id)
            if row is None:
                raise OptimisticLockError(
                    entity_type=coll.value,
                    entity_id=record_id,
                    expected="present",
                    actual="missing",
                )
            for field_name, want in (expected or {}).items():
                have = getattr(row, field_name)
                if _plain(have) != _plain(want):
                    raise OptimisticLockError(
                        entity_type=coll.value,
                        entity_id=record_id,
                        expected=f"{field_name}={_plain(want)}",
                        actual=f"{field_name}={_plain(have)}",
                    )
            for field_name, value in changes.items():
                setattr(row, field_name, _plain(value))

        logger.debug(
            "record_updated",
            extra={
                "collection": coll.value,
                "record_id": record_id,
                "fields": sorted(changes),
            },
        )

    def delete(self, collection: Collection | str, ids: Iterable[str]) -> int:
        coll = Collection.coerce(collection)
        model_cls = _MODELS[coll]
        id_list = list(ids)
        if not id_list:
            return 0
        with self._scope("delete", coll) as session:
            result = session.execute(
                delete(model_cls)
                .where(model_cls.id.in_(id_list))
                .execution_options(synchronize_session=False)
            )
            count = result.rowcount
        logger.debug(
            "records_deleted",
            extra={"collection": coll.value, "count": count},
        )
        return count

    def select(
        self,
        collection: Collection | str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        coll = Collection.coerce(collection)
        model_cls = _MODELS[coll]
        stmt = select(model_cls)
        for field_name, value in (filters or {}).items():
            column = getattr(model_cls, field_name)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_([_plain(v) for v in value]))
            else:
                stmt = stmt.where(column == _plain(value))
        if order_by is not None:
            column = getattr(model_cls, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        with self._scope("select", coll) as session:
            return [row.to_record() for row in session.scalars(stmt)]
