# barbershop/store.py

"""Async record store over a SQLModel session.

Tables are addressed by name so callers stay independent of the ORM.
Every call is all-or-nothing: a failed write is rolled back and raised
as ``StoreError``. Blocking session work runs in the threadpool.
"""

import logging
from typing import Any, Iterable, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .errors import DuplicateRecordError, RecordNotFoundError, StoreError
from .models import Appointment, Review, User, UserRole

logger = logging.getLogger(__name__)

TABLES = {
    "appointments": Appointment,
    "reviews": Review,
    "profiles": User,
    "user_roles": UserRole,
}

# filter key suffixes, e.g. {"appointment_date__gte": today}
OPERATORS = {
    "eq": lambda column, value: column == value,
    "gte": lambda column, value: column >= value,
    "lte": lambda column, value: column <= value,
    "in": lambda column, value: column.in_(list(value)),
}


def _is_unique_violation(exc: IntegrityError) -> bool:
    # postgres reports SQLSTATE 23505, sqlite says "UNIQUE constraint failed"
    if "23505" in (getattr(exc.orig, "pgcode", None), getattr(exc.orig, "sqlstate", None)):
        return True
    return "unique" in str(exc.orig).lower()


def _model(table: str):
    try:
        return TABLES[table]
    except KeyError:
        raise StoreError(f"Unknown table '{table}'") from None


class RecordStore:
    def __init__(self, session: Session):
        self.session = session

    async def insert(self, table: str, fields: dict) -> Any:
        return await run_in_threadpool(self._insert, table, fields)

    async def get(self, table: str, record_id: Any) -> Any:
        return await run_in_threadpool(self._get, table, record_id)

    async def update(self, table: str, record_id: Any, patch: dict) -> Any:
        return await run_in_threadpool(self._update, table, record_id, patch)

    async def delete(self, table: str, record_id: Any) -> None:
        await run_in_threadpool(self._delete, table, record_id)

    async def query(
        self,
        table: str,
        filters: Optional[dict] = None,
        order: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> list:
        return await run_in_threadpool(self._query, table, filters or {}, list(order or ()), limit)

    def _insert(self, table, fields):
        record = _model(table)(**fields)
        self.session.add(record)
        self._commit(table)
        self.session.refresh(record)
        return record

    def _get(self, table, record_id):
        try:
            record = self.session.get(_model(table), record_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load %s %s", table, record_id)
            raise StoreError(f"Could not load {table} record") from exc
        if record is None:
            raise RecordNotFoundError(table, record_id)
        return record

    def _update(self, table, record_id, patch):
        record = self._get(table, record_id)
        for key, value in patch.items():
            setattr(record, key, value)
        self.session.add(record)
        self._commit(table)
        self.session.refresh(record)
        return record

    def _delete(self, table, record_id):
        record = self._get(table, record_id)
        self.session.delete(record)
        self._commit(table)

    def _query(self, table, filters, order, limit):
        model = _model(table)
        stmt = select(model)

        for key, value in filters.items():
            name, _, op = key.partition("__")
            column = getattr(model, name, None)
            if column is None or (op or "eq") not in OPERATORS:
                raise StoreError(f"Invalid filter '{key}' for {table}")
            stmt = stmt.where(OPERATORS[op or "eq"](column, value))

        for key in order:
            column = getattr(model, key.lstrip("-"), None)
            if column is None:
                raise StoreError(f"Invalid ordering '{key}' for {table}")
            stmt = stmt.order_by(column.desc() if key.startswith("-") else column)

        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Query on %s failed", table)
            raise StoreError(f"Could not read {table}") from exc

    def _commit(self, table):
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateRecordError(f"Conflicting {table} record") from exc
            logger.exception("Write to %s violated a constraint", table)
            raise StoreError(f"Invalid {table} record") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Write to %s failed", table)
            raise StoreError(f"Could not write {table} record") from exc
