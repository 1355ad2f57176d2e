"""Shared plumbing for SQLite stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation

import aiosqlite

from rms_procurement.core.entities.common import ZERO, utcnow
from rms_procurement.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)


class SQLiteStore:
    """
    Base class for stores that can run standalone or inside a unit of work.

    Without a bound connection every call takes its own pooled connection
    and commits on its own. With a connection bound by SQLiteUnitOfWork all
    calls share that connection and the unit of work commits.
    """

    def __init__(self, conn: aiosqlite.Connection | None = None):
        self._conn = conn

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        async with get_connection() as conn:
            yield conn

    @asynccontextmanager
    async def _write(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        async with get_transaction() as conn:
            yield conn


def dec(value: Decimal | None) -> str | None:
    """Decimal to its canonical TEXT column value."""
    return None if value is None else str(value)


def to_decimal(value, default: Decimal | None = ZERO) -> Decimal | None:
    if value is None or value == "":
        return default
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return default


def to_datetime(value, default: datetime | None = None) -> datetime | None:
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return default


def to_date(value) -> date | None:
    if value:
        try:
            return date.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return None


def iso(value: date | datetime | None) -> str | None:
    """ISO text for a column. Aware datetimes are stored as naive UTC, like utcnow()."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat() if value else None


def now_or(value) -> datetime:
    return to_datetime(value) or utcnow()
