"""Shared plumbing for the SQLite stores: connections, value encoding, predicates."""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

import aiosqlite

from gasstock.config import get_logger
from gasstock.core.entities import PageRequest
from gasstock.core.exceptions import DatabaseError, InvalidSortFieldError
from gasstock.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


def to_db(value: Any) -> Any:
    """Encode a Python value as a SQLite parameter."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


class Predicate:
    """Accumulates AND-combined WHERE clauses and their parameters."""

    def __init__(self) -> None:
        self.clauses: list[str] = []
        self.params: list[Any] = []

    def add(self, clause: str, *params: Any) -> "Predicate":
        self.clauses.append(clause)
        self.params.extend(to_db(p) for p in params)
        return self

    def equals(self, column: str, value: Any) -> "Predicate":
        if value is not None:
            self.add(f"{column} = ?", value)
        return self

    def contains(self, column: str, term: str | None) -> "Predicate":
        """Case-insensitive substring match."""
        if term:
            self.add(f"LOWER({column}) LIKE ? ESCAPE '\\'", like_pattern(term))
        return self

    def search(self, columns: Iterable[str], term: str | None) -> "Predicate":
        """Substring match against any of ``columns``."""
        if term:
            columns = list(columns)
            pattern = like_pattern(term)
            ors = " OR ".join(f"LOWER(COALESCE({c}, '')) LIKE ? ESCAPE '\\'" for c in columns)
            self.add(f"({ors})", *([pattern] * len(columns)))
        return self

    def at_least(self, column: str, value: Any) -> "Predicate":
        if value is not None:
            self.add(f"{column} >= ?", value)
        return self

    def at_most(self, column: str, value: Any) -> "Predicate":
        if value is not None:
            self.add(f"{column} <= ?", value)
        return self

    @property
    def sql(self) -> str:
        return f"WHERE {' AND '.join(self.clauses)}" if self.clauses else ""


def order_by(
    page: PageRequest,
    columns: dict[str, str],
    default_sort: str,
    default_order: str,
) -> str:
    """ORDER BY clause from a whitelisted sort key."""
    sort_by = page.sort_by or default_sort
    if sort_by not in columns:
        raise InvalidSortFieldError(sort_by, sorted(columns))
    direction = (page.sort_order or default_order).upper()
    return f"ORDER BY {columns[sort_by]} {direction}, id {direction}"


class SQLiteStore:
    """Base class holding the pool and the transaction-joining helpers."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def transaction(self):
        return self._pool.transaction()

    @asynccontextmanager
    async def _reader(self, tx: aiosqlite.Connection | None = None) -> AsyncIterator[aiosqlite.Connection]:
        if tx is not None:
            yield tx
        else:
            async with self._pool.acquire() as conn:
                yield conn

    @asynccontextmanager
    async def _writer(self, tx: aiosqlite.Connection | None = None) -> AsyncIterator[aiosqlite.Connection]:
        """Join the caller's transaction, or open and commit a private one."""
        if tx is not None:
            yield tx
        else:
            async with self._pool.transaction() as conn:
                yield conn

    @staticmethod
    @asynccontextmanager
    async def _guard(operation: str) -> AsyncIterator[None]:
        """Re-raise driver failures as DatabaseError."""
        try:
            yield
        except aiosqlite.Error as e:
            logger.error("database_operation_failed", operation=operation, error=str(e))
            raise DatabaseError(operation, str(e)) from e

    @staticmethod
    async def _insert(conn: aiosqlite.Connection, table: str, data: dict[str, Any]) -> None:
        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)
        await conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
            [to_db(v) for v in data.values()],
        )

    @staticmethod
    async def _update(
        conn: aiosqlite.Connection,
        table: str,
        row_id: str,
        fields: dict[str, Any],
        allowed: frozenset[str],
    ) -> bool:
        """UPDATE the whitelisted ``fields`` of one row. Returns False if no row matched."""
        fields = {k: v for k, v in fields.items() if k in allowed}
        if not fields:
            cursor = await conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (row_id,))
            return await cursor.fetchone() is not None
        assignments = ", ".join(f"{column} = ?" for column in fields)
        cursor = await conn.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            [*(to_db(v) for v in fields.values()), row_id],
        )
        return cursor.rowcount > 0

    @staticmethod
    async def _page(
        conn: aiosqlite.Connection,
        table: str,
        where: Predicate,
        order: str,
        page: PageRequest,
        select: str = "*",
    ) -> tuple[list[aiosqlite.Row], int]:
        """One page of rows plus the unpaginated match count."""
        cursor = await conn.execute(
            f"SELECT COUNT(*) FROM {table} {where.sql}", where.params
        )
        total = (await cursor.fetchone())[0]
        cursor = await conn.execute(
            f"SELECT {select} FROM {table} {where.sql} {order} LIMIT ? OFFSET ?",
            [*where.params, page.limit, page.offset],
        )
        return list(await cursor.fetchall()), total
