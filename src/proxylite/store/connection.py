"""Native async SQLite connection backed by aiosqlite.

Exposes transaction control as dedicated verbs (begin/commit/rollback)
and executes ordinary statements with an optional implicit transaction
wrapper, mirroring the connection shape the driver expects.
"""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Sequence

import aiosqlite
from loguru import logger

from ..core.exceptions import ConnectionNotInitializedError
from ..core.types import RunResult


def split_statements(script: str) -> list[str]:
    """Split a SQL script into complete statements.

    Splits on semicolons but only where sqlite3.complete_statement agrees
    the accumulated text is a full statement, so semicolons inside string
    literals and trigger bodies stay intact.

    Args:
        script: One or more SQL statements.

    Returns:
        Non-empty statements in script order.
    """
    statements: list[str] = []
    buffer = ""
    for piece in script.split(";"):
        buffer = f"{buffer};{piece}" if buffer else piece
        if sqlite3.complete_statement(buffer + ";"):
            if buffer.strip(" \t\r\n;"):
                statements.append(buffer.strip())
            buffer = ""
    if buffer.strip(" \t\r\n;"):
        statements.append(buffer.strip())
    return statements


class AioSqliteConnection:
    """SQLite connection reached only through async calls."""

    def __init__(self, path: Path | str):
        """Initialize connection for a database file.

        Args:
            path: Path to the SQLite database file, or ":memory:".
        """
        self.path = path
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None and self._conn.in_transaction

    def _require(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise ConnectionNotInitializedError("native connection")
        return self._conn

    async def open(self) -> None:
        """Open the underlying connection in autocommit mode."""
        if self._conn is not None:
            return
        self._conn = await aiosqlite.connect(str(self.path), isolation_level=None)
        self._conn.row_factory = aiosqlite.Row
        logger.debug(f"Opened SQLite connection: {self.path}")

    async def close(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.close()
        finally:
            self._conn = None
            logger.debug(f"Closed SQLite connection: {self.path}")

    @asynccontextmanager
    async def _implicit_transaction(self, wrap: bool) -> AsyncIterator[None]:
        """Wrap the block in BEGIN/COMMIT unless a transaction is already open."""
        conn = self._require()
        if not wrap or conn.in_transaction:
            yield
            return

        await conn.execute("BEGIN")
        try:
            yield
        except BaseException:
            # SQLite may already have rolled back (SQLITE_FULL, SQLITE_IOERR)
            if conn.in_transaction:
                await conn.execute("ROLLBACK")
            raise
        await conn.execute("COMMIT")

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        conn = self._require()
        async with conn.execute(sql, tuple(params)) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def run(
        self, sql: str, params: Sequence[Any] = (), transaction: bool = False
    ) -> RunResult:
        conn = self._require()
        async with self._implicit_transaction(transaction):
            cursor = await conn.execute(sql, tuple(params))
            result = RunResult(changes=max(cursor.rowcount, 0), last_id=cursor.lastrowid)
            await cursor.close()
        return result

    async def execute(self, sql: str, transaction: bool = False) -> RunResult:
        """Execute one or more statements that take no parameters."""
        conn = self._require()
        changes = 0
        async with self._implicit_transaction(transaction):
            for statement in split_statements(sql):
                cursor = await conn.execute(statement)
                changes += max(cursor.rowcount, 0)
                await cursor.close()
        return RunResult(changes=changes)

    async def execute_set(self, statements: Sequence[tuple[str, Sequence[Any]]]) -> RunResult:
        """Run a batch of parameterized statements inside one transaction."""
        conn = self._require()
        result = RunResult()
        async with self._implicit_transaction(True):
            for sql, params in statements:
                cursor = await conn.execute(sql, tuple(params))
                result.changes += max(cursor.rowcount, 0)
                result.last_id = cursor.lastrowid
                await cursor.close()
        return result

    async def begin_transaction(self) -> RunResult:
        await self._require().execute("BEGIN")
        return RunResult()

    async def commit_transaction(self) -> RunResult:
        await self._require().execute("COMMIT")
        return RunResult()

    async def rollback_transaction(self) -> RunResult:
        await self._require().execute("ROLLBACK")
        return RunResult()
