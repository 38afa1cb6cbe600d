"""Statement executor over a native async SQLite connection."""

from __future__ import annotations

import shutil
import sqlite3
from typing import TYPE_CHECKING, Any, Callable, Sequence

from loguru import logger

from ..core.config import Config
from ..core.exceptions import ConnectionNotInitializedError, ExecutionError
from ..core.types import ProxyResult, ResultShape, RunResult
from .connection import AioSqliteConnection
from .transaction import SqlCommandType, detect_sql_command_type

if TYPE_CHECKING:
    from ..app.protocols import NativeConnectionProtocol

ConnectionFactory = Callable[[Any], "NativeConnectionProtocol"]


class SQLiteDriver:
    """Executes statements for the migration engine and the query proxy.

    Transaction-control text (BEGIN, COMMIT, ROLLBACK) handed to run() is
    translated into the connection's dedicated transaction verbs; every
    other statement is passed through with or without an implicit
    transaction wrapper.

    Example:
        driver = SQLiteDriver(Config(db_path=Path("app.db")))
        await driver.init()
        rows = await driver.query("SELECT * FROM users WHERE id = ?", [1])
        await driver.close()
    """

    def __init__(
        self,
        config: Config | None = None,
        connection_factory: ConnectionFactory | None = None,
    ):
        """Initialize driver.

        Args:
            config: Adapter configuration (database path, journal mode, seed).
            connection_factory: Builds the native connection from the
                database path. Defaults to AioSqliteConnection.
        """
        self.config = config or Config()
        self._connection_factory = connection_factory or AioSqliteConnection
        self._connection: NativeConnectionProtocol | None = None

    @property
    def connection(self) -> NativeConnectionProtocol | None:
        return self._connection

    def _ensure_connection(self, operation: str = "operation") -> NativeConnectionProtocol:
        if self._connection is None or not self._connection.is_open:
            raise ConnectionNotInitializedError(operation)
        return self._connection

    async def init(self) -> None:
        """Copy the seed database if needed, open the connection, set journal mode."""
        if self._connection is not None and self._connection.is_open:
            return

        self._copy_seed()

        try:
            connection = self._connection_factory(self.config.db_path)
            await connection.open()
            self._connection = connection
            if self.config.journal_mode:
                await connection.query(f"PRAGMA journal_mode={self.config.journal_mode}")
        except sqlite3.Error as e:
            logger.error(f"Error initializing database {self.config.db_path}: {e}")
            raise ExecutionError(f"Failed to initialize database: {e}") from e

        logger.debug(f"Driver initialized: {self.config.db_path}")

    def _copy_seed(self) -> None:
        """Copy a prebuilt database into place on first run."""
        seed = self.config.seed_path
        target = self.config.db_path
        if seed is None or str(target) == ":memory:" or target.exists():
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(seed, target)
            logger.info(f"Copied seed database {seed} -> {target}")
        except OSError as e:
            logger.warning(f"Seed copy failed: {e}")

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a read statement and return its rows."""
        conn = self._ensure_connection("query")
        try:
            return await conn.query(sql, params)
        except sqlite3.Error as e:
            logger.error(f"Query failed: {sql} {list(params)}: {e}")
            raise ExecutionError(f"Query failed: {e}") from e

    async def execute(self, sql: str, transaction: bool = False) -> None:
        """Execute statements without bound parameters."""
        conn = self._ensure_connection("execute")
        try:
            await conn.execute(sql, transaction)
        except sqlite3.Error as e:
            logger.error(f"Execute failed: {sql}: {e}")
            raise ExecutionError(f"Execute failed: {e}") from e

    async def run(
        self, sql: str, params: Sequence[Any] = (), transaction: bool = False
    ) -> RunResult:
        """Run a statement, mapping transaction-control text onto connection verbs."""
        conn = self._ensure_connection("run")
        command = detect_sql_command_type(sql)
        try:
            if command is SqlCommandType.BEGIN:
                return await conn.begin_transaction()
            if command is SqlCommandType.COMMIT_OR_ROLLBACK:
                if sql.strip().lower().startswith("rollback"):
                    return await conn.rollback_transaction()
                return await conn.commit_transaction()
            return await conn.run(sql, params, transaction)
        except sqlite3.Error as e:
            logger.error(f"Run failed: {sql} {list(params)}: {e}")
            raise ExecutionError(f"Run failed: {e}") from e

    async def batch(self, statements: Sequence[str]) -> RunResult:
        """Execute several parameterless statements as one set."""
        conn = self._ensure_connection("batch")
        try:
            return await conn.execute_set([(statement, ()) for statement in statements])
        except sqlite3.Error as e:
            logger.error(f"Batch failed: {list(statements)}: {e}")
            raise ExecutionError(f"Batch failed: {e}") from e

    async def call(
        self,
        sql: str,
        params: Sequence[Any],
        method: ResultShape | str,
        transaction: bool = False,
    ) -> ProxyResult:
        """Proxy entry point: run sql and shape the rows per method.

        Raises:
            InvalidOperationError: If method is not a known result shape.
            ExecutionError: If the statement fails.
        """
        self._ensure_connection("call")
        shape = ResultShape.parse(method)
        logger.debug(f"call[{shape.value}] transaction={transaction}: {sql}")

        if shape is ResultShape.RUN:
            await self.run(sql, params, transaction)
            return ProxyResult(rows=[])

        rows = await self.query(sql, params)
        if shape is ResultShape.ALL:
            return ProxyResult(rows=rows)
        if shape is ResultShape.VALUES:
            return ProxyResult(rows=[list(row.values()) for row in rows])
        return ProxyResult(rows=rows[:1])

    async def close(self) -> None:
        """Close the connection if open."""
        if self._connection is None:
            return
        try:
            await self._connection.close()
        except sqlite3.Error as e:
            logger.error(f"Error closing connection: {e}")
            raise ExecutionError(f"Failed to close database: {e}") from e
        finally:
            self._connection = None
