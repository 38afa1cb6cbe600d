"""Proxy-backed database adapter.

ProxyDatabase ties the statement executor, the transaction-state
classifier, the migration engine and the availability signal to one
logical connection.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

from .availability import AvailabilitySignal

if TYPE_CHECKING:
    from ..core.config import Config
    from ..core.types import ProxyResult, ResultShape
    from ..store.driver import SQLiteDriver
    from ..store.migrations import MigrationRunner
    from ..store.transaction import RemoteCallback, TransactionState
    from .protocols import Listener


class ProxyDatabase:
    """Adapter exposing a single async entry point for a query builder.

    Use create_proxy_database() to create a properly wired instance.

    Example:
        async with create_proxy_database("app.db", migrations) as db:
            result = await db.execute("SELECT * FROM t", [], "all")
    """

    def __init__(
        self,
        driver: "SQLiteDriver",
        runner: "MigrationRunner",
        remote_callback: "RemoteCallback",
        config: "Config",
    ):
        """Initialize adapter with wired components.

        This constructor is for internal use. Use create_proxy_database() instead.
        """
        self.driver = driver
        self.migrations = runner
        self.config = config
        self._remote_callback = remote_callback
        self._availability = AvailabilitySignal()
        self._startup_task: asyncio.Task[None] | None = None

    @property
    def remote_callback(self) -> "RemoteCallback":
        """Async ``(sql, params, method)`` callable for a proxy query builder."""
        return self._remote_callback

    @property
    def transaction_state(self) -> "TransactionState":
        return self._remote_callback.state  # type: ignore[attr-defined]

    @property
    def is_available(self) -> bool:
        return self._availability.is_available

    def on_available(self, listener: "Listener") -> int:
        """Register for readiness; the current state is delivered immediately."""
        return self._availability.on_available(listener)

    async def execute(
        self, sql: str, params: Sequence[Any] = (), method: "ResultShape | str" = "all"
    ) -> "ProxyResult":
        """Run a statement through the transaction-state classifier."""
        return await self._remote_callback(sql, params, method)

    async def initialize(self) -> None:
        """Open the connection, apply migrations, then signal availability.

        Migrations are applied only when a non-empty set was supplied.

        Raises:
            ExecutionError: If the connection cannot be opened.
            MigrationError: If a migration fails; availability is not signalled.
        """
        await self.driver.init()

        if self.migrations.migrations:
            await self.migrations.apply_migrations()
        else:
            logger.debug("No migrations supplied, skipping migration step")

        self._availability.mark_available()
        logger.info(f"Database ready: {self.config.db_path}")

    def start(self) -> asyncio.Task[None]:
        """Run initialize() in the background and return its task."""
        if self._startup_task is None:
            self._startup_task = asyncio.create_task(
                self.initialize(), name="proxylite-initialize"
            )
        return self._startup_task

    async def wait_until_available(self) -> None:
        """Wait for background startup, re-raising its failure."""
        await self.start()

    async def close(self) -> None:
        """Close the underlying connection.

        A background startup still in progress is allowed to finish first;
        its outcome stays on the task for wait_until_available().
        """
        if self._startup_task is not None and not self._startup_task.done():
            await asyncio.wait([self._startup_task])
        await self.driver.close()
        self.transaction_state.reset()
        logger.debug("ProxyDatabase closed")

    async def __aenter__(self) -> "ProxyDatabase":
        await self.wait_until_available()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
