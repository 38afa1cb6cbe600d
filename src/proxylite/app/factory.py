"""Composition root for proxylite.

Example:
    from proxylite.app import create_proxy_database

    db = create_proxy_database("app.db", {"v1": ["CREATE TABLE t(id TEXT)"]})
    db.on_available(lambda ready: print("ready:", ready))
    db.start()
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.config import Config
from ..store.driver import SQLiteDriver
from ..store.migrations import MigrationRunner
from ..store.transaction import create_remote_callback
from .database import ProxyDatabase

if TYPE_CHECKING:
    from ..store.driver import ConnectionFactory
    from ..store.migrations import MigrationSet


def create_proxy_database(
    db_name: str | Path | None = None,
    migrations: "MigrationSet | None" = None,
    config: Config | None = None,
    *,
    connection_factory: "ConnectionFactory | None" = None,
) -> ProxyDatabase:
    """Create and wire a ProxyDatabase.

    Nothing is opened here; call start() or initialize(), or use the
    instance as an async context manager.

    Args:
        db_name: Database file path. Overrides config.db_path when given.
        migrations: Ordered migration set applied during initialization.
        config: Adapter configuration. Defaults to Config.from_env().
        connection_factory: Builds the native connection (for tests or
            alternative backends).

    Returns:
        Wired, not yet initialized ProxyDatabase.
    """
    config = config or Config.from_env()
    if db_name is not None:
        config = replace(config, db_path=Path(db_name))

    driver = SQLiteDriver(config, connection_factory=connection_factory)
    runner = MigrationRunner(driver, migrations, table=config.migrations_table)
    callback = create_remote_callback(driver, config.initial_transaction_state)

    return ProxyDatabase(driver, runner, callback, config)
