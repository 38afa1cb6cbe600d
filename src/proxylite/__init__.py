"""proxylite - SQLite behind an async proxy, with ordered migrations.

Example:
    from proxylite import create_proxy_database

    migrations = {
        "v1": ["CREATE TABLE t(id TEXT)"],
        "v2": ["ALTER TABLE t ADD COLUMN name TEXT"],
    }
    async with create_proxy_database("app.db", migrations) as db:
        await db.execute("INSERT INTO t (id, name) VALUES (?, ?)", ["1", "a"], "run")
        rows = (await db.execute("SELECT * FROM t", [], "all")).rows
"""

from .app import AvailabilitySignal, ProxyDatabase, create_proxy_database
from .core import (
    Config,
    ConfigurationError,
    ErrorKind,
    ExecutionError,
    InvalidOperationError,
    MigrationError,
    ProxyLiteError,
    ProxyResult,
    ResultShape,
)
from .store import Migration, MigrationRunner, SQLiteDriver, create_remote_callback

__version__ = "0.1.0"

__all__ = [
    "AvailabilitySignal",
    "Config",
    "ConfigurationError",
    "ErrorKind",
    "ExecutionError",
    "InvalidOperationError",
    "Migration",
    "MigrationError",
    "MigrationRunner",
    "ProxyDatabase",
    "ProxyLiteError",
    "ProxyResult",
    "ResultShape",
    "SQLiteDriver",
    "create_proxy_database",
    "create_remote_callback",
]
