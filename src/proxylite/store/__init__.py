"""Storage layer for proxylite.

This package provides:
- AioSqliteConnection: native async SQLite connection
- SQLiteDriver: statement executor used by the proxy and migrations
- Transaction-state classification for proxied commands
- MigrationRunner: ordered, exactly-once schema migrations
"""

from .connection import AioSqliteConnection, split_statements
from .driver import SQLiteDriver
from .migrations import Migration, MigrationRunner
from .transaction import (
    SqlCommandType,
    TransactionState,
    create_remote_callback,
    detect_sql_command_type,
)

__all__ = [
    "AioSqliteConnection",
    "Migration",
    "MigrationRunner",
    "SQLiteDriver",
    "SqlCommandType",
    "TransactionState",
    "create_remote_callback",
    "detect_sql_command_type",
    "split_statements",
]
