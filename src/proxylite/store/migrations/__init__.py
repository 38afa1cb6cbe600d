"""Database migrations for proxylite.

Migrations are named lists of SQL statements applied once each, in
declared order, and recorded in a bookkeeping table.

Example:
    from proxylite.store.migrations import MigrationRunner

    runner = MigrationRunner(driver, {"v1": ["CREATE TABLE t(id TEXT)"]})
    applied = await runner.apply_migrations()
"""

from .loader import discover_migrations, load_migrations_file
from .runner import Migration, MigrationRunner, MigrationSet, normalize_migrations

__all__ = [
    "Migration",
    "MigrationRunner",
    "MigrationSet",
    "discover_migrations",
    "load_migrations_file",
    "normalize_migrations",
]
