"""Migration engine for proxylite.

Migrations are named, ordered lists of SQL statements. Applied names are
recorded in a bookkeeping table so that each migration runs exactly once.
Each migration is applied in its own transaction; the first failure rolls
that migration back and aborts the run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Sequence, Union

from loguru import logger

from ...core.config import DEFAULT_MIGRATIONS_TABLE
from ...core.exceptions import ConfigurationError, ExecutionError, MigrationError
from ...core.types import MigrationRecord

if TYPE_CHECKING:
    from ...app.protocols import StatementExecutorProtocol

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class Migration:
    """A named schema change."""

    name: str
    statements: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Migration({self.name!r}, {len(self.statements)} statement(s))"


MigrationSet = Union[Mapping[str, Union[Sequence[str], str]], Sequence[Migration]]


def normalize_migrations(migrations: MigrationSet | None) -> dict[str, list[str]]:
    """Build an insertion-ordered name -> statements mapping.

    A bare string value is treated as a single statement.

    Raises:
        ConfigurationError: If a sequence of Migration objects repeats a name.
    """
    if migrations is None:
        return {}

    if isinstance(migrations, Mapping):
        items = list(migrations.items())
    else:
        items = [(m.name, m.statements) for m in migrations]

    normalized: dict[str, list[str]] = {}
    for name, statements in items:
        if name in normalized:
            raise ConfigurationError(f"Duplicate migration name: {name}")
        if isinstance(statements, str):
            statements = [statements]
        normalized[name] = list(statements)
    return normalized


class MigrationRunner:
    """Applies named migrations through a statement executor.

    Example:
        runner = MigrationRunner(driver, {
            "v1": ["CREATE TABLE t(id TEXT)"],
            "v2": ["ALTER TABLE t ADD COLUMN name TEXT"],
        })
        applied = await runner.apply_migrations()
    """

    def __init__(
        self,
        driver: "StatementExecutorProtocol",
        migrations: MigrationSet | None = None,
        table: str = DEFAULT_MIGRATIONS_TABLE,
    ):
        """Initialize with executor and migration set.

        Args:
            driver: Statement executor to run migrations through.
            migrations: Ordered migration set. Insertion order is apply order.
            table: Name of the bookkeeping table.

        Raises:
            ConfigurationError: If the table name is not a plain identifier
                or migration names repeat.
        """
        if not _IDENTIFIER.match(table):
            raise ConfigurationError(f"Invalid migrations table name: {table!r}")

        self.driver = driver
        self.table = table
        self._migrations = normalize_migrations(migrations)

    @property
    def migrations(self) -> dict[str, list[str]]:
        return dict(self._migrations)

    async def apply_migrations(self) -> list[str]:
        """Apply every pending migration in declared order.

        Returns:
            Names of the migrations applied by this call.

        Raises:
            ConfigurationError: If no migrations were supplied.
            MigrationError: If a statement fails. Earlier migrations stay
                committed; later ones are not attempted.
        """
        logger.info("Starting migration application...")

        if not self._migrations:
            raise ConfigurationError("No migrations found")

        await self.ensure_migrations_table()
        applied = await self.get_applied_migrations()
        logger.info(f"Applied migrations: {applied}")

        pending = self.get_pending_migrations(applied)
        if not pending:
            logger.info("No pending migrations to apply")
            return []

        for name in pending:
            await self._apply_migration(name)

        logger.info(f"Applied {len(pending)} migration(s)")
        return pending

    async def ensure_migrations_table(self) -> None:
        """Create the bookkeeping table if it does not exist."""
        await self.driver.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id TEXT PRIMARY KEY,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    async def migrations_table_exists(self) -> bool:
        """Check for the bookkeeping table without creating it."""
        rows = await self.driver.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", [self.table]
        )
        return bool(rows)

    async def get_applied_records(self) -> list[MigrationRecord]:
        """Get bookkeeping rows ordered by application time."""
        rows = await self.driver.query(
            f"SELECT id, applied_at FROM {self.table} ORDER BY applied_at"
        )
        return [MigrationRecord(id=row["id"], applied_at=str(row["applied_at"])) for row in rows]

    async def get_applied_migrations(self) -> list[str]:
        """Get names of already applied migrations."""
        return [record.id for record in await self.get_applied_records()]

    def get_pending_migrations(self, applied: Sequence[str]) -> list[str]:
        """Get migration names not yet applied, in declared order."""
        done = set(applied)
        return [name for name in self._migrations if name not in done]

    async def is_up_to_date(self) -> bool:
        """Check whether every migration has been applied."""
        await self.ensure_migrations_table()
        return not self.get_pending_migrations(await self.get_applied_migrations())

    async def _apply_migration(self, name: str) -> None:
        logger.info(f"Applying migration {name}...")

        await self.driver.run("BEGIN", [])
        try:
            for statement in self._migrations[name]:
                await self.driver.execute(statement)
            await self.driver.run(f"INSERT INTO {self.table} (id) VALUES (?)", [name])
            await self.driver.run("COMMIT", [])
        except Exception as e:
            logger.error(f"Migration {name} failed: {e}")
            try:
                await self.driver.run("ROLLBACK", [])
            except ExecutionError as rollback_error:
                logger.error(f"Rollback of migration {name} failed: {rollback_error}")
            raise MigrationError(name, e) from e

        logger.debug(f"Migration {name} applied successfully")
