"""Migration commands for proxylite CLI."""

import asyncio
from dataclasses import replace
from pathlib import Path

from ...core.config import Config
from ...store.driver import SQLiteDriver
from ...store.migrations import MigrationRunner, load_migrations_file


def add_migration_arguments(parser) -> None:
    """Add arguments shared by migrate and status."""
    parser.add_argument("database", help="Database file path")
    parser.add_argument(
        "-m",
        "--migrations",
        type=Path,
        required=True,
        help="YAML file mapping migration names to SQL statements",
    )


def handle_migrate(args, config: Config) -> None:
    """Handle migrate command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    applied = asyncio.run(_handle_migrate_async(args, config))
    if applied:
        print(f"Applied {len(applied)} migration(s):")
        for name in applied:
            print(f"  + {name}")
    else:
        print("Database is up to date.")


async def _handle_migrate_async(args, config: Config) -> list[str]:
    runner, driver = await _open_runner(args, config)
    try:
        return await runner.apply_migrations()
    finally:
        await driver.close()


def handle_status(args, config: Config) -> None:
    """Handle status command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    records, pending = asyncio.run(_handle_status_async(args, config))

    print("Migration Status")
    print("=" * 50)
    print(f"Applied: {len(records)}")
    for record in records:
        print(f"  [x] {record.id} ({record.applied_at})")
    print(f"Pending: {len(pending)}")
    for name in pending:
        print(f"  [ ] {name}")


async def _handle_status_async(args, config: Config):
    runner, driver = await _open_runner(args, config)
    try:
        records = []
        if await runner.migrations_table_exists():
            records = await runner.get_applied_records()
        pending = runner.get_pending_migrations([r.id for r in records])
        return records, pending
    finally:
        await driver.close()


async def _open_runner(args, config: Config) -> tuple[MigrationRunner, SQLiteDriver]:
    migrations = load_migrations_file(args.migrations)
    driver = SQLiteDriver(replace(config, db_path=Path(args.database)))
    runner = MigrationRunner(driver, migrations, table=config.migrations_table)
    await driver.init()
    return runner, driver
