"""CLI entry point for proxylite."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="proxylite",
        description="Proxy-backed SQLite adapter with ordered migrations",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("-c", "--config", type=Path, help="Path to TOML config file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending migrations")
    commands.add_migration_arguments(migrate_parser)

    # status
    status_parser = subparsers.add_parser("status", help="Show applied and pending migrations")
    commands.add_migration_arguments(status_parser)

    # exec
    exec_parser = subparsers.add_parser("exec", help="Run a SQL statement")
    exec_parser.add_argument("database", help="Database file path")
    exec_parser.add_argument("sql", help="SQL statement")
    exec_parser.add_argument(
        "--method",
        choices=["all", "get", "values", "run"],
        default="all",
        help="Result shape (default: all)",
    )
    exec_parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        dest="params",
        help="Bound parameter (repeatable)",
    )

    return parser


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main() -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    try:
        config = Config.from_env_or_file(args.config)
        configure_logging("DEBUG" if args.verbose else config.log_level)

        if args.command == "migrate":
            commands.handle_migrate(args, config)
        elif args.command == "status":
            commands.handle_status(args, config)
        elif args.command == "exec":
            commands.handle_exec(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
