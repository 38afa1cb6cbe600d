"""Exec command for proxylite CLI."""

import asyncio
import json

from ...app.factory import create_proxy_database
from ...core.config import Config


def handle_exec(args, config: Config) -> None:
    """Handle exec command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    rows = asyncio.run(_handle_exec_async(args, config))
    for row in rows:
        print(json.dumps(row, default=str))


async def _handle_exec_async(args, config: Config) -> list:
    async with create_proxy_database(args.database, config=config) as db:
        result = await db.execute(args.sql, args.params, args.method)
        return result.rows
