"""CLI command handlers for proxylite."""

from .exec import handle_exec
from .migrate import add_migration_arguments, handle_migrate, handle_status

__all__ = [
    "add_migration_arguments",
    "handle_exec",
    "handle_migrate",
    "handle_status",
]
