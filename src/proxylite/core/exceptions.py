"""Custom exceptions for proxylite."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a proxylite failure."""

    CONFIGURATION = "configuration"
    MIGRATION = "migration"
    EXECUTION = "execution"
    INVALID_OPERATION = "invalid_operation"


class ProxyLiteError(Exception):
    """Base exception for all proxylite errors."""

    kind: ErrorKind = ErrorKind.EXECUTION


class ConfigurationError(ProxyLiteError):
    """Adapter was constructed or invoked with unusable configuration."""

    kind = ErrorKind.CONFIGURATION


class MigrationError(ProxyLiteError):
    """A statement inside a migration failed."""

    kind = ErrorKind.MIGRATION

    def __init__(self, migration_name: str, cause: BaseException):
        """Initialize exception with the failing migration and its cause.

        Args:
            migration_name: Name of the migration that was being applied.
            cause: Error raised by the statement executor.
        """
        self.migration_name = migration_name
        self.cause = cause
        super().__init__(f"Migration {migration_name!r} failed: {cause}")


class ExecutionError(ProxyLiteError):
    """A statement failed against storage."""

    kind = ErrorKind.EXECUTION


class ConnectionNotInitializedError(ExecutionError):
    """Database connection has not been opened."""

    def __init__(self, operation: str = "operation"):
        self.operation = operation
        super().__init__(f"Database connection not initialized for {operation}")


class InvalidOperationError(ProxyLiteError):
    """Unrecognized result shape was requested."""

    kind = ErrorKind.INVALID_OPERATION
