"""Core types, configuration and exceptions for proxylite."""

from .config import Config
from .exceptions import (
    ConfigurationError,
    ConnectionNotInitializedError,
    ErrorKind,
    ExecutionError,
    InvalidOperationError,
    MigrationError,
    ProxyLiteError,
)
from .types import MigrationRecord, ProxyResult, ResultShape, RunResult

__all__ = [
    "Config",
    "ConfigurationError",
    "ConnectionNotInitializedError",
    "ErrorKind",
    "ExecutionError",
    "InvalidOperationError",
    "MigrationError",
    "MigrationRecord",
    "ProxyLiteError",
    "ProxyResult",
    "ResultShape",
    "RunResult",
]
