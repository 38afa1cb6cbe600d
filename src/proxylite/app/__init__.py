"""Adapter assembly for proxylite.

This module provides:
- Protocol definitions for the native connection and executor
- The AvailabilitySignal readiness observer
- The ProxyDatabase adapter and its create_proxy_database() factory
"""

from .availability import AvailabilitySignal
from .database import ProxyDatabase
from .factory import create_proxy_database
from .protocols import Listener, NativeConnectionProtocol, StatementExecutorProtocol

__all__ = [
    "AvailabilitySignal",
    "Listener",
    "NativeConnectionProtocol",
    "ProxyDatabase",
    "StatementExecutorProtocol",
    "create_proxy_database",
]
