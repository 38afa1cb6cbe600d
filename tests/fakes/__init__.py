"""Test fakes for proxylite."""

from .connection import FakeNativeConnection
from .executor import RecordingExecutor

__all__ = ["FakeNativeConnection", "RecordingExecutor"]
