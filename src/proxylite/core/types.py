"""Type definitions for proxylite."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .exceptions import InvalidOperationError


class ResultShape(Enum):
    """Shape of the rows returned to the query-builder proxy."""

    RUN = "run"  # no rows
    ALL = "all"  # row list
    VALUES = "values"  # row list as value tuples
    GET = "get"  # first row only

    @classmethod
    def parse(cls, method: "ResultShape | str") -> "ResultShape":
        """Coerce a method name into a ResultShape.

        Raises:
            InvalidOperationError: If the name is not a known shape.
        """
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).lower())
        except ValueError as e:
            raise InvalidOperationError(f"Invalid method: {method}") from e


@dataclass
class ProxyResult:
    """Rows handed back through the proxy entry point."""

    rows: list[Any] = field(default_factory=list)


@dataclass
class RunResult:
    """Execution receipt for statements that do not return rows."""

    changes: int = 0
    last_id: Optional[int] = None


@dataclass(frozen=True)
class MigrationRecord:
    """A row of the migration bookkeeping table."""

    id: str
    applied_at: str
