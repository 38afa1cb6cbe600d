"""Protocol definitions for the proxylite adapter.

The adapter never holds a driver handle directly. Storage is reached
through two narrow async capabilities:

- NativeConnectionProtocol: the raw connection, which exposes transaction
  control as dedicated verbs rather than accepting BEGIN/COMMIT text.
- StatementExecutorProtocol: the executor that the migration engine and
  the transaction classifier talk to.

Example:
    class MyConnection:
        async def open(self) -> None: ...
        async def query(self, sql, params=()): ...
        ...

    driver = SQLiteDriver(config, connection_factory=lambda path: MyConnection())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from ..core.types import ProxyResult, ResultShape, RunResult


Listener = Callable[[bool], None]
"""Callback notified with the adapter's availability."""


@runtime_checkable
class NativeConnectionProtocol(Protocol):
    """Raw async connection to the storage engine."""

    @property
    def is_open(self) -> bool:
        """Whether open() has completed and close() has not been called."""
        ...

    @property
    def in_transaction(self) -> bool:
        """Whether a transaction is currently open on the connection."""
        ...

    async def open(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        ...

    async def run(
        self, sql: str, params: Sequence[Any] = (), transaction: bool = False
    ) -> "RunResult":
        ...

    async def execute(self, sql: str, transaction: bool = False) -> "RunResult":
        ...

    async def execute_set(self, statements: Sequence[tuple[str, Sequence[Any]]]) -> "RunResult":
        ...

    async def begin_transaction(self) -> "RunResult":
        ...

    async def commit_transaction(self) -> "RunResult":
        ...

    async def rollback_transaction(self) -> "RunResult":
        ...


@runtime_checkable
class StatementExecutorProtocol(Protocol):
    """Statement executor consumed by the migration engine and classifier."""

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Read path; no transaction semantics."""
        ...

    async def run(
        self, sql: str, params: Sequence[Any] = (), transaction: bool = False
    ) -> Any:
        """Run a statement, translating transaction-control text into verbs."""
        ...

    async def execute(self, sql: str, transaction: bool = False) -> None:
        """Execute statements without bound parameters (e.g. DDL)."""
        ...

    async def call(
        self,
        sql: str,
        params: Sequence[Any],
        method: "ResultShape | str",
        transaction: bool = False,
    ) -> "ProxyResult":
        """Proxy entry point returning rows shaped per method."""
        ...
