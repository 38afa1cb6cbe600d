"""Transaction-state classification for proxied SQL commands.

The native connection does not accept BEGIN/COMMIT/ROLLBACK as ordinary
statement text. A query builder that emits those commands still gets the
right behaviour because every command routed through the proxy callback
is classified here, and the resulting "wrap in transaction" flag is
passed along to the driver.

State machine (flag = next ordinary statement needs an implicit wrap):

    COMMIT_OR_ROLLBACK  -> flag set to True before dispatch
    BEGIN               -> dispatched with current flag, then flag = False
    OTHER               -> dispatched with current flag, unchanged

Note:
    BEGIN detection is a prefix match, so any command whose text starts
    with "begin" is treated as opening a transaction.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence

from loguru import logger

if TYPE_CHECKING:
    from ..app.protocols import StatementExecutorProtocol
    from ..core.types import ProxyResult, ResultShape


class SqlCommandType(Enum):
    """Transaction role of a SQL command."""

    BEGIN = "begin"
    COMMIT_OR_ROLLBACK = "commit_or_rollback"
    OTHER = "other"


def detect_sql_command_type(sql: str) -> SqlCommandType:
    """Classify a SQL command by its leading keyword.

    Args:
        sql: SQL command text.

    Returns:
        The command type. Case and surrounding whitespace are ignored.
    """
    normalized = sql.strip().lower()

    if normalized.startswith("begin"):
        return SqlCommandType.BEGIN

    if normalized.startswith("commit") or normalized.startswith("rollback"):
        return SqlCommandType.COMMIT_OR_ROLLBACK

    return SqlCommandType.OTHER


class TransactionState:
    """Implicit-transaction flag for one logical connection."""

    def __init__(self, initial: bool = True):
        self._initial = initial
        self._pending = initial

    @property
    def pending(self) -> bool:
        """Whether the next ordinary statement should be wrapped."""
        return self._pending

    def before_dispatch(self, command: SqlCommandType) -> bool:
        """Update state ahead of dispatch and return the flag to send."""
        if command is SqlCommandType.COMMIT_OR_ROLLBACK:
            self._pending = True
        return self._pending

    def after_dispatch(self, command: SqlCommandType) -> None:
        if command is SqlCommandType.BEGIN:
            self._pending = False

    def reset(self) -> None:
        """Restore the initial flag value."""
        self._pending = self._initial

    def __repr__(self) -> str:
        return f"TransactionState(pending={self._pending})"


RemoteCallback = Callable[[str, Sequence[Any], "ResultShape | str"], Awaitable["ProxyResult"]]


def create_remote_callback(
    driver: "StatementExecutorProtocol",
    initial_transaction_state: bool = True,
) -> RemoteCallback:
    """Create the async proxy entry point for a query builder.

    Args:
        driver: Statement executor receiving the classified commands.
        initial_transaction_state: Whether the first ordinary statement is
            wrapped in an implicit transaction.

    Returns:
        Async callable ``(sql, params, method) -> ProxyResult``. Its
        transaction state is available as the ``state`` attribute.
    """
    state = TransactionState(initial_transaction_state)

    async def remote_callback(
        sql: str, params: Sequence[Any], method: "ResultShape | str"
    ) -> "ProxyResult":
        command = detect_sql_command_type(sql)
        transaction = state.before_dispatch(command)
        logger.debug(f"{command.value}: transaction={transaction}")

        try:
            return await driver.call(sql, params, method, transaction)
        finally:
            state.after_dispatch(command)

    remote_callback.state = state  # type: ignore[attr-defined]
    return remote_callback
