"""Tests for transaction-state classification."""

import pytest

from proxylite.store.transaction import (
    SqlCommandType,
    TransactionState,
    create_remote_callback,
    detect_sql_command_type,
)
from tests.fakes import RecordingExecutor


class TestDetectSqlCommandType:
    """Tests for detect_sql_command_type."""

    @pytest.mark.parametrize(
        "sql",
        ["BEGIN TRANSACTION", "begin", "  Begin Immediate  ", "\nBEGIN;"],
    )
    def test_begin(self, sql: str):
        assert detect_sql_command_type(sql) is SqlCommandType.BEGIN

    @pytest.mark.parametrize(
        "sql",
        ["  commit;", "COMMIT", "rollback", "ROLLBACK TRANSACTION"],
    )
    def test_commit_or_rollback(self, sql: str):
        assert detect_sql_command_type(sql) is SqlCommandType.COMMIT_OR_ROLLBACK

    @pytest.mark.parametrize(
        "sql",
        [
            "insert into t values (1)",
            "SELECT * FROM t",
            "CREATE TABLE begins(id TEXT)",
            "UPDATE t SET state = 'commit'",
            "",
        ],
    )
    def test_other(self, sql: str):
        assert detect_sql_command_type(sql) is SqlCommandType.OTHER

    def test_prefix_match_treats_begin_identifiers_as_begin(self):
        """Any text starting with "begin" counts as opening a transaction."""
        assert detect_sql_command_type("begin_import") is SqlCommandType.BEGIN


class TestTransactionState:
    """Tests for the TransactionState machine."""

    def test_default_initial_state_is_pending(self):
        assert TransactionState().pending is True

    def test_other_leaves_state_unchanged(self):
        state = TransactionState(True)

        assert state.before_dispatch(SqlCommandType.OTHER) is True
        state.after_dispatch(SqlCommandType.OTHER)

        assert state.pending is True

    def test_begin_dispatches_current_state_then_clears(self):
        state = TransactionState(True)

        assert state.before_dispatch(SqlCommandType.BEGIN) is True
        state.after_dispatch(SqlCommandType.BEGIN)

        assert state.pending is False

    @pytest.mark.parametrize("initial", [True, False])
    def test_commit_or_rollback_sets_pending_before_dispatch(self, initial: bool):
        state = TransactionState(initial)

        assert state.before_dispatch(SqlCommandType.COMMIT_OR_ROLLBACK) is True
        state.after_dispatch(SqlCommandType.COMMIT_OR_ROLLBACK)

        assert state.pending is True

    def test_reset_restores_initial(self):
        state = TransactionState(False)
        state.before_dispatch(SqlCommandType.COMMIT_OR_ROLLBACK)

        state.reset()

        assert state.pending is False


class TestRemoteCallback:
    """Tests for create_remote_callback."""

    @pytest.mark.asyncio
    async def test_flags_follow_explicit_transaction(self):
        """Statements inside BEGIN..COMMIT are not individually wrapped."""
        executor = RecordingExecutor()
        callback = create_remote_callback(executor)

        await callback("insert into t values (1)", [], "run")
        await callback("BEGIN", [], "run")
        await callback("insert into t values (2)", [], "run")
        await callback("select * from t", [], "all")
        await callback("COMMIT", [], "run")
        await callback("insert into t values (3)", [], "run")

        flags = [(call[1], call[4]) for call in executor.calls]
        assert flags == [
            ("insert into t values (1)", True),
            ("BEGIN", True),
            ("insert into t values (2)", False),
            ("select * from t", False),
            ("COMMIT", True),
            ("insert into t values (3)", True),
        ]

    @pytest.mark.asyncio
    async def test_initial_state_false(self):
        executor = RecordingExecutor()
        callback = create_remote_callback(executor, initial_transaction_state=False)

        await callback("insert into t values (1)", [1], "run")

        assert executor.calls[0] == ("call", "insert into t values (1)", [1], "run", False)

    @pytest.mark.asyncio
    async def test_rollback_rearms_wrapping(self):
        executor = RecordingExecutor()
        callback = create_remote_callback(executor)

        await callback("begin", [], "run")
        assert callback.state.pending is False

        await callback("rollback", [], "run")
        assert callback.state.pending is True

    @pytest.mark.asyncio
    async def test_callbacks_do_not_share_state(self):
        first = create_remote_callback(RecordingExecutor())
        second = create_remote_callback(RecordingExecutor())

        await first("BEGIN", [], "run")

        assert first.state.pending is False
        assert second.state.pending is True

    @pytest.mark.asyncio
    async def test_begin_clears_state_even_when_dispatch_fails(self):
        class FailingExecutor(RecordingExecutor):
            async def call(self, sql, params, method, transaction=False):
                raise RuntimeError("boom")

        callback = create_remote_callback(FailingExecutor())

        with pytest.raises(RuntimeError):
            await callback("BEGIN", [], "run")

        assert callback.state.pending is False
