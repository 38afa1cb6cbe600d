"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from proxylite.core.config import Config


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def config(test_db_path: Path) -> Config:
    """Provide a config pointing at the temporary database."""
    return Config(db_path=test_db_path)


@pytest.fixture
def sample_migrations() -> dict[str, list[str]]:
    """Two dependent migrations: create a table, then extend it."""
    return {
        "v1": ["CREATE TABLE t(id TEXT)"],
        "v2": ["ALTER TABLE t ADD COLUMN name TEXT"],
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PROXYLITE_* variables from the host out of tests."""
    for var in (
        "PROXYLITE_CONFIG",
        "PROXYLITE_DB_PATH",
        "PROXYLITE_MIGRATIONS_TABLE",
        "PROXYLITE_JOURNAL_MODE",
        "PROXYLITE_INITIAL_TRANSACTION_STATE",
        "PROXYLITE_SEED_PATH",
        "PROXYLITE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
