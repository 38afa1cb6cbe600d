"""Configuration management for proxylite."""

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_MIGRATIONS_TABLE = "_migrations"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")


def _parse_journal_mode(value: str) -> str:
    mode = value.strip().upper()
    if mode not in JOURNAL_MODES:
        raise ConfigurationError(f"Invalid journal mode: {value!r}")
    return mode


def _coerce_file_value(key: str, value):
    """Check a TOML value against the type of its Config field."""
    if key == "initial_transaction_state":
        if not isinstance(value, bool):
            raise ConfigurationError(f"{key} must be a boolean, got {value!r}")
        return value
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string, got {value!r}")
    if key in ("db_path", "seed_path"):
        return Path(value)
    if key == "journal_mode":
        return _parse_journal_mode(value)
    if key == "log_level":
        return value.upper()
    return value


@dataclass
class Config:
    """Main adapter configuration."""

    db_path: Path = Path("proxylite.db")
    migrations_table: str = DEFAULT_MIGRATIONS_TABLE
    journal_mode: str = "WAL"
    # Whether the first ordinary statement is wrapped in an implicit transaction
    initial_transaction_state: bool = True
    # Prebuilt database copied into place on first init
    seed_path: Optional[Path] = None
    log_level: str = "INFO"

    def apply_env(self) -> "Config":
        """Override fields from environment variables, in place."""
        if path := os.environ.get("PROXYLITE_DB_PATH"):
            self.db_path = Path(path)

        if table := os.environ.get("PROXYLITE_MIGRATIONS_TABLE"):
            self.migrations_table = table

        if mode := os.environ.get("PROXYLITE_JOURNAL_MODE"):
            self.journal_mode = _parse_journal_mode(mode)

        if state := os.environ.get("PROXYLITE_INITIAL_TRANSACTION_STATE"):
            self.initial_transaction_state = _parse_bool(state)

        if seed := os.environ.get("PROXYLITE_SEED_PATH"):
            self.seed_path = Path(seed)

        if level := os.environ.get("PROXYLITE_LOG_LEVEL"):
            self.log_level = level.upper()

        return self

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls().apply_env()

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from a TOML file, then apply env overrides.

        Args:
            path: Path to the TOML file.

        Raises:
            ConfigurationError: If the file cannot be parsed, names
                unknown settings, or holds values of the wrong type.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to load config {path}: {e}") from e

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown config keys in {path}: {', '.join(sorted(unknown))}"
            )

        config = cls()
        for key, value in data.items():
            setattr(config, key, _coerce_file_value(key, value))

        return config.apply_env()

    @classmethod
    def from_env_or_file(cls, path: Optional[Path] = None) -> "Config":
        """Load from an explicit path, PROXYLITE_CONFIG, or the environment."""
        if path is None and (env_path := os.environ.get("PROXYLITE_CONFIG")):
            path = Path(env_path)
        if path is not None:
            return cls.from_file(path)
        return cls.from_env()
