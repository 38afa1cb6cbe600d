"""Loading migration sets from files and packages."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path
from types import ModuleType

import yaml
from loguru import logger

from ...core.exceptions import ConfigurationError
from .runner import Migration


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects repeated mapping keys."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ConfigurationError(
                    f"Duplicate migration name: {key}{key_node.start_mark}"
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def load_migrations_file(path: Path) -> list[Migration]:
    """Load a migration set from a YAML file.

    The file is a mapping of migration name to a statement list (or a
    single statement string). Document order is apply order.

    Example file:
        v1:
          - CREATE TABLE t(id TEXT)
          - CREATE INDEX idx_t_id ON t(id)
        v2: ALTER TABLE t ADD COLUMN name TEXT

    Raises:
        ConfigurationError: If the file is unreadable or malformed.
    """
    try:
        data = yaml.load(Path(path).read_text(encoding="utf-8"), Loader=_UniqueKeyLoader)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load migrations from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Migrations file {path} must contain a mapping")

    migrations = []
    for name, statements in data.items():
        if isinstance(statements, str):
            statements = [statements]
        if not isinstance(statements, list) or not all(isinstance(s, str) for s in statements):
            raise ConfigurationError(f"Migration {name!r} must be a list of SQL statements")
        migrations.append(Migration(name=str(name), statements=statements))

    logger.debug(f"Loaded {len(migrations)} migration(s) from {path}")
    return migrations


def discover_migrations(package: ModuleType | str) -> list[Migration]:
    """Collect migrations from the modules of a package.

    Each module must define:
        NAME: str - migration name
        STATEMENTS: list[str] - SQL statements in order

    Modules are ordered by module name, so prefix them (``m0001_...``).
    """
    if isinstance(package, str):
        package = importlib.import_module(package)

    migrations = []
    for _, modname, ispkg in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if ispkg:
            continue

        module = importlib.import_module(f"{package.__name__}.{modname}")

        if not hasattr(module, "NAME") or not hasattr(module, "STATEMENTS"):
            logger.warning(f"Skipping invalid migration module: {modname}")
            continue

        migrations.append(Migration(name=module.NAME, statements=list(module.STATEMENTS)))

    return migrations
