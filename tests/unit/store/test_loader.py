"""Tests for loading migration sets from YAML files and packages."""

import sys
from pathlib import Path

import pytest

from proxylite.core.exceptions import ConfigurationError
from proxylite.store.migrations import discover_migrations, load_migrations_file


class TestLoadMigrationsFile:
    """Tests for load_migrations_file."""

    def test_loads_in_document_order(self, tmp_path: Path):
        path = tmp_path / "migrations.yaml"
        path.write_text(
            "\n".join(
                [
                    "v2_second:",
                    "  - CREATE TABLE b(id TEXT)",
                    "v1_first:",
                    "  - CREATE TABLE a(id TEXT)",
                    "  - CREATE INDEX idx_a ON a(id)",
                ]
            ),
            encoding="utf-8",
        )

        migrations = load_migrations_file(path)

        assert [m.name for m in migrations] == ["v2_second", "v1_first"]
        assert migrations[1].statements == ["CREATE TABLE a(id TEXT)", "CREATE INDEX idx_a ON a(id)"]

    def test_string_value_becomes_single_statement(self, tmp_path: Path):
        path = tmp_path / "migrations.yaml"
        path.write_text("v1: CREATE TABLE t(id TEXT)\n", encoding="utf-8")

        migrations = load_migrations_file(path)

        assert migrations[0].statements == ["CREATE TABLE t(id TEXT)"]

    def test_non_mapping_rejected(self, tmp_path: Path):
        path = tmp_path / "migrations.yaml"
        path.write_text("- CREATE TABLE t(id TEXT)\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_migrations_file(path)

    def test_non_string_statements_rejected(self, tmp_path: Path):
        path = tmp_path / "migrations.yaml"
        path.write_text("v1:\n  - 42\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="v1"):
            load_migrations_file(path)

    def test_duplicate_names_rejected(self, tmp_path: Path):
        path = tmp_path / "migrations.yaml"
        path.write_text(
            "v1:\n  - CREATE TABLE a(id TEXT)\n"
            "v2:\n  - CREATE TABLE b(id TEXT)\n"
            "v1:\n  - CREATE TABLE c(id TEXT)\n",
            encoding="utf-8",
        )

        with pytest.raises(ConfigurationError, match="Duplicate migration name: v1"):
            load_migrations_file(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            load_migrations_file(tmp_path / "missing.yaml")


class TestDiscoverMigrations:
    """Tests for discover_migrations."""

    @pytest.fixture
    def migrations_package(self, tmp_path: Path, monkeypatch) -> str:
        package = tmp_path / "app_migrations"
        package.mkdir()
        (package / "__init__.py").write_text("", encoding="utf-8")
        (package / "m0002_add_name.py").write_text(
            'NAME = "0002_add_name"\nSTATEMENTS = ["ALTER TABLE t ADD COLUMN name TEXT"]\n',
            encoding="utf-8",
        )
        (package / "m0001_create.py").write_text(
            'NAME = "0001_create"\nSTATEMENTS = ["CREATE TABLE t(id TEXT)"]\n',
            encoding="utf-8",
        )
        (package / "helpers.py").write_text("VALUE = 1\n", encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path))
        yield "app_migrations"
        for name in list(sys.modules):
            if name.startswith("app_migrations"):
                del sys.modules[name]

    def test_discovers_modules_sorted_by_name(self, migrations_package: str):
        migrations = discover_migrations(migrations_package)

        assert [m.name for m in migrations] == ["0001_create", "0002_add_name"]
        assert migrations[0].statements == ["CREATE TABLE t(id TEXT)"]

    def test_skips_modules_without_name_and_statements(self, migrations_package: str):
        migrations = discover_migrations(migrations_package)

        assert all(m.name != "helpers" for m in migrations)
        assert len(migrations) == 2
