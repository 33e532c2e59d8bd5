"""Unit tests for the MigrationRunner and the initial schema migration."""

from __future__ import annotations

import sqlite3

import pytest

from taskvault.adapters.sqlite.migrations import ALL_MIGRATIONS
from taskvault.adapters.sqlite.migrations.runner import Migration, MigrationRunner


# ---------------------------------------------------------------------------
# Concrete test migrations
# ---------------------------------------------------------------------------


class _CreateTable(Migration):
    def __init__(self, version: int, table: str):
        self._version = version
        self._table = table

    @property
    def version(self) -> int:
        return self._version

    @property
    def description(self) -> str:
        return f"Create {self._table}"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(f"CREATE TABLE {self._table} (id INTEGER PRIMARY KEY)")


class _FailingMigration(Migration):
    @property
    def version(self) -> int:
        return 3

    @property
    def description(self) -> str:
        return "Intentionally fails"

    def up(self, connection: sqlite3.Connection) -> None:
        raise sqlite3.OperationalError("boom")


@pytest.fixture
def bare_connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


def _tables(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


# ---------------------------------------------------------------------------
# MigrationRunner
# ---------------------------------------------------------------------------


class TestMigrationRunner:
    def test_fresh_database_is_version_zero(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        assert runner.get_current_version() == 0
        assert "schema_version" in _tables(bare_connection)

    def test_runs_pending_in_version_order(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        applied = runner.run_migrations([_CreateTable(2, "two"), _CreateTable(1, "one")])
        assert applied == 2
        assert runner.get_current_version() == 2
        assert [m["version"] for m in runner.get_migration_history()] == [1, 2]
        assert {"one", "two"} <= _tables(bare_connection)

    def test_second_run_is_a_no_op(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        migrations = [_CreateTable(1, "one")]
        runner.run_migrations(migrations)
        assert runner.run_migrations(migrations) == 0

    def test_pending_skips_applied(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        runner.run_migration(_CreateTable(1, "one"))
        pending = runner.pending([_CreateTable(1, "one"), _CreateTable(2, "two")])
        assert [m.version for m in pending] == [2]

    def test_rejects_old_version(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        runner.run_migration(_CreateTable(1, "one"))
        with pytest.raises(ValueError):
            runner.run_migration(_CreateTable(1, "again"))

    def test_failure_is_wrapped_and_not_recorded(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        with pytest.raises(RuntimeError, match="Migration 3 failed"):
            runner.run_migration(_FailingMigration())
        assert runner.get_current_version() == 0

    def test_history_records_description(self, bare_connection):
        runner = MigrationRunner(bare_connection)
        runner.run_migration(_CreateTable(1, "one"))
        (entry,) = runner.get_migration_history()
        assert entry["description"] == "Create one"
        assert isinstance(entry["applied_at"], int)


# ---------------------------------------------------------------------------
# Initial schema
# ---------------------------------------------------------------------------


class TestInitialSchema:
    def test_creates_store_tables(self, bare_connection):
        MigrationRunner(bare_connection).run_migrations(ALL_MIGRATIONS)
        assert {
            "task_lists",
            "tasks",
            "instances",
            "properties",
            "fts_ngram",
            "fts_content",
        } <= _tables(bare_connection)

    def test_property_delete_trigger_exists(self, bare_connection):
        MigrationRunner(bare_connection).run_migrations(ALL_MIGRATIONS)
        triggers = bare_connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'trigger'"
        ).fetchall()
        assert ("property_delete_fts",) in [tuple(t) for t in triggers]
