"""Unit tests for connection setup and the shared DatabaseConnection."""

from __future__ import annotations

import os
import stat
from unittest.mock import patch

import pytest

from taskvault.adapters.sqlite.connection import (
    DatabaseConnection,
    default_db_path,
    get_connection,
    open_connection,
)


@pytest.fixture(autouse=True)
def reset_shared_connection():
    """Ensure each test starts without a shared connection."""
    DatabaseConnection.close_connection()
    yield
    DatabaseConnection.close_connection()


class TestOpenConnection:
    def test_foreign_keys_enabled(self):
        conn = open_connection(":memory:")
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        conn.close()

    def test_rows_are_mappings(self):
        conn = open_connection(":memory:")
        row = conn.execute("SELECT 1 AS one").fetchone()
        assert row["one"] == 1
        conn.close()

    def test_schema_is_migrated(self):
        conn = open_connection(":memory:")
        assert conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0] == 1
        conn.close()

    def test_file_database_uses_wal_and_private_permissions(self, tmp_path):
        db = tmp_path / "nested" / "vault.db"
        conn = open_connection(db)
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        if os.name == "posix":
            assert stat.S_IMODE(db.stat().st_mode) == 0o600
        conn.close()

    def test_reopening_keeps_data(self, tmp_path):
        db = tmp_path / "vault.db"
        conn = open_connection(db)
        conn.execute(
            "INSERT INTO task_lists (name, account_name, account_type) VALUES ('a', 'b', 'LOCAL')"
        )
        conn.commit()
        conn.close()

        conn = open_connection(db)
        assert conn.execute("SELECT COUNT(*) FROM task_lists").fetchone()[0] == 1
        conn.close()


class TestDatabaseConnection:
    def test_same_path_returns_same_connection(self, tmp_path):
        db = tmp_path / "vault.db"
        assert get_connection(db) is get_connection(db)
        assert DatabaseConnection.get_db_path() == db

    def test_new_path_reopens(self, tmp_path):
        first = get_connection(tmp_path / "a.db")
        second = get_connection(tmp_path / "b.db")
        assert first is not second
        assert DatabaseConnection.get_db_path() == tmp_path / "b.db"

    def test_close_clears_state(self, tmp_path):
        get_connection(tmp_path / "vault.db")
        DatabaseConnection.close_connection()
        assert DatabaseConnection.get_db_path() is None

    def test_default_path_under_user_data_dir(self, tmp_path):
        with patch(
            "taskvault.adapters.sqlite.connection.user_data_dir", return_value=str(tmp_path)
        ):
            assert default_db_path() == tmp_path / "vault.db"
            get_connection()
        assert (tmp_path / "vault.db").exists()
