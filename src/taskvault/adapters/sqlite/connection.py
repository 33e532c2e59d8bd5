"""Connection management for the SQLite task store.

One connection per process, configured with ``sqlite3.Row`` rows, foreign
key enforcement (the derived tables rely on ON DELETE CASCADE) and WAL
journaling, with the schema migrated on first use.
"""

from __future__ import annotations

import atexit
import logging
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from taskvault.adapters.sqlite.migrations import ALL_MIGRATIONS
from taskvault.adapters.sqlite.migrations.runner import MigrationRunner

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def default_db_path() -> Path:
    """Return the default database location under the user data dir."""
    return Path(user_data_dir("taskvault")) / "vault.db"


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open and configure a connection, then migrate its schema.

    Args:
        db_path: Database file path, or ``":memory:"``

    Returns:
        Configured sqlite3.Connection
    """
    in_memory = str(db_path) == MEMORY
    is_new_database = False
    if not in_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(str(db_path), check_same_thread=False, timeout=30.0)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    if not in_memory:
        connection.execute("PRAGMA journal_mode = WAL")
    if is_new_database:
        os.chmod(db_path, 0o600)

    applied = MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    if applied:
        logger.info("migrated %s (%d migration(s))", db_path, applied)
    return connection


class DatabaseConnection:
    """Process-wide connection holder, reopened when the path changes."""

    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create the shared connection.

        Args:
            db_path: Path to the database file. If None, uses the default location.
        """
        path = Path(db_path) if db_path is not None else default_db_path()
        if cls._connection is not None and cls._db_path == path:
            return cls._connection

        cls.close_connection()
        cls._connection = open_connection(path)
        cls._db_path = path
        atexit.register(cls.close_connection)
        return cls._connection

    @classmethod
    def close_connection(cls) -> None:
        """Close the shared connection if one is open."""
        if cls._connection is None:
            return
        try:
            cls._connection.close()
        except sqlite3.Error:
            logger.warning("error while closing %s", cls._db_path, exc_info=True)
        finally:
            cls._connection = None
            cls._db_path = None

    @classmethod
    def get_db_path(cls) -> Path | None:
        """Return the path of the open connection, if any."""
        return cls._db_path


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get the shared database connection."""
    return DatabaseConnection.get_connection(db_path)
