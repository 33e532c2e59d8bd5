"""Shared test fixtures.

Every test gets a fresh in-memory database migrated with the real schema,
and config/log directories redirected to *tmp_path*.
"""

from __future__ import annotations

import sqlite3
from unittest.mock import patch

import pytest

from taskvault.adapters.sqlite.connection import open_connection
from taskvault.adapters.sqlite.search_index import SqliteSearchIndex
from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.search.ngrams import NGramGenerator
from taskvault.services.task_provider import TaskProvider

# 2026-03-02T09:00:00Z
NOW = 1_772_442_000_000


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def connection() -> sqlite3.Connection:
    """Provide a migrated in-memory database."""
    conn = open_connection(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def store(connection) -> SqliteTaskStore:
    return SqliteTaskStore(connection)


@pytest.fixture
def index(connection) -> SqliteSearchIndex:
    return SqliteSearchIndex(connection)


def _insert_list(store: SqliteTaskStore, name: str, account_type: str) -> int:
    list_id = store.insert_list(
        {"name": name, "account_name": f"{name} account", "account_type": account_type}
    )
    store.connection.commit()
    return list_id


@pytest.fixture
def local_list(store) -> int:
    """A device-only list."""
    return _insert_list(store, "Inbox", "LOCAL")


@pytest.fixture
def synced_list(store) -> int:
    """A list owned by a synced account."""
    return _insert_list(store, "Work", "org.example.caldav")


@pytest.fixture
def other_synced_list(store) -> int:
    return _insert_list(store, "Home", "org.example.caldav")


@pytest.fixture
def provider(store, index) -> TaskProvider:
    """Provide a TaskProvider with the default chain and a fixed clock."""
    return TaskProvider(store, index=index, generator=NGramGenerator(), clock=lambda: NOW)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only and
    clears the lru_cache so each test gets a fresh service instance.
    """
    from taskvault.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("taskvault.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("taskvault.services.config_service.user_data_dir", return_value=tmpdir):
            yield ConfigService()
    get_config_service.cache_clear()


@pytest.fixture
def tmp_logger(tmp_path):
    """Send the application log file to *tmp_path*."""
    from taskvault.utils.logger import reset_logger

    reset_logger()
    with patch("taskvault.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield tmp_path / "logs"
    reset_logger()
