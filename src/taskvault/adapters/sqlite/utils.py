"""Utility functions for SQLite adapter."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any


def now_millis() -> int:
    """Get the current instant as epoch milliseconds.

    Returns:
        Milliseconds since 1970-01-01T00:00:00Z
    """
    return time.time_ns() // 1_000_000


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)


def to_db_value(value: Any) -> Any:
    """Convert a Python value to what SQLite stores (bools become 0/1)."""
    if isinstance(value, bool):
        return int(value)
    return value


def build_insert_clause(values: dict[str, Any]) -> tuple[str, str, list[Any]]:
    """Build the column list and placeholders for an INSERT.

    Args:
        values: Mapping of column name to value

    Returns:
        Tuple of (columns, placeholders, params)
    """
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    return columns, placeholders, [to_db_value(v) for v in values.values()]


def build_update_clause(values: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build SET clause for UPDATE queries.

    Args:
        values: Mapping of column name to new value

    Returns:
        Tuple of (set_clause, params)
    """
    set_clause = ", ".join(f"{column} = ?" for column in values)
    return set_clause, [to_db_value(v) for v in values.values()]


def placeholders(items: Iterable[Any]) -> str:
    """Return a comma separated '?' list sized to *items*."""
    return ", ".join("?" for _ in items)


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards in *text* so it matches literally."""
    return (
        text.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
