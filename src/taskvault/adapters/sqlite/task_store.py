"""SQLite implementation of the relational task store.

The store knows nothing about task semantics: it reads and writes rows of
``task_lists``, ``tasks``, ``instances`` and ``properties`` and runs client
operations inside transactions. Invariants are enforced by the processor
chain before anything reaches these methods.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from taskvault.adapters.sqlite.utils import (
    build_insert_clause,
    build_update_clause,
    row_to_dict,
)
from taskvault.errors import StoreFailure
from taskvault.models.contract import MIMETYPE_ALARM, TASK_COLUMNS

logger = logging.getLogger(__name__)

_TASK_COLUMN_SET = frozenset(TASK_COLUMNS)
_LIST_COLUMNS = frozenset(
    (
        "name",
        "color",
        "account_name",
        "account_type",
        "visible",
        "sync_enabled",
        "owner",
        "access_level",
        "sync_id",
        "sync_version",
        "dirty",
    )
)
_INSTANCE_COLUMNS = (
    "instance_start",
    "instance_due",
    "instance_duration",
    "instance_start_sorting",
    "instance_due_sorting",
)
_PROPERTY_COLUMNS = frozenset(("mimetype", "data0", "data1", "data2", "data3"))

_SELECT_TASK = """
    SELECT t.*,
           l.name AS list_name,
           l.color AS list_color,
           l.account_name AS account_name,
           l.account_type AS account_type
    FROM tasks t
    LEFT JOIN task_lists l ON l.id = t.list_id
"""


def _checked(values: dict[str, Any], allowed: frozenset[str], table: str) -> dict[str, Any]:
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown {table} column(s): {', '.join(sorted(unknown))}")
    return values


class SqliteTaskStore:
    """Row-level access to the task store tables."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block atomically.

        Opens ``BEGIN IMMEDIATE`` when no transaction is active, otherwise a
        savepoint inside the caller's transaction. Any exception rolls the
        block back; ``sqlite3.Error`` is re-raised as StoreFailure.
        """
        conn = self._connection
        nested = conn.in_transaction
        if nested:
            conn.execute("SAVEPOINT taskvault_op")
        else:
            conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException as e:
            if nested:
                conn.execute("ROLLBACK TO taskvault_op")
                conn.execute("RELEASE taskvault_op")
            else:
                conn.rollback()
            if isinstance(e, sqlite3.Error):
                raise StoreFailure(f"Store operation failed: {e}") from e
            raise
        else:
            if nested:
                conn.execute("RELEASE taskvault_op")
            else:
                conn.commit()

    # ------------------------------------------------------------------
    # Task lists
    # ------------------------------------------------------------------

    def insert_list(self, values: dict[str, Any]) -> int:
        columns, marks, params = build_insert_clause(_checked(values, _LIST_COLUMNS, "list"))
        cursor = self._connection.execute(
            f"INSERT INTO task_lists ({columns}) VALUES ({marks})", params
        )
        return cursor.lastrowid

    def get_list(self, list_id: int) -> dict[str, Any] | None:
        row = self._connection.execute(
            "SELECT * FROM task_lists WHERE id = ?", (list_id,)
        ).fetchone()
        return row_to_dict(row) if row else None

    def get_lists(self) -> list[dict[str, Any]]:
        cursor = self._connection.execute("SELECT * FROM task_lists ORDER BY id")
        return [row_to_dict(row) for row in cursor]

    def list_exists(self, list_id: int | None) -> bool:
        if list_id is None:
            return False
        row = self._connection.execute(
            "SELECT 1 FROM task_lists WHERE id = ?", (list_id,)
        ).fetchone()
        return row is not None

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def get_task(self, task_id: int) -> dict[str, Any] | None:
        """Return a task row joined with its list's display fields."""
        row = self._connection.execute(f"{_SELECT_TASK} WHERE t.id = ?", (task_id,)).fetchone()
        return row_to_dict(row) if row else None

    def get_tasks(self, include_deleted: bool = False) -> list[dict[str, Any]]:
        where = "" if include_deleted else " WHERE t.deleted = 0"
        cursor = self._connection.execute(f"{_SELECT_TASK}{where} ORDER BY t.id")
        return [row_to_dict(row) for row in cursor]

    def task_ids(self, include_deleted: bool = True) -> list[int]:
        sql = "SELECT id FROM tasks"
        if not include_deleted:
            sql += " WHERE deleted = 0"
        return [row[0] for row in self._connection.execute(sql + " ORDER BY id")]

    def find_exceptions(self, master_id: int, master_sync_id: str | None = None) -> list[int]:
        """Return ids of the exception rows that point at a master.

        Exceptions written by a sync adapter may only carry the master's
        sync id, so rows whose ``original_instance_sync_id`` equals
        *master_sync_id* belong to the family too.
        """
        cursor = self._connection.execute(
            "SELECT id FROM tasks WHERE original_instance_id = ?"
            " OR (? IS NOT NULL AND original_instance_sync_id = ?) ORDER BY id",
            (master_id, master_sync_id, master_sync_id),
        )
        return [row[0] for row in cursor]

    def find_master(self, sync_id: str, list_id: int) -> dict[str, Any] | None:
        """Return the live task of *list_id* with *sync_id*, None unless exactly one matches."""
        rows = self._connection.execute(
            f"{_SELECT_TASK} WHERE t.sync_id = ? AND t.list_id = ? AND t.deleted = 0",
            (sync_id, list_id),
        ).fetchall()
        return row_to_dict(rows[0]) if len(rows) == 1 else None

    def insert_task(self, values: dict[str, Any]) -> int:
        columns, marks, params = build_insert_clause(_checked(values, _TASK_COLUMN_SET, "task"))
        cursor = self._connection.execute(
            f"INSERT INTO tasks ({columns}) VALUES ({marks})", params
        )
        logger.debug("inserted task %s", cursor.lastrowid)
        return cursor.lastrowid

    def update_task(self, task_id: int, values: dict[str, Any]) -> int:
        if not values:
            return 0
        set_clause, params = build_update_clause(_checked(values, _TASK_COLUMN_SET, "task"))
        cursor = self._connection.execute(
            f"UPDATE tasks SET {set_clause} WHERE id = ?", [*params, task_id]
        )
        return cursor.rowcount

    def delete_task(self, task_id: int) -> int:
        """Hard delete a task; instances, properties and index rows cascade."""
        cursor = self._connection.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def upsert_instance(self, task_id: int, values: dict[str, Any]) -> None:
        """Insert or replace the single instance row of a task."""
        row = [values.get(column) for column in _INSTANCE_COLUMNS]
        updates = ", ".join(f"{c} = excluded.{c}" for c in _INSTANCE_COLUMNS)
        self._connection.execute(
            f"""
            INSERT INTO instances (task_id, {", ".join(_INSTANCE_COLUMNS)})
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(task_id) DO UPDATE SET {updates}
            """,
            [task_id, *row],
        )

    def get_instance(self, task_id: int) -> dict[str, Any] | None:
        row = self._connection.execute(
            "SELECT * FROM instances WHERE task_id = ?", (task_id,)
        ).fetchone()
        return row_to_dict(row) if row else None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def insert_property(self, task_id: int, values: dict[str, Any]) -> int:
        values = {"task_id": task_id, **_checked(values, _PROPERTY_COLUMNS, "property")}
        columns, marks, params = build_insert_clause(values)
        cursor = self._connection.execute(
            f"INSERT INTO properties ({columns}) VALUES ({marks})", params
        )
        self._refresh_property_flags(task_id)
        return cursor.lastrowid

    def update_property(self, property_id: int, values: dict[str, Any]) -> int:
        if not values:
            return 0
        set_clause, params = build_update_clause(_checked(values, _PROPERTY_COLUMNS, "property"))
        cursor = self._connection.execute(
            f"UPDATE properties SET {set_clause} WHERE id = ?", [*params, property_id]
        )
        return cursor.rowcount

    def delete_property(self, property_id: int) -> int:
        prop = self.get_property(property_id)
        if prop is None:
            return 0
        cursor = self._connection.execute("DELETE FROM properties WHERE id = ?", (property_id,))
        self._refresh_property_flags(prop["task_id"])
        return cursor.rowcount

    def get_property(self, property_id: int) -> dict[str, Any] | None:
        row = self._connection.execute(
            "SELECT * FROM properties WHERE id = ?", (property_id,)
        ).fetchone()
        return row_to_dict(row) if row else None

    def get_properties(self, task_id: int) -> list[dict[str, Any]]:
        cursor = self._connection.execute(
            "SELECT * FROM properties WHERE task_id = ? ORDER BY id", (task_id,)
        )
        return [row_to_dict(row) for row in cursor]

    def _refresh_property_flags(self, task_id: int) -> None:
        self._connection.execute(
            """
            UPDATE tasks SET
                has_properties = EXISTS (SELECT 1 FROM properties WHERE task_id = :id),
                has_alarms = EXISTS (
                    SELECT 1 FROM properties WHERE task_id = :id AND mimetype = :alarm
                )
            WHERE id = :id
            """,
            {"id": task_id, "alarm": MIMETYPE_ALARM},
        )
