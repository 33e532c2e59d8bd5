"""Change-set views over a single task row.

A view pairs the stored snapshot of a task with the writes pending for it.
Processors read current values through ``value_of`` (pending if touched,
stored otherwise) and record edits with ``set``/``unset``. Only touched
fields are written on ``commit``. A view lives for one pipeline run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from taskvault.errors import ReadOnlyViewError
from taskvault.models.contract import ID, LIST_DERIVED_FIELDS, RDATE, RRULE, TASK_COLUMNS

if TYPE_CHECKING:
    from taskvault.adapters.sqlite.task_store import SqliteTaskStore


class TaskView(ABC):
    """Read/write access to one task during a pipeline run."""

    def __init__(self, snapshot: dict[str, Any] | None = None):
        self._snapshot = dict(snapshot or {})

    @property
    def task_id(self) -> int | None:
        return self._snapshot.get(ID)

    def old_value_of(self, field: str) -> Any:
        """Return the stored value of *field* (None for new tasks)."""
        return self._snapshot.get(field)

    def value_of(self, field: str) -> Any:
        return self.old_value_of(field)

    def is_touched(self, field: str) -> bool:
        return False

    def has_updates(self) -> bool:
        return False

    def is_recurring(self) -> bool:
        """Whether the task carries a recurrence rule or recurrence dates."""
        return bool(self.value_of(RRULE) or self.value_of(RDATE))

    def current_values(self) -> dict[str, Any]:
        """Return every stored column with pending writes applied."""
        return {field: self.value_of(field) for field in TASK_COLUMNS}

    @abstractmethod
    def set(self, field: str, value: Any) -> None: ...

    @abstractmethod
    def unset(self, field: str) -> None: ...

    @abstractmethod
    def commit(self) -> int: ...

    def duplicate(self) -> WritableTaskView:
        raise ReadOnlyViewError("Cannot duplicate a read-only task view")


class ReadOnlyTaskView(TaskView):
    """View of a stored task that is about to be deleted."""

    def set(self, field: str, value: Any) -> None:
        raise ReadOnlyViewError(f"Cannot set '{field}' on a read-only task view")

    def unset(self, field: str) -> None:
        raise ReadOnlyViewError(f"Cannot unset '{field}' on a read-only task view")

    def commit(self) -> int:
        raise ReadOnlyViewError("Cannot commit a read-only task view")

    def __repr__(self) -> str:
        return f"ReadOnlyTaskView(task_id={self.task_id})"


class WritableTaskView(TaskView):
    """Writable view used for inserts (empty snapshot) and updates.

    Args:
        store: Store the pending writes are committed to
        snapshot: Stored row, None for a task that does not exist yet
        pending: Initial pending writes (the caller's values)
    """

    def __init__(
        self,
        store: SqliteTaskStore,
        snapshot: dict[str, Any] | None = None,
        pending: dict[str, Any] | None = None,
    ):
        super().__init__(snapshot)
        self._store = store
        self._pending: dict[str, Any] = dict(pending or {})
        self._committed = False

    @property
    def is_insert(self) -> bool:
        return ID not in self._snapshot

    @property
    def committed(self) -> bool:
        return self._committed

    def value_of(self, field: str) -> Any:
        if field in self._pending:
            return self._pending[field]
        return self._snapshot.get(field)

    def is_touched(self, field: str) -> bool:
        return field in self._pending

    def touched_fields(self) -> list[str]:
        return list(self._pending)

    def has_updates(self) -> bool:
        return bool(self._pending)

    def set(self, field: str, value: Any) -> None:
        self._check_open(field)
        self._pending[field] = value

    def unset(self, field: str) -> None:
        self._check_open(field)
        self._pending.pop(field, None)

    def commit(self) -> int:
        """Write the touched fields.

        Returns:
            Rows affected: 1 for an insert, the update row count otherwise,
            0 when nothing was touched
        """
        if self._committed:
            raise ReadOnlyViewError("Task view has already been committed")
        self._committed = True

        values = {k: v for k, v in self._pending.items() if k not in LIST_DERIVED_FIELDS}
        if self.is_insert:
            self._snapshot[ID] = self._store.insert_task(values)
            return 1
        if not values:
            return 0
        return self._store.update_task(self.task_id, values)

    def duplicate(self) -> WritableTaskView:
        """Return an insert view seeded with every current value except the id."""
        values = {k: v for k, v in self.current_values().items() if k != ID and v is not None}
        return WritableTaskView(self._store, None, values)

    def _check_open(self, field: str) -> None:
        if self._committed:
            raise ReadOnlyViewError(f"Cannot change '{field}' after the task was committed")

    def __repr__(self) -> str:
        return f"WritableTaskView(task_id={self.task_id}, pending={sorted(self._pending)})"
