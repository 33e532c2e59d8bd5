"""Auto-update stage: keeps status, progress and bookkeeping fields consistent."""

from __future__ import annotations

from collections.abc import Callable

from taskvault.adapters.sqlite.utils import now_millis
from taskvault.errors import InvariantViolation
from taskvault.models.contract import (
    CLOSED_STATUSES,
    COMPLETED,
    COMPLETED_IS_ALLDAY,
    CREATED,
    DIRTY,
    IS_CLOSED,
    IS_NEW,
    LAST_MODIFIED,
    PERCENT_COMPLETE,
    STATUS,
    STATUS_COMPLETED,
    STATUS_NEEDS_ACTION,
    STATUSES,
)
from taskvault.pipeline.changeset import WritableTaskView
from taskvault.pipeline.processors.base import TaskProcessor

_STATUS_FIELDS = (STATUS, PERCENT_COMPLETE, COMPLETED)


class AutoUpdateProcessor(TaskProcessor):
    """Derives flags and progress from the status and stamps local edits.

    Trusted callers (sync adapters) get their status written as is, apart
    from the derived ``is_new``/``is_closed`` flags. Edits by everybody else
    also mark the task dirty and stamp ``last_modified`` (and ``created`` on
    insert).

    Args:
        clock: Returns the current instant in epoch milliseconds
    """

    def __init__(self, clock: Callable[[], int] = now_millis):
        self.clock = clock

    def before_insert(self, view: WritableTaskView, is_trusted: bool) -> None:
        now = self.clock()
        self._update_status(view, is_trusted, now, is_insert=True)
        if not is_trusted:
            view.set(DIRTY, True)
            view.set(CREATED, now)
            view.set(LAST_MODIFIED, now)

    def before_update(self, view: WritableTaskView, is_trusted: bool) -> None:
        now = self.clock()
        if any(view.is_touched(field) for field in _STATUS_FIELDS):
            self._update_status(view, is_trusted, now, is_insert=False)
        if not is_trusted:
            view.set(DIRTY, True)
            view.set(LAST_MODIFIED, now)

    @staticmethod
    def _update_status(
        view: WritableTaskView, is_trusted: bool, now: int, is_insert: bool
    ) -> None:
        # decided once, before this stage adds writes of its own
        completed_supplied = view.is_touched(COMPLETED)
        status_supplied = view.is_touched(STATUS) and view.value_of(STATUS) is not None

        if not is_trusted and not status_supplied:
            percent = view.value_of(PERCENT_COMPLETE) if view.is_touched(PERCENT_COMPLETE) else None
            if percent == 100:
                view.set(STATUS, STATUS_COMPLETED)
            elif completed_supplied and view.value_of(COMPLETED) is not None:
                view.set(STATUS, STATUS_COMPLETED)

        if not is_trusted and view.is_touched(PERCENT_COMPLETE) and not completed_supplied:
            percent = view.value_of(PERCENT_COMPLETE)
            if percent is not None and percent < 100:
                view.set(COMPLETED, None)

        if not (is_insert or view.is_touched(STATUS)):
            return

        status = view.value_of(STATUS)
        if status is None:
            status = STATUS_NEEDS_ACTION
            view.set(STATUS, status)
        if status not in STATUSES:
            raise InvariantViolation(f"Invalid status {status}")

        view.set(IS_NEW, status == STATUS_NEEDS_ACTION)
        view.set(IS_CLOSED, status in CLOSED_STATUSES)

        if is_trusted:
            return
        if status == STATUS_COMPLETED:
            view.set(PERCENT_COMPLETE, 100)
            if not completed_supplied:
                view.set(COMPLETED, now)
                view.set(COMPLETED_IS_ALLDAY, False)
        elif not completed_supplied:
            view.set(COMPLETED, None)
