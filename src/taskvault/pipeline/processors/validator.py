"""Validation stage: rejects writes that would break task invariants."""

from __future__ import annotations

import logging

from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.errors import InvariantViolation, ListReferenceError
from taskvault.models.contract import (
    CLASSIFICATION,
    CREATED,
    DELETED,
    DIRTY,
    DTSTART,
    DUE,
    DURATION,
    HAS_ALARMS,
    HAS_PROPERTIES,
    ID,
    IS_ALLDAY,
    IS_CLOSED,
    IS_NEW,
    LAST_MODIFIED,
    LIST_DERIVED_FIELDS,
    LIST_ID,
    ORIGINAL_INSTANCE_ID,
    ORIGINAL_INSTANCE_SYNC_ID,
    PERCENT_COMPLETE,
    PRIORITY,
    STATUS,
    TZ,
    UID,
)
from taskvault.pipeline.changeset import WritableTaskView
from taskvault.pipeline.processors.base import TaskProcessor
from taskvault.utils.duration import parse_duration
from taskvault.utils.timezones import is_valid_timezone

logger = logging.getLogger(__name__)

# Fields nobody may write: the id, values joined in from the list and
# flags derived from the status
ALWAYS_READ_ONLY = (ID, *LIST_DERIVED_FIELDS, IS_NEW, IS_CLOSED)

# Fields maintained by the store or a sync adapter
TRUSTED_ONLY = (UID, DIRTY, CREATED, LAST_MODIFIED, HAS_ALARMS, HAS_PROPERTIES, DELETED)

RANGES = {
    CLASSIFICATION: (0, 2),
    PRIORITY: (0, 9),
    PERCENT_COMPLETE: (0, 100),
    STATUS: (0, 3),
}

_DATE_FIELDS = (DTSTART, DUE, DURATION, TZ, IS_ALLDAY)


class TaskValidatorProcessor(TaskProcessor):
    """Enforces write permissions, value ranges and date consistency."""

    def __init__(self, store: SqliteTaskStore):
        self.store = store

    def before_insert(self, view: WritableTaskView, is_trusted: bool) -> None:
        if view.value_of(LIST_ID) is None:
            raise InvariantViolation("A task must be inserted into a list (list_id missing)")
        self._check_list(view.value_of(LIST_ID))
        self._validate(view, is_trusted, is_insert=True)

    def before_update(self, view: WritableTaskView, is_trusted: bool) -> None:
        if view.is_touched(LIST_ID):
            self._check_list(view.value_of(LIST_ID))
        self._validate(view, is_trusted, is_insert=False)

    def _check_list(self, list_id: int | None) -> None:
        if not self.store.list_exists(list_id):
            raise ListReferenceError(f"Task list {list_id} does not exist")

    def _validate(self, view: WritableTaskView, is_trusted: bool, is_insert: bool) -> None:
        for field in ALWAYS_READ_ONLY:
            if view.is_touched(field):
                raise InvariantViolation(f"Field '{field}' is read-only")

        if not is_trusted:
            for field in TRUSTED_ONLY:
                if view.is_touched(field):
                    raise InvariantViolation(f"Field '{field}' can only be set by a sync adapter")

        self._validate_original_instance(view, is_trusted, is_insert)

        for field, (low, high) in RANGES.items():
            if not view.is_touched(field):
                continue
            value = view.value_of(field)
            if value is not None and not low <= value <= high:
                raise InvariantViolation(f"'{field}' must be between {low} and {high}, got {value}")

        if is_insert or any(view.is_touched(field) for field in _DATE_FIELDS):
            self._validate_dates(view)

    @staticmethod
    def _validate_original_instance(
        view: WritableTaskView, is_trusted: bool, is_insert: bool
    ) -> None:
        touches_id = view.is_touched(ORIGINAL_INSTANCE_ID)
        touches_sync_id = view.is_touched(ORIGINAL_INSTANCE_SYNC_ID)
        if touches_id and touches_sync_id:
            raise InvariantViolation(
                "original_instance_id and original_instance_sync_id cannot be set together"
            )
        if not is_insert and not is_trusted and (touches_id or touches_sync_id):
            raise InvariantViolation("Only a sync adapter can change the original instance")

    @staticmethod
    def _validate_dates(view: WritableTaskView) -> None:
        dtstart = view.value_of(DTSTART)
        due = view.value_of(DUE)
        duration = view.value_of(DURATION)
        tz = view.value_of(TZ)

        if dtstart is not None and due is not None and duration is not None:
            raise InvariantViolation("Only one of due and duration can be set")
        if dtstart is not None and due is not None and due < dtstart:
            raise InvariantViolation("due must not be before dtstart")
        if duration is not None:
            if dtstart is None:
                raise InvariantViolation("duration requires dtstart")
            try:
                parsed = parse_duration(duration)
            except ValueError as e:
                raise InvariantViolation(str(e)) from e
            if parsed.is_negative:
                raise InvariantViolation("duration must not be negative")

        if tz is not None:
            if not is_valid_timezone(tz):
                raise InvariantViolation(f"Unknown time zone '{tz}'")
        elif (dtstart is not None or due is not None) and not view.value_of(IS_ALLDAY):
            raise InvariantViolation("A time zone is required for timed tasks")
