"""Instance stage: maintains the scheduling projection of every task."""

from __future__ import annotations

import logging

from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.models.contract import DTSTART, DUE, DURATION, IS_ALLDAY, TZ
from taskvault.pipeline.changeset import TaskView
from taskvault.pipeline.processors.base import TaskProcessor
from taskvault.utils.duration import parse_duration
from taskvault.utils.timezones import get_zone, utc_offset_millis

logger = logging.getLogger(__name__)


def compute_instance(view: TaskView) -> dict[str, int | None]:
    """Compute the instance row of a task from its current values.

    The due instant is the task's due date or, failing that, its start plus
    its duration. Sorting values shift each instant by the UTC offset of the
    task's zone at that instant, so that floating and all-day tasks (offset
    0) sort by wall-clock time next to timed ones.
    """
    start = view.value_of(DTSTART)
    due = view.value_of(DUE)
    duration = view.value_of(DURATION)
    all_day = bool(view.value_of(IS_ALLDAY))
    zone = None if all_day else get_zone(view.value_of(TZ))

    if due is None and start is not None and duration:
        due = parse_duration(duration).add_to(start, zone)

    def sorting(value: int | None) -> int | None:
        if value is None:
            return None
        return value + utc_offset_millis(zone, value)

    return {
        "instance_start": start,
        "instance_due": due,
        "instance_duration": due - start if start is not None and due is not None else None,
        "instance_start_sorting": sorting(start),
        "instance_due_sorting": sorting(due),
    }


class InstanceProcessor(TaskProcessor):
    """Upserts the single instance row of a task after every write."""

    def __init__(self, store: SqliteTaskStore):
        self.store = store

    def after_insert(self, view: TaskView, is_trusted: bool) -> None:
        self._refresh(view)

    def after_update(self, view: TaskView, is_trusted: bool) -> None:
        self._refresh(view)

    def _refresh(self, view: TaskView) -> None:
        values = compute_instance(view)
        self.store.upsert_instance(view.task_id, values)
        logger.debug("instance of task %s: %s", view.task_id, values)
