"""Local purge stage: removes deleted tasks of device-only lists."""

from __future__ import annotations

import logging

from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.models.contract import ACCOUNT_TYPE, LOCAL_ACCOUNT_TYPE
from taskvault.pipeline.changeset import TaskView
from taskvault.pipeline.processors.base import TaskProcessor

logger = logging.getLogger(__name__)


class LocalTaskProcessor(TaskProcessor):
    """Hard deletes tasks of ``LOCAL`` lists once the client deleted them.

    No sync adapter will ever pick up a tombstone in a local list, so the
    soft-deleted row is purged together with its instance, properties and
    index entries.
    """

    def __init__(self, store: SqliteTaskStore):
        self.store = store

    def after_delete(self, view: TaskView, is_trusted: bool) -> None:
        if is_trusted or view.value_of(ACCOUNT_TYPE) != LOCAL_ACCOUNT_TYPE:
            return
        if self.store.delete_task(view.task_id):
            logger.info("purged local task %s", view.task_id)
