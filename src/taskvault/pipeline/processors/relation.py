"""Relation stage: emulates moving tasks between lists.

Sync adapters identify remote tasks by their sync fields, so a task that
was already synced cannot simply change its ``list_id``. Instead a deleted
copy (tombstone) stays behind in the old list for the old list's sync
adapter to remove remotely, and the task itself becomes a new, unsynced
task of the new list. Recurring tasks move as a family: master first, then
its exceptions, each tombstone linked to the master's tombstone.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.models.contract import (
    DELETED,
    DIRTY,
    ID,
    LIST_ID,
    ORIGINAL_INSTANCE_ID,
    ORIGINAL_INSTANCE_SYNC_ID,
    SYNC_FIELDS,
    SYNC_ID,
    SYNC_VERSION,
)
from taskvault.pipeline.changeset import WritableTaskView
from taskvault.pipeline.processors.base import TaskProcessor

logger = logging.getLogger(__name__)

_SYNC_STATE_FIELDS = (SYNC_ID, SYNC_VERSION, *SYNC_FIELDS, ORIGINAL_INSTANCE_SYNC_ID)


@dataclass
class _Move:
    view: WritableTaskView
    is_master: bool
    # the edited task is committed by the pipeline, everything else here
    commit: bool = True
    master_id: int | None = None


class ChangeListProcessor(TaskProcessor):
    """Turns non-trusted ``list_id`` edits into tombstone-and-recreate moves."""

    def __init__(self, store: SqliteTaskStore):
        self.store = store

    def before_update(self, view: WritableTaskView, is_trusted: bool) -> None:
        if is_trusted or not view.is_touched(LIST_ID):
            return
        old_list = view.old_value_of(LIST_ID)
        new_list = view.value_of(LIST_ID)
        if old_list == new_list:
            view.unset(LIST_ID)
            return

        logger.debug("moving task %s from list %s to %s", view.task_id, old_list, new_list)
        moves: deque[_Move] = deque()
        master = self._find_master(view, old_list)
        if master is not None:
            # an exception: the master and its other exceptions go first
            master_id = master[ID]
            moves.append(_Move(WritableTaskView(self.store, master), is_master=True))
            family = [
                i for i in self.store.find_exceptions(master_id, master[SYNC_ID]) if i != view.task_id
            ]
            edited = _Move(view, is_master=False, commit=False, master_id=master_id)
        else:
            master_id = view.task_id
            family = self.store.find_exceptions(master_id, view.old_value_of(SYNC_ID))
            moves.append(_Move(view, is_master=True, commit=False))
            edited = None

        link_id = None
        while moves:
            move = moves.popleft()
            tombstone_id = self._move(move.view, old_list, new_list, link_id, move.master_id)
            if move.commit:
                move.view.commit()
            if move.is_master:
                link_id = tombstone_id
                for exception_id in family:
                    row = self.store.get_task(exception_id)
                    if row is not None and row[LIST_ID] == old_list:
                        moves.append(
                            _Move(WritableTaskView(self.store, row), is_master=False, master_id=master_id)
                        )
                if edited is not None:
                    moves.append(edited)

    def _find_master(self, view: WritableTaskView, old_list: int) -> dict | None:
        """Return the master row of an exception, linked by id or by sync id."""
        master_id = view.old_value_of(ORIGINAL_INSTANCE_ID)
        if master_id is not None:
            return self.store.get_task(master_id)
        master_sync_id = view.old_value_of(ORIGINAL_INSTANCE_SYNC_ID)
        if master_sync_id is not None:
            return self.store.find_master(master_sync_id, old_list)
        return None

    def _move(
        self,
        view: WritableTaskView,
        old_list: int,
        new_list: int,
        link_id: int | None,
        master_id: int | None = None,
    ) -> int | None:
        """Move one task, returning the id of its tombstone if one was needed."""
        tombstone_id = None
        if self._was_synced(view):
            tombstone = view.duplicate()
            tombstone.set(LIST_ID, old_list)
            tombstone.set(DELETED, True)
            tombstone.set(DIRTY, True)
            # linked to the master tombstone or to nothing, never to the live master
            tombstone.set(ORIGINAL_INSTANCE_ID, link_id)
            if link_id is not None:
                tombstone.set(ORIGINAL_INSTANCE_SYNC_ID, None)
            tombstone.commit()
            tombstone_id = tombstone.task_id
            logger.info(
                "left tombstone %s in list %s for moved task %s",
                tombstone_id,
                old_list,
                view.task_id,
            )

        view.set(LIST_ID, new_list)
        view.set(DIRTY, True)
        for field in _SYNC_STATE_FIELDS:
            view.set(field, None)
        if master_id is not None and view.old_value_of(ORIGINAL_INSTANCE_ID) is None:
            # the sync id link is gone, keep the family together by id
            view.set(ORIGINAL_INSTANCE_ID, master_id)
        return tombstone_id

    @staticmethod
    def _was_synced(view: WritableTaskView) -> bool:
        return any(
            view.old_value_of(field) is not None
            for field in (SYNC_ID, SYNC_VERSION, ORIGINAL_INSTANCE_SYNC_ID)
        )
