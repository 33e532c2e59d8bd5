"""Base class of the task processing stages."""

from __future__ import annotations

from taskvault.pipeline.changeset import TaskView


class TaskProcessor:
    """A stage of the task mutation pipeline.

    Every hook receives the view of the row being processed and whether the
    caller is a trusted sync adapter. ``before_*`` hooks run before the row
    is written and may edit the view or raise to abort the operation;
    ``after_*`` hooks run after the write and may only touch derived state.
    All hooks default to no-ops.
    """

    def before_insert(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def after_insert(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def before_update(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def after_update(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def before_delete(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def after_delete(self, view: TaskView, is_trusted: bool) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
