"""The task mutation pipeline: change-set views and the processor chain."""

from .chain import ProcessorChain
from .changeset import ReadOnlyTaskView, TaskView, WritableTaskView

__all__ = ["ProcessorChain", "ReadOnlyTaskView", "TaskView", "WritableTaskView"]
