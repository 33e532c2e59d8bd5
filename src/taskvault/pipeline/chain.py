"""Ordered registry of the processors run on every task write."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from taskvault.adapters.sqlite.search_index import SqliteSearchIndex
from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.adapters.sqlite.utils import now_millis
from taskvault.pipeline.changeset import TaskView
from taskvault.pipeline.processors import (
    AutoUpdateProcessor,
    ChangeListProcessor,
    InstanceProcessor,
    LocalTaskProcessor,
    SearchIndexProcessor,
    TaskProcessor,
    TaskValidatorProcessor,
)
from taskvault.search.ngrams import NGramGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessorChain:
    """Processors in the order their hooks run."""

    processors: tuple[TaskProcessor, ...] = ()

    @classmethod
    def of(cls, processors: Iterable[TaskProcessor]) -> ProcessorChain:
        return cls(tuple(processors))

    @classmethod
    def default(
        cls,
        store: SqliteTaskStore,
        index: SqliteSearchIndex,
        generator: NGramGenerator | None = None,
        clock: Callable[[], int] = now_millis,
    ) -> ProcessorChain:
        """Build the standard chain: validate, auto-update, move, instances, index, purge."""
        return cls(
            (
                TaskValidatorProcessor(store),
                AutoUpdateProcessor(clock),
                ChangeListProcessor(store),
                InstanceProcessor(store),
                SearchIndexProcessor(index, generator),
                LocalTaskProcessor(store),
            )
        )

    def __iter__(self) -> Iterator[TaskProcessor]:
        return iter(self.processors)

    def __len__(self) -> int:
        return len(self.processors)

    def run(self, hook: str, view: TaskView, is_trusted: bool) -> None:
        """Call *hook* (e.g. ``"before_insert"``) on every processor in order."""
        for processor in self.processors:
            getattr(processor, hook)(view, is_trusted)
        logger.debug("%s done for task %s", hook, view.task_id)
