"""Search stage: keeps the n-gram index in step with task text."""

from __future__ import annotations

from taskvault.adapters.sqlite.search_index import SqliteSearchIndex
from taskvault.models.contract import (
    DESCRIPTION,
    SEARCHABLE_DESCRIPTION,
    SEARCHABLE_TITLE,
    TITLE,
)
from taskvault.pipeline.changeset import TaskView
from taskvault.pipeline.processors.base import TaskProcessor
from taskvault.search.ngrams import NGramGenerator

# task field -> index entry type
INDEXED_FIELDS = {
    TITLE: SEARCHABLE_TITLE,
    DESCRIPTION: SEARCHABLE_DESCRIPTION,
}


class SearchIndexProcessor(TaskProcessor):
    """Rebuilds the index entries of the title and description."""

    def __init__(self, index: SqliteSearchIndex, generator: NGramGenerator | None = None):
        self.index = index
        self.generator = generator or NGramGenerator()

    def after_insert(self, view: TaskView, is_trusted: bool) -> None:
        for field, entry_type in INDEXED_FIELDS.items():
            text = view.value_of(field)
            if text:
                self.index.replace_entries(view.task_id, entry_type, self.generator.get_ngrams(text))

    def after_update(self, view: TaskView, is_trusted: bool) -> None:
        for field, entry_type in INDEXED_FIELDS.items():
            if view.is_touched(field):
                text = view.value_of(field)
                self.index.replace_entries(view.task_id, entry_type, self.generator.get_ngrams(text))
