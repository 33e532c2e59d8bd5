"""Task provider: the insert/update/delete/search surface of the store.

Every client operation runs in one store transaction. For each affected
task the provider builds a change-set view, runs the ``before_*`` hooks of
the processor chain, commits the row and runs the ``after_*`` hooks.
Observers learn about changed collections only after the transaction
committed.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from taskvault.adapters.sqlite.connection import get_connection
from taskvault.adapters.sqlite.search_index import SqliteSearchIndex
from taskvault.adapters.sqlite.task_store import SqliteTaskStore
from taskvault.adapters.sqlite.utils import now_millis
from taskvault.errors import (
    InvariantViolation,
    PropertyNotFoundError,
    StoreFailure,
    TaskNotFoundError,
)
from taskvault.models.config_models import AppConfig, SearchConfig
from taskvault.models.contract import (
    COLLECTION_INSTANCES,
    COLLECTION_LISTS,
    COLLECTION_PROPERTIES,
    COLLECTION_TASKS,
    DELETED,
    DIRTY,
    SEARCHABLE_PROPERTY,
)
from taskvault.models.core import (
    Instance,
    Property,
    PropertyValues,
    SearchHit,
    Task,
    TaskList,
    TaskListCreate,
    TaskValues,
)
from taskvault.pipeline.chain import ProcessorChain
from taskvault.pipeline.changeset import ReadOnlyTaskView, WritableTaskView
from taskvault.properties.handlers import get_property_handler
from taskvault.search.ngrams import NGramGenerator
from taskvault.services.config_service import get_config_service
from taskvault.services.notifications import ChangeNotifier

logger = logging.getLogger(__name__)


def _touched_values(values: TaskValues | dict[str, Any]) -> dict[str, Any]:
    if isinstance(values, TaskValues):
        return values.touched()
    try:
        return TaskValues.model_validate(values).touched()
    except ValidationError as e:
        raise InvariantViolation(f"Invalid task values: {e}") from e


def _ids(task_ids: int | Iterable[int]) -> list[int]:
    if isinstance(task_ids, int):
        return [task_ids]
    return list(task_ids)


class TaskProvider:
    """Runs client operations through the processor chain.

    Args:
        store: Relational store the tasks live in
        chain: Processors to run; the standard chain when None
        index: Search index storage; built on the store's connection when None
        generator: n-gram generator shared by indexing and querying
        notifier: Receives changed collections after each operation
        min_score: Search hits must score strictly above this
        clock: Returns the current instant in epoch milliseconds
    """

    def __init__(
        self,
        store: SqliteTaskStore,
        chain: ProcessorChain | None = None,
        index: SqliteSearchIndex | None = None,
        generator: NGramGenerator | None = None,
        notifier: ChangeNotifier | None = None,
        min_score: float = 0.3,
        clock: Callable[[], int] = now_millis,
    ):
        self.store = store
        self.index = index or SqliteSearchIndex(store.connection)
        self.generator = generator or NGramGenerator()
        self.chain = (
            chain
            if chain is not None
            else ProcessorChain.default(store, self.index, self.generator, clock)
        )
        self.notifier = notifier or ChangeNotifier()
        self.min_score = min_score

    @classmethod
    def from_config(
        cls, connection: sqlite3.Connection, search: SearchConfig | None = None
    ) -> TaskProvider:
        """Build a provider with the standard chain configured by *search*."""
        search = search or SearchConfig()
        generator = NGramGenerator(
            n=search.ngram_length,
            min_word_length=search.min_word_length,
            locale=search.locale,
            include_digits=search.include_digits,
        )
        return cls(SqliteTaskStore(connection), generator=generator, min_score=search.min_score)

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            with self.store.transaction():
                yield
        except Exception as e:
            self.notifier.discard()
            logger.warning("%s rolled back: %s", name, e)
            raise
        self.notifier.flush()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def run_insert(self, values: TaskValues | dict[str, Any], is_trusted: bool = False) -> int:
        """Insert a task.

        Args:
            values: Field values of the new task
            is_trusted: Whether the caller is a sync adapter

        Returns:
            Id of the new task

        Raises:
            InvariantViolation: If the values break a task invariant
            ListReferenceError: If the list does not exist
        """
        pending = _touched_values(values)
        with self._operation("insert"):
            view = WritableTaskView(self.store, None, pending)
            self.chain.run("before_insert", view, is_trusted)
            view.commit()
            self.chain.run("after_insert", view, is_trusted)
            self.notifier.post(COLLECTION_TASKS, COLLECTION_INSTANCES)
        logger.info("inserted task %s (trusted=%s)", view.task_id, is_trusted)
        return view.task_id

    def run_update(
        self,
        task_ids: int | Iterable[int],
        values: TaskValues | dict[str, Any],
        is_trusted: bool = False,
    ) -> int:
        """Apply the same values to every task in *task_ids*.

        Unknown ids are skipped.

        Returns:
            Number of tasks processed
        """
        pending = _touched_values(values)
        count = 0
        with self._operation("update"):
            for task_id in _ids(task_ids):
                snapshot = self.store.get_task(task_id)
                if snapshot is None:
                    logger.debug("update skipped unknown task %s", task_id)
                    continue
                view = WritableTaskView(self.store, snapshot, pending)
                self.chain.run("before_update", view, is_trusted)
                view.commit()
                self.chain.run("after_update", view, is_trusted)
                count += 1
            if count:
                self.notifier.post(COLLECTION_TASKS, COLLECTION_INSTANCES)
        logger.info("updated %d task(s) (trusted=%s)", count, is_trusted)
        return count

    def run_delete(self, task_ids: int | Iterable[int], is_trusted: bool = False) -> int:
        """Delete tasks.

        Sync adapters remove rows for good. Other callers only mark the task
        deleted and dirty so the deletion can be synced; tasks of local lists
        are purged by the chain afterwards.

        Returns:
            Number of tasks processed
        """
        count = 0
        with self._operation("delete"):
            for task_id in _ids(task_ids):
                snapshot = self.store.get_task(task_id)
                if snapshot is None:
                    continue
                view = ReadOnlyTaskView(snapshot)
                self.chain.run("before_delete", view, is_trusted)
                if is_trusted:
                    self.store.delete_task(task_id)
                else:
                    self.store.update_task(task_id, {DELETED: True, DIRTY: True})
                self.chain.run("after_delete", view, is_trusted)
                count += 1
            if count:
                self.notifier.post(COLLECTION_TASKS, COLLECTION_INSTANCES)
        logger.info("deleted %d task(s) (trusted=%s)", count, is_trusted)
        return count

    def touch_all(self) -> int:
        """Re-run the chain over every task, e.g. after a time zone change."""
        return self.run_update(self.store.task_ids(), {}, is_trusted=True)

    def get_task(self, task_id: int) -> Task:
        row = self.store.get_task(task_id)
        if row is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return Task.model_validate(row)

    def get_tasks(self, include_deleted: bool = False) -> list[Task]:
        return [Task.model_validate(row) for row in self.store.get_tasks(include_deleted)]

    def get_instance(self, task_id: int) -> Instance | None:
        row = self.store.get_instance(task_id)
        return Instance.model_validate(row) if row else None

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self, query: str, order_by: str | None = None, limit: int | None = None
    ) -> list[SearchHit]:
        """Find tasks whose text shares enough n-grams with *query*.

        Queries shorter than the n-gram length match n-grams by prefix.

        Args:
            query: Free text
            order_by: Tie-break column, ``-column`` for descending
            limit: Maximum number of hits

        Returns:
            Hits ordered by score, best first
        """
        ngrams = self.generator.get_ngrams(query)
        # surrounding whitespace never forms an n-gram, so it does not count
        prefix = len(query.strip()) < self.generator.n
        try:
            rows = self.index.query(ngrams, prefix, self.min_score, order_by, limit)
        except ValueError as e:
            raise InvariantViolation(str(e)) from e
        except sqlite3.Error as e:
            raise StoreFailure(f"Search failed: {e}") from e
        return [SearchHit(task_id=task_id, score=score) for task_id, score in rows]

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def insert_list(self, values: TaskListCreate | dict[str, Any]) -> int:
        if not isinstance(values, TaskListCreate):
            try:
                values = TaskListCreate.model_validate(values)
            except ValidationError as e:
                raise InvariantViolation(f"Invalid list values: {e}") from e
        with self._operation("insert list"):
            list_id = self.store.insert_list(values.model_dump())
            self.notifier.post(COLLECTION_LISTS)
        return list_id

    def get_lists(self) -> list[TaskList]:
        return [TaskList.model_validate(row) for row in self.store.get_lists()]

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def insert_property(self, task_id: int, values: PropertyValues | dict[str, Any]) -> int:
        """Attach a property to a task and index its searchable text."""
        prop = self._property_values(values)
        handler = get_property_handler(prop.mimetype)
        data = prop.model_dump()
        handler.validate(data)
        with self._operation("insert property"):
            if self.store.get_task(task_id) is None:
                raise TaskNotFoundError(f"Task {task_id} not found")
            property_id = self.store.insert_property(task_id, data)
            self._index_property(task_id, property_id, handler.searchable_text(data))
            self.notifier.post(COLLECTION_PROPERTIES, COLLECTION_TASKS)
        return property_id

    def update_property(self, property_id: int, values: dict[str, Any]) -> int:
        with self._operation("update property"):
            stored = self.store.get_property(property_id)
            if stored is None:
                raise PropertyNotFoundError(f"Property {property_id} not found")
            if values.get("mimetype", stored["mimetype"]) != stored["mimetype"]:
                raise InvariantViolation("The mimetype of a property cannot change")
            merged = self._property_values(
                {k: v for k, v in {**stored, **values}.items() if k not in ("id", "task_id")}
            ).model_dump()
            handler = get_property_handler(merged["mimetype"])
            handler.validate(merged)
            changes = {k: v for k, v in merged.items() if k != "mimetype" and k in values}
            count = self.store.update_property(property_id, changes)
            self._index_property(stored["task_id"], property_id, handler.searchable_text(merged))
            self.notifier.post(COLLECTION_PROPERTIES)
        return count

    def delete_property(self, property_id: int) -> int:
        with self._operation("delete property"):
            count = self.store.delete_property(property_id)
            if count:
                self.notifier.post(COLLECTION_PROPERTIES, COLLECTION_TASKS)
        return count

    def get_properties(self, task_id: int) -> list[Property]:
        return [Property.model_validate(row) for row in self.store.get_properties(task_id)]

    @staticmethod
    def _property_values(values: PropertyValues | dict[str, Any]) -> PropertyValues:
        if isinstance(values, PropertyValues):
            return values
        try:
            return PropertyValues.model_validate(values)
        except ValidationError as e:
            raise InvariantViolation(f"Invalid property values: {e}") from e

    def _index_property(self, task_id: int, property_id: int, text: str | None) -> None:
        ngrams = self.generator.get_ngrams(text) if text else set()
        self.index.replace_entries(task_id, SEARCHABLE_PROPERTY, ngrams, property_id)


def create_task_provider(config: AppConfig) -> TaskProvider:
    """Build a provider on the shared connection described by *config*."""
    connection = get_connection(config.store.db_path)
    return TaskProvider.from_config(connection, config.search)


@lru_cache(maxsize=1)
def get_task_provider() -> TaskProvider:
    """Get a cached TaskProvider for the configured database."""
    return create_task_provider(get_config_service().config)
