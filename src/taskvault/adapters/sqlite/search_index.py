"""SQLite storage of the n-gram search index.

``fts_ngram`` holds every distinct n-gram once; ``fts_content`` associates
n-grams with a task and the kind of text they came from (title,
description or a property). Entries are always rebuilt wholesale.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable

from taskvault.adapters.sqlite.utils import escape_like, placeholders
from taskvault.models.contract import TASK_COLUMNS

logger = logging.getLogger(__name__)


def _order_clause(order_by: str | None) -> str:
    """Translate ``column`` or ``-column`` into an ORDER BY term on tasks."""
    if not order_by:
        return ""
    descending = order_by.startswith("-")
    column = order_by.lstrip("-")
    if column not in TASK_COLUMNS:
        raise ValueError(f"Cannot order search results by '{column}'")
    return f", t.{column} {'DESC' if descending else 'ASC'}"


class SqliteSearchIndex:
    """Reads and writes n-gram associations."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def ngram_ids(self, ngrams: Iterable[str]) -> list[int]:
        """Return ids for *ngrams*, inserting the ones not seen before."""
        ids = []
        for ngram in ngrams:
            self._connection.execute("INSERT INTO fts_ngram (ngram_text) VALUES (?)", (ngram,))
            row = self._connection.execute(
                "SELECT ngram_id FROM fts_ngram WHERE ngram_text = ?", (ngram,)
            ).fetchone()
            ids.append(row[0])
        return ids

    def replace_entries(
        self,
        task_id: int,
        entry_type: str,
        ngrams: Iterable[str],
        property_id: int = 0,
    ) -> int:
        """Replace the associations of one text source of a task.

        Args:
            task_id: Task the text belongs to
            entry_type: One of the SEARCHABLE_* constants
            ngrams: n-grams of the new text; empty removes the entries
            property_id: Property the text came from, 0 for task fields

        Returns:
            Number of associations written
        """
        self.remove_entries(task_id, entry_type, property_id)
        ids = self.ngram_ids(sorted(set(ngrams)))
        self._connection.executemany(
            "INSERT INTO fts_content (task_id, ngram_id, property_id, type) VALUES (?, ?, ?, ?)",
            [(task_id, ngram_id, property_id, entry_type) for ngram_id in ids],
        )
        logger.debug("indexed task %s %s: %d n-gram(s)", task_id, entry_type, len(ids))
        return len(ids)

    def remove_entries(self, task_id: int, entry_type: str, property_id: int = 0) -> None:
        self._connection.execute(
            "DELETE FROM fts_content WHERE task_id = ? AND type = ? AND property_id = ?",
            (task_id, entry_type, property_id),
        )

    def entries(self, task_id: int) -> list[tuple[str, int, str]]:
        """Return ``(type, property_id, ngram_text)`` rows of a task, sorted."""
        cursor = self._connection.execute(
            """
            SELECT c.type, c.property_id, n.ngram_text
            FROM fts_content c JOIN fts_ngram n ON n.ngram_id = c.ngram_id
            WHERE c.task_id = ?
            ORDER BY c.type, c.property_id, n.ngram_text
            """,
            (task_id,),
        )
        return [tuple(row) for row in cursor]

    def query(
        self,
        ngrams: set[str],
        prefix: bool = False,
        min_score: float = 0.3,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[tuple[int, float]]:
        """Rank non-deleted tasks by the share of query n-grams they contain.

        Args:
            ngrams: n-grams of the query
            prefix: Match n-grams starting with each query n-gram instead of
                exact n-grams (used for very short queries)
            min_score: Only tasks scoring strictly above this are returned
            order_by: Secondary sort column, ``-column`` for descending
            limit: Maximum number of hits

        Returns:
            List of ``(task_id, score)`` ordered by score descending
        """
        if not ngrams:
            return []
        terms = sorted(ngrams)
        if prefix:
            match = " OR ".join("n.ngram_text LIKE ? ESCAPE '\\'" for _ in terms)
            params: list = [escape_like(term) + "%" for term in terms]
        else:
            match = f"n.ngram_text IN ({placeholders(terms)})"
            params = list(terms)

        sql = f"""
            SELECT c.task_id AS task_id,
                   MIN(1.0 * COUNT(DISTINCT c.ngram_id) / ?, 1.0) AS score
            FROM fts_content c
            JOIN fts_ngram n ON n.ngram_id = c.ngram_id
            JOIN tasks t ON t.id = c.task_id
            WHERE ({match}) AND t.deleted = 0
            GROUP BY c.task_id
            HAVING score > ?
            ORDER BY score DESC{_order_clause(order_by)}, c.task_id ASC
        """
        query_params = [len(terms), *params, min_score]
        if limit is not None:
            sql += " LIMIT ?"
            query_params.append(limit)
        cursor = self._connection.execute(sql, query_params)
        return [(row[0], row[1]) for row in cursor]
