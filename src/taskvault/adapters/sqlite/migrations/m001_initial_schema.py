"""Initial database schema migration.

This migration creates all initial tables for the task store:
- task_lists
- tasks
- instances
- properties
- fts_ngram / fts_content (n-gram search index)
- schema_version (created by migration system)
"""

import sqlite3

from taskvault.adapters.sqlite import schema
from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create initial database schema."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial task store schema"

    def up(self, connection: sqlite3.Connection) -> None:
        """Create all initial tables."""
        # Lists and tasks
        connection.execute(schema.CREATE_TASK_LISTS_TABLE)
        connection.execute(schema.CREATE_TASKS_TABLE)

        # Derived tables owned by a task
        connection.execute(schema.CREATE_INSTANCES_TABLE)
        connection.execute(schema.CREATE_PROPERTIES_TABLE)

        # Search index
        connection.execute(schema.CREATE_FTS_NGRAM_TABLE)
        connection.execute(schema.CREATE_FTS_CONTENT_TABLE)

        for trigger_sql in schema.ALL_TRIGGERS:
            connection.execute(trigger_sql)

        # Create all indexes
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


# Export singleton instance
initial_migration = InitialSchemaMigration()
