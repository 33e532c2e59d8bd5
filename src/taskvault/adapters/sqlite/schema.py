"""Database schema definitions for the local task store.

Instants are stored as integer epoch milliseconds, booleans as 0/1.
Instances, properties and search index rows belong to their task and are
removed with it through ON DELETE CASCADE.
"""

from __future__ import annotations

# Schema version tracking
SCHEMA_VERSION = 1

# Task lists table
CREATE_TASK_LISTS_TABLE = """
CREATE TABLE IF NOT EXISTS task_lists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    color TEXT,
    account_name TEXT NOT NULL,
    account_type TEXT NOT NULL,
    visible BOOLEAN DEFAULT 1,
    sync_enabled BOOLEAN DEFAULT 1,
    owner TEXT,
    access_level INTEGER,
    sync_id TEXT,
    sync_version TEXT,
    dirty BOOLEAN DEFAULT 0
)
"""

# Tasks table
CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    list_id INTEGER NOT NULL,
    title TEXT,
    description TEXT,
    location TEXT,
    dtstart INTEGER,
    due INTEGER,
    duration TEXT,
    tz TEXT,
    is_allday BOOLEAN DEFAULT 0,
    status INTEGER DEFAULT 0,
    percent_complete INTEGER,
    priority INTEGER,
    classification INTEGER,
    completed INTEGER,
    completed_is_allday BOOLEAN DEFAULT 0,
    created INTEGER,
    last_modified INTEGER,
    is_new BOOLEAN DEFAULT 1,
    is_closed BOOLEAN DEFAULT 0,
    has_alarms BOOLEAN DEFAULT 0,
    has_properties BOOLEAN DEFAULT 0,
    deleted BOOLEAN DEFAULT 0,
    dirty BOOLEAN DEFAULT 0,
    uid TEXT,
    original_instance_id INTEGER,
    original_instance_sync_id TEXT,
    original_instance_time INTEGER,
    original_instance_allday BOOLEAN,
    rrule TEXT,
    rdate TEXT,
    exdate TEXT,
    sync_id TEXT,
    sync_version TEXT,
    sync1 TEXT,
    sync2 TEXT,
    sync3 TEXT,
    sync4 TEXT,
    sync5 TEXT,
    sync6 TEXT,
    sync7 TEXT,
    sync8 TEXT,
    FOREIGN KEY (list_id) REFERENCES task_lists(id) ON DELETE CASCADE
)
"""

# Instances table - one scheduling projection per task
CREATE_INSTANCES_TABLE = """
CREATE TABLE IF NOT EXISTS instances (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id INTEGER NOT NULL UNIQUE,
    instance_start INTEGER,
    instance_due INTEGER,
    instance_duration INTEGER,
    instance_start_sorting INTEGER,
    instance_due_sorting INTEGER,
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

# Extended properties (categories, comments, alarms)
CREATE_PROPERTIES_TABLE = """
CREATE TABLE IF NOT EXISTS properties (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id INTEGER NOT NULL,
    mimetype TEXT NOT NULL,
    data0 TEXT,
    data1 TEXT,
    data2 TEXT,
    data3 TEXT,
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

# Search index: distinct n-grams
CREATE_FTS_NGRAM_TABLE = """
CREATE TABLE IF NOT EXISTS fts_ngram (
    ngram_id INTEGER PRIMARY KEY AUTOINCREMENT,
    ngram_text TEXT NOT NULL,
    UNIQUE (ngram_text) ON CONFLICT IGNORE
)
"""

# Search index: task <-> n-gram associations. property_id is 0 for
# title/description entries so the unique key also covers them.
CREATE_FTS_CONTENT_TABLE = """
CREATE TABLE IF NOT EXISTS fts_content (
    task_id INTEGER NOT NULL,
    ngram_id INTEGER NOT NULL,
    property_id INTEGER NOT NULL DEFAULT 0,
    type TEXT NOT NULL,
    UNIQUE (task_id, type, property_id, ngram_id) ON CONFLICT IGNORE,
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE,
    FOREIGN KEY (ngram_id) REFERENCES fts_ngram(ngram_id) ON DELETE CASCADE
)
"""

# Property deletion removes the property's index rows
CREATE_PROPERTY_DELETE_TRIGGER = """
CREATE TRIGGER IF NOT EXISTS property_delete_fts AFTER DELETE ON properties
BEGIN
    DELETE FROM fts_content
    WHERE task_id = OLD.task_id AND type = 'property' AND property_id = OLD.id;
END
"""

# Indexes for performance
CREATE_TASK_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_list ON tasks(list_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_original_instance ON tasks(original_instance_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_deleted ON tasks(deleted)",
]

CREATE_INSTANCE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_instances_start ON instances(instance_start_sorting)",
    "CREATE INDEX IF NOT EXISTS idx_instances_due ON instances(instance_due_sorting)",
]

CREATE_PROPERTY_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_properties_task ON properties(task_id)",
]

CREATE_FTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_fts_content_ngram ON fts_content(ngram_id)",
]

ALL_TABLES = [
    CREATE_TASK_LISTS_TABLE,
    CREATE_TASKS_TABLE,
    CREATE_INSTANCES_TABLE,
    CREATE_PROPERTIES_TABLE,
    CREATE_FTS_NGRAM_TABLE,
    CREATE_FTS_CONTENT_TABLE,
]

ALL_TRIGGERS = [
    CREATE_PROPERTY_DELETE_TRIGGER,
]

ALL_INDEXES = (
    CREATE_TASK_INDEXES
    + CREATE_INSTANCE_INDEXES
    + CREATE_PROPERTY_INDEXES
    + CREATE_FTS_INDEXES
)


def initialize_schema(connection) -> None:
    """Create all tables, triggers and indexes on a bare connection.

    Args:
        connection: sqlite3.Connection object
    """
    for create_statement in ALL_TABLES:
        connection.execute(create_statement)
    for trigger_statement in ALL_TRIGGERS:
        connection.execute(trigger_statement)
    for index_statement in ALL_INDEXES:
        connection.execute(index_statement)
    connection.commit()
