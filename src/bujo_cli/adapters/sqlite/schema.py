"""Database schema definitions for the local SQLite journal.

Datetimes are stored as fixed-width UTC ISO-8601 strings
(``YYYY-MM-DDTHH:MM:SS.ffffff+00:00``) so that string comparison in SQL is
the same as temporal comparison.
"""

from __future__ import annotations

SCHEMA_VERSION = 1

# Tasks table - the journal entries
CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    content TEXT NOT NULL,
    note TEXT,
    signifier TEXT NOT NULL DEFAULT 'task' CHECK (signifier IN (
        'task', 'event', 'completed', 'migrated_backlog', 'migrated_future',
        'note', 'priority_marker', 'question', 'tag_marker'
    )),
    status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN (
        'pending', 'completed', 'migrated_back', 'migrated_future'
    )),
    due_date DATETIME,
    priority INTEGER CHECK (priority IS NULL OR priority BETWEEN 1 AND 3),
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    completed_at DATETIME,
    original_date DATETIME,
    migrated_from DATETIME,
    migrated_to DATETIME,
    parent_id TEXT,
    FOREIGN KEY (parent_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

# Tags in display order
CREATE_TASK_TAGS_TABLE = """
CREATE TABLE IF NOT EXISTS task_tags (
    task_id TEXT NOT NULL,
    tag TEXT NOT NULL,
    position INTEGER NOT NULL,
    PRIMARY KEY (task_id, tag),
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

CREATE_TASK_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_status ON tasks(owner_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_completed_at ON tasks(completed_at)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks(parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_tags_tag ON task_tags(tag)",
]

ALL_TABLES = [CREATE_TASKS_TABLE, CREATE_TASK_TAGS_TABLE]

ALL_INDEXES = CREATE_TASK_INDEXES

# Columns of the tasks table, in the order the repository reads them
TASK_COLUMNS = (
    "id",
    "owner_id",
    "content",
    "note",
    "signifier",
    "status",
    "due_date",
    "priority",
    "created_at",
    "updated_at",
    "completed_at",
    "original_date",
    "migrated_from",
    "migrated_to",
    "parent_id",
)

DATETIME_COLUMNS = frozenset(
    {
        "due_date",
        "created_at",
        "updated_at",
        "completed_at",
        "original_date",
        "migrated_from",
        "migrated_to",
    }
)
