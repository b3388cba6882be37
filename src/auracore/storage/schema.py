"""Schema definition for the AuraCore store.

Five record tables and their lookup indexes. Every statement is
"create if absent" so ensure_schema() can run on every startup against a
populated file. There is no migration layer; schema changes are additive.
"""

import logging
import sqlite3

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)

TABLES: dict[str, str] = {
    "projects": """
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            type TEXT DEFAULT 'feature',
            status TEXT DEFAULT 'active',
            workspace_path TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "context": """
        CREATE TABLE IF NOT EXISTS context (
            id TEXT PRIMARY KEY,
            project_id TEXT,
            type TEXT NOT NULL,
            name TEXT NOT NULL,
            content TEXT NOT NULL,
            category TEXT,
            priority TEXT DEFAULT 'medium',
            metadata TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
        )
    """,
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT DEFAULT 'pending',
            priority TEXT DEFAULT 'medium',
            type TEXT,
            depends_on TEXT,
            estimated_time TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            completed_at TEXT,
            FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
        )
    """,
    "session_memory": """
        CREATE TABLE IF NOT EXISTS session_memory (
            id TEXT PRIMARY KEY,
            session_id TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            created_at TEXT NOT NULL,
            expires_at TEXT,
            UNIQUE(session_id, key)
        )
    """,
    "decision_log": """
        CREATE TABLE IF NOT EXISTS decision_log (
            id TEXT PRIMARY KEY,
            project_id TEXT,
            decision_type TEXT NOT NULL,
            input_context TEXT,
            decision TEXT NOT NULL,
            confidence REAL,
            reasoning TEXT,
            was_correct INTEGER,
            created_at TEXT NOT NULL,
            FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE SET NULL
        )
    """,
}

INDEXES: dict[str, str] = {
    "idx_context_project": "CREATE INDEX IF NOT EXISTS idx_context_project ON context(project_id)",
    "idx_context_type": "CREATE INDEX IF NOT EXISTS idx_context_type ON context(type)",
    "idx_tasks_project": "CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id)",
    "idx_tasks_status": "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
    "idx_session_memory_session": (
        "CREATE INDEX IF NOT EXISTS idx_session_memory_session ON session_memory(session_id)"
    ),
}


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create any missing tables and indexes.

    Args:
        conn: Open SQLite connection (in-memory working copy)
    """
    cursor = conn.cursor()

    for table in TABLES.values():
        cursor.execute(table)

    for index in INDEXES.values():
        cursor.execute(index)

    conn.commit()
    logger.debug(f"Schema ensured ({len(TABLES)} tables, {len(INDEXES)} indexes)")


def list_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the names of user tables present in the database."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
        "ORDER BY name"
    )
    return [row[0] for row in cursor.fetchall()]


def list_indexes(conn: sqlite3.Connection) -> list[str]:
    """Return the names of explicitly created indexes."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'index' AND name LIKE 'idx_%' "
        "ORDER BY name"
    )
    return [row[0] for row in cursor.fetchall()]
