"""Storage layer for AuraCore.

This module provides the persistence and query layer:
- StoreEngine: in-memory SQLite database persisted to one file on every write
- Schema: five record tables plus lookup indexes, created idempotently
- Query construction: parameterized filters and ordering per operation

Example:
    >>> from auracore.storage import StoreEngine, next_tasks_query
    >>> store = StoreEngine(Path("/tmp/auracore.db")).open()
    >>> sql, params = next_tasks_query("project-id").build()
    >>> tasks = store.query_all(sql, params)
"""

from auracore.storage.engine import StoreEngine
from auracore.storage.query import (
    NOW,
    AnyOf,
    OrderKey,
    Predicate,
    SelectQuery,
    by_id_query,
    context_query,
    count_query,
    decision_history_query,
    delete_statement,
    escape_like,
    insert_statement,
    next_tasks_query,
    project_list_query,
    project_tasks_query,
    recall_query,
    update_statement,
    upsert_statement,
    utc_after,
    utc_now,
)
from auracore.storage.schema import INDEXES, TABLES, ensure_schema

__all__ = [
    "StoreEngine",
    "ensure_schema",
    "TABLES",
    "INDEXES",
    "NOW",
    "Predicate",
    "AnyOf",
    "OrderKey",
    "SelectQuery",
    "by_id_query",
    "context_query",
    "count_query",
    "decision_history_query",
    "delete_statement",
    "escape_like",
    "insert_statement",
    "next_tasks_query",
    "project_list_query",
    "project_tasks_query",
    "recall_query",
    "update_statement",
    "upsert_statement",
    "utc_after",
    "utc_now",
]
