"""Parameterized query construction for AuraCore.

Filters are expressed as (column, operator, value) predicates and compiled
into a WHERE clause joined by AND. Values always travel as bound parameters,
including LIMIT; only column names and operators (validated against fixed
sets) are interpolated into the statement text.

Example:
    >>> query = (
    ...     SelectQuery("tasks")
    ...     .where(Predicate("project_id", "=", "p1"))
    ...     .order_by(OrderKey("created_at"))
    ...     .limit(3)
    ... )
    >>> query.build()
    ('SELECT * FROM tasks WHERE project_id = ? ORDER BY created_at ASC LIMIT ?', ['p1', 3])
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Sequence, Union

from auracore.constants import (
    ACTIONABLE_TASK_STATUSES,
    DEFAULT_CONTEXT_LIMIT,
    DEFAULT_DECISION_LIMIT,
    DEFAULT_NEXT_TASKS_LIMIT,
    PRIORITY_RANK,
    SQL_NOW,
)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")

_COMPARISONS = {"=", "!=", "<", "<=", ">", ">="}
_OPERATORS = _COMPARISONS | {"IN", "LIKE", "IS NULL", "IS NOT NULL"}


class _Now:
    """Placeholder for the store's clock, evaluated when the statement runs."""

    def __repr__(self) -> str:
        return "NOW"


NOW = _Now()


def utc_now() -> str:
    """Current instant as ISO-8601 UTC with millisecond precision.

    Matches the format of SQL_NOW so the two compare chronologically as text.
    """
    return _format(datetime.now(timezone.utc))


def utc_after(minutes: float) -> str:
    """Instant ``minutes`` from now, in the same format as utc_now()."""
    return _format(datetime.now(timezone.utc) + timedelta(minutes=minutes))


def _format(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid column name: {name!r}")
    return name


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so ``text`` matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class Predicate:
    """A single filter: ``column operator value``."""

    column: str
    operator: str = "="
    value: Any = None

    def __post_init__(self) -> None:
        _check_identifier(self.column)
        if self.operator not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator!r}")
        if self.operator == "IN" and not self.value:
            raise ValueError("IN requires a non-empty sequence")

    def compile(self) -> tuple[str, list[Any]]:
        if self.operator in ("IS NULL", "IS NOT NULL"):
            return f"{self.column} {self.operator}", []
        if self.operator == "IN":
            placeholders = ", ".join("?" for _ in self.value)
            return f"{self.column} IN ({placeholders})", list(self.value)
        if self.operator == "LIKE":
            return f"{self.column} LIKE ? ESCAPE '\\'", [self.value]
        if self.value is NOW:
            return f"{self.column} {self.operator} {SQL_NOW}", []
        return f"{self.column} {self.operator} ?", [self.value]


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of predicates, compiled as one parenthesized condition."""

    predicates: tuple[Predicate, ...]

    def __post_init__(self) -> None:
        if not self.predicates:
            raise ValueError("AnyOf requires at least one predicate")

    def compile(self) -> tuple[str, list[Any]]:
        parts: list[str] = []
        params: list[Any] = []
        for predicate in self.predicates:
            sql, values = predicate.compile()
            parts.append(sql)
            params.extend(values)
        return "(" + " OR ".join(parts) + ")", params


Condition = Union[Predicate, AnyOf]


@dataclass(frozen=True)
class OrderKey:
    """Ordering term. With ``rank``, values are mapped to integers first."""

    column: str
    descending: bool = False
    rank: Optional[Mapping[str, int]] = None

    def __post_init__(self) -> None:
        _check_identifier(self.column)

    def compile(self) -> tuple[str, list[Any]]:
        direction = "DESC" if self.descending else "ASC"
        if not self.rank:
            return f"{self.column} {direction}", []

        params: list[Any] = []
        whens: list[str] = []
        for value, position in self.rank.items():
            whens.append("WHEN ? THEN ?")
            params.extend([value, position])
        # Unknown values sort after every ranked one
        params.append(max(self.rank.values()) + 1)
        return f"CASE {self.column} {' '.join(whens)} ELSE ? END {direction}", params


@dataclass
class SelectQuery:
    """SELECT builder over a single table."""

    table: str
    columns: Sequence[str] = ("*",)
    conditions: list[Condition] = field(default_factory=list)
    ordering: list[OrderKey] = field(default_factory=list)
    max_rows: Optional[int] = None
    counting: bool = False

    def __post_init__(self) -> None:
        _check_identifier(self.table)
        for column in self.columns:
            if column != "*":
                _check_identifier(column)

    def where(self, *conditions: Optional[Condition]) -> "SelectQuery":
        """Add conditions; ``None`` entries (omitted filters) are skipped."""
        self.conditions.extend(c for c in conditions if c is not None)
        return self

    def order_by(self, *keys: OrderKey) -> "SelectQuery":
        self.ordering.extend(keys)
        return self

    def limit(self, rows: Optional[int]) -> "SelectQuery":
        if rows is not None and (isinstance(rows, bool) or not isinstance(rows, int) or rows < 0):
            raise ValueError(f"Limit must be a non-negative integer, got {rows!r}")
        self.max_rows = rows
        return self

    def build(self) -> tuple[str, list[Any]]:
        selected = "COUNT(*) AS count" if self.counting else ", ".join(self.columns)
        sql = f"SELECT {selected} FROM {self.table}"
        params: list[Any] = []

        if self.conditions:
            clauses = []
            for condition in self.conditions:
                clause, values = condition.compile()
                clauses.append(clause)
                params.extend(values)
            sql += " WHERE " + " AND ".join(clauses)

        if self.ordering:
            terms = []
            for key in self.ordering:
                term, values = key.compile()
                terms.append(term)
                params.extend(values)
            sql += " ORDER BY " + ", ".join(terms)

        if self.max_rows is not None:
            sql += " LIMIT ?"
            params.append(self.max_rows)

        return sql, params


def count_query(table: str, *conditions: Optional[Condition]) -> tuple[str, list[Any]]:
    """Build ``SELECT COUNT(*) AS count`` with the given filters."""
    return SelectQuery(table, counting=True).where(*conditions).build()


def insert_statement(table: str, values: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Build a parameterized INSERT for ``values``."""
    _check_identifier(table)
    columns = [_check_identifier(c) for c in values]
    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    return sql, list(values.values())


def upsert_statement(
    table: str, values: Mapping[str, Any], conflict: Sequence[str], refresh: Sequence[str]
) -> tuple[str, list[Any]]:
    """Build an INSERT that updates ``refresh`` columns when ``conflict`` is taken.

    The row keeps its original id on update.
    """
    sql, params = insert_statement(table, values)
    target = ", ".join(_check_identifier(c) for c in conflict)
    assignments = ", ".join(f"{_check_identifier(c)} = excluded.{c}" for c in refresh)
    return f"{sql} ON CONFLICT({target}) DO UPDATE SET {assignments}", params


def update_statement(
    table: str, values: Mapping[str, Any], key: Predicate
) -> tuple[str, list[Any]]:
    """Build a parameterized UPDATE setting ``values`` where ``key`` holds."""
    if not values:
        raise ValueError("UPDATE requires at least one column")
    _check_identifier(table)
    assignments = ", ".join(f"{_check_identifier(c)} = ?" for c in values)
    where, key_params = key.compile()
    return f"UPDATE {table} SET {assignments} WHERE {where}", list(values.values()) + key_params


def delete_statement(table: str, *conditions: Condition) -> tuple[str, list[Any]]:
    """Build a parameterized DELETE; at least one condition is required."""
    if not conditions:
        raise ValueError("DELETE requires at least one condition")
    _check_identifier(table)
    clauses = []
    params: list[Any] = []
    for condition in conditions:
        clause, values = condition.compile()
        clauses.append(clause)
        params.extend(values)
    return f"DELETE FROM {table} WHERE {' AND '.join(clauses)}", params


# =============================================================================
# Per-operation queries
# =============================================================================


def _optional_eq(column: str, value: Optional[Any]) -> Optional[Predicate]:
    return Predicate(column, "=", value) if value is not None else None


def context_query(
    project_id: Optional[str] = None,
    context_type: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = DEFAULT_CONTEXT_LIMIT,
) -> SelectQuery:
    """Context lookup: project-scoped plus global, most important first."""
    project_scope = None
    if project_id is not None:
        project_scope = AnyOf(
            (Predicate("project_id", "=", project_id), Predicate("project_id", "IS NULL"))
        )

    text_match = None
    if search is not None:
        pattern = f"%{escape_like(search)}%"
        text_match = AnyOf(
            (Predicate("name", "LIKE", pattern), Predicate("content", "LIKE", pattern))
        )

    return (
        SelectQuery("context")
        .where(
            project_scope,
            _optional_eq("type", context_type),
            _optional_eq("category", category),
            text_match,
        )
        .order_by(
            OrderKey("priority", rank=PRIORITY_RANK),
            OrderKey("updated_at", descending=True),
            OrderKey("rowid"),
        )
        .limit(limit)
    )


def next_tasks_query(project_id: str, limit: int = DEFAULT_NEXT_TASKS_LIMIT) -> SelectQuery:
    """Actionable tasks for a project, highest priority then oldest first."""
    return (
        SelectQuery("tasks")
        .where(
            Predicate("project_id", "=", project_id),
            Predicate("status", "IN", ACTIONABLE_TASK_STATUSES),
        )
        .order_by(
            OrderKey("priority", rank=PRIORITY_RANK),
            OrderKey("created_at"),
            OrderKey("rowid"),
        )
        .limit(limit)
    )


def project_tasks_query(project_id: str) -> SelectQuery:
    """All tasks of a project in creation order."""
    return (
        SelectQuery("tasks")
        .where(Predicate("project_id", "=", project_id))
        .order_by(OrderKey("created_at"), OrderKey("rowid"))
    )


def project_list_query(status: Optional[str] = None) -> SelectQuery:
    """Projects, most recently updated first."""
    return (
        SelectQuery("projects")
        .where(_optional_eq("status", status))
        .order_by(OrderKey("updated_at", descending=True), OrderKey("rowid"))
    )


def decision_history_query(
    project_id: Optional[str] = None, limit: int = DEFAULT_DECISION_LIMIT
) -> SelectQuery:
    """Decisions, newest first."""
    return (
        SelectQuery("decision_log")
        .where(_optional_eq("project_id", project_id))
        .order_by(OrderKey("created_at", descending=True), OrderKey("rowid", descending=True))
        .limit(limit)
    )


def recall_query(session_id: str, key: str) -> SelectQuery:
    """Unexpired session memory entry for (session_id, key)."""
    return SelectQuery("session_memory").where(
        Predicate("session_id", "=", session_id),
        Predicate("key", "=", key),
        AnyOf((Predicate("expires_at", "IS NULL"), Predicate("expires_at", ">", NOW))),
    )


def by_id_query(table: str, record_id: str) -> SelectQuery:
    """Single record lookup by primary key."""
    return SelectQuery(table).where(Predicate("id", "=", record_id))
