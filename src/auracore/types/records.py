"""Stored record types for AuraCore.

Each model mirrors one table. from_row() decodes the columns SQLite keeps as
text or integers (depends_on and metadata as JSON, was_correct as 0/1) and
to_dict() produces the JSON-safe payload returned by the tools.

Enum-valued columns are kept as plain strings here: a record read back from
an existing file is returned as stored, validation happens on input.
"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


def _decode_json(value: Optional[str], column: str) -> Any:
    if value is None or value == "":
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"Undecodable JSON in column {column}: {value!r}")
        return None


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "_Record":
        return cls(**row)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Project(_Record):
    """A tracked unit of work that owns tasks and scoped context."""

    id: str
    name: str
    description: Optional[str] = None
    type: str = "feature"
    status: str = "active"
    workspace_path: Optional[str] = None
    created_at: str
    updated_at: str


class ContextEntry(_Record):
    """Stored business knowledge; project_id None means global."""

    id: str
    project_id: Optional[str] = None
    type: str
    name: str
    content: str
    category: Optional[str] = None
    priority: str = "medium"
    metadata: Optional[dict[str, Any]] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ContextEntry":
        data = dict(row)
        data["metadata"] = _decode_json(data.get("metadata"), "context.metadata")
        return cls(**data)


class Task(_Record):
    """A unit of work inside a project.

    depends_on holds task ids in the order given; they are not checked
    against existing tasks.
    """

    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    status: str = "pending"
    priority: str = "medium"
    type: Optional[str] = None
    depends_on: Optional[list[str]] = None
    estimated_time: Optional[str] = None
    created_at: str
    updated_at: str
    completed_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Task":
        data = dict(row)
        data["depends_on"] = _decode_json(data.get("depends_on"), "tasks.depends_on")
        return cls(**data)


class SessionMemory(_Record):
    id: str
    session_id: str
    key: str
    value: str
    created_at: str
    expires_at: Optional[str] = None


class DecisionLog(_Record):
    """An append-only record of a decision and its rationale."""

    id: str
    project_id: Optional[str] = None
    decision_type: str
    input_context: Optional[str] = None
    decision: str
    confidence: Optional[float] = None
    reasoning: Optional[str] = None
    was_correct: Optional[bool] = None
    created_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "DecisionLog":
        data = dict(row)
        if data.get("was_correct") is not None:
            data["was_correct"] = bool(data["was_correct"])
        return cls(**data)
