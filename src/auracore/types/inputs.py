"""Typed inputs for AuraCore operations.

One model per operation. Required fields must be present and non-blank;
optional fields left as None are treated as absent, so update operations only
touch fields the caller actually supplied.

Example:
    >>> params = UpdateTaskInput.parse(task_id="t1", status="completed")
    >>> params.updates()
    {'status': 'completed'}
"""

from typing import Annotated, Any, Optional

import pydantic
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from auracore.constants import (
    DEFAULT_CONTEXT_LIMIT,
    DEFAULT_DECISION_LIMIT,
    DEFAULT_NEXT_TASKS_LIMIT,
    DEFAULT_SESSION_ID,
)
from auracore.errors import ValidationError
from auracore.types.enums import (
    ContextType,
    Priority,
    ProjectStatus,
    ProjectType,
    TaskStatus,
    TaskType,
)


def _format_errors(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "input"
        parts.append(f"{location}: {item['msg']}")
    return "Invalid input - " + "; ".join(parts)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("cannot be empty")
    return value


RequiredText = Annotated[str, AfterValidator(_not_blank)]


class OperationInput(BaseModel):
    """Base for operation inputs."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True, validate_default=True)

    @classmethod
    def parse(cls, **values: Any) -> "OperationInput":
        """Validate keyword arguments into the model.

        None values are dropped first, so an omitted field and an explicit
        None both take the field default.

        Raises:
            ValidationError: With a message naming each offending field
        """
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except pydantic.ValidationError as e:
            raise ValidationError(_format_errors(e)) from e


class _FilterInput(OperationInput):
    """Inputs whose optional string filters treat "" as omitted."""

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value == "":
            return None
        return value


# =============================================================================
# Projects
# =============================================================================


class CreateProjectInput(OperationInput):
    name: RequiredText
    description: Optional[str] = None
    type: ProjectType = ProjectType.FEATURE
    workspace_path: Optional[str] = None


class ListProjectsInput(_FilterInput):
    status: Optional[ProjectStatus] = None


class UpdateProjectInput(OperationInput):
    project_id: RequiredText
    name: Optional[RequiredText] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    type: Optional[ProjectType] = None

    def updates(self) -> dict[str, Any]:
        """Columns supplied by the caller, excluding the key."""
        return self.model_dump(exclude={"project_id"}, exclude_none=True)


# =============================================================================
# Context
# =============================================================================


class StoreContextInput(OperationInput):
    type: ContextType
    name: RequiredText
    content: RequiredText
    project_id: Optional[str] = None
    category: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    metadata: Optional[dict[str, Any]] = None


class QueryContextInput(_FilterInput):
    project_id: Optional[str] = None
    type: Optional[ContextType] = None
    category: Optional[str] = None
    search: Optional[str] = None
    limit: int = Field(default=DEFAULT_CONTEXT_LIMIT, ge=1)


# =============================================================================
# Tasks
# =============================================================================


class CreateTaskInput(OperationInput):
    project_id: RequiredText
    title: RequiredText
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    type: Optional[TaskType] = None
    depends_on: Optional[list[str]] = None
    estimated_time: Optional[str] = None


class UpdateTaskInput(OperationInput):
    task_id: RequiredText
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    description: Optional[str] = None

    def updates(self) -> dict[str, Any]:
        """Columns supplied by the caller, excluding the key."""
        return self.model_dump(exclude={"task_id"}, exclude_none=True)


class NextTasksInput(OperationInput):
    project_id: RequiredText
    limit: int = Field(default=DEFAULT_NEXT_TASKS_LIMIT, ge=1)


# =============================================================================
# Session memory
# =============================================================================


class _SessionKeyInput(OperationInput):
    key: RequiredText
    session_id: str = DEFAULT_SESSION_ID

    @field_validator("session_id", mode="before")
    @classmethod
    def _default_session(cls, value: Any) -> Any:
        return DEFAULT_SESSION_ID if value == "" else value


class RememberInput(_SessionKeyInput):
    value: str
    ttl_minutes: Optional[float] = None


class RecallInput(_SessionKeyInput):
    pass


class ForgetInput(_SessionKeyInput):
    pass


# =============================================================================
# Decision log
# =============================================================================


class LogDecisionInput(OperationInput):
    decision_type: RequiredText
    decision: RequiredText
    project_id: Optional[str] = None
    input_context: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    reasoning: Optional[str] = None


class DecisionHistoryInput(_FilterInput):
    project_id: Optional[str] = None
    limit: int = Field(default=DEFAULT_DECISION_LIMIT, ge=1)
