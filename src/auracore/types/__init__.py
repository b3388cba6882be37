"""Type system for AuraCore.

- enums: value sets for project, context and task fields
- records: stored rows decoded into pydantic models
- inputs: validated per-operation inputs

Example:
    >>> from auracore.types import CreateTaskInput, Priority
    >>> params = CreateTaskInput.parse(project_id="p1", title="Auth", priority="high")
    >>> params.priority == Priority.HIGH.value
    True
"""

from auracore.types.enums import (
    ContextType,
    Priority,
    ProjectStatus,
    ProjectType,
    TaskStatus,
    TaskType,
)
from auracore.types.inputs import (
    CreateProjectInput,
    CreateTaskInput,
    DecisionHistoryInput,
    ForgetInput,
    ListProjectsInput,
    LogDecisionInput,
    NextTasksInput,
    OperationInput,
    QueryContextInput,
    RecallInput,
    RememberInput,
    StoreContextInput,
    UpdateProjectInput,
    UpdateTaskInput,
)
from auracore.types.records import ContextEntry, DecisionLog, Project, SessionMemory, Task

__all__ = [
    # Value sets
    "ContextType",
    "Priority",
    "ProjectStatus",
    "ProjectType",
    "TaskStatus",
    "TaskType",
    # Records
    "ContextEntry",
    "DecisionLog",
    "Project",
    "SessionMemory",
    "Task",
    # Inputs
    "OperationInput",
    "CreateProjectInput",
    "ListProjectsInput",
    "UpdateProjectInput",
    "StoreContextInput",
    "QueryContextInput",
    "CreateTaskInput",
    "UpdateTaskInput",
    "NextTasksInput",
    "RememberInput",
    "RecallInput",
    "ForgetInput",
    "LogDecisionInput",
    "DecisionHistoryInput",
]
