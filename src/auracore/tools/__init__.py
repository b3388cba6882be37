"""MCP tools module for AuraCore.

This module provides the tool implementations for the AuraCore MCP server,
organized by record type:

- project_tools: create_project, list_projects, get_project, update_project, delete_project
- context_tools: store_context, query_context, delete_context
- task_tools: create_task, update_task, get_next_tasks
- memory_tools: remember, recall, forget
- decision_tools: log_decision, get_decision_history

Each tool class takes an opened StoreEngine in its constructor and returns
{"success": bool, "data": {...}} or {"success": False, "error": str}.

Example:
    >>> from auracore.tools import ProjectTools
    >>> projects = ProjectTools(store=store)
    >>> result = await projects.create_project(name="Site")
"""

from auracore.tools.context_tools import ContextTools
from auracore.tools.decision_tools import DecisionTools
from auracore.tools.memory_tools import MemoryTools
from auracore.tools.project_tools import ProjectTools
from auracore.tools.task_tools import TaskTools

__all__ = [
    "ProjectTools",
    "ContextTools",
    "TaskTools",
    "MemoryTools",
    "DecisionTools",
]
