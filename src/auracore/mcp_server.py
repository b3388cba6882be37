"""AuraCore MCP server module.

This module provides the FastMCP server instance and tool registration for
AuraCore, a persistent project and context store for AI assistants.

The server exposes tools for:
- Projects (create, list, get, update, delete)
- Context (store, query, delete)
- Tasks (create, update, get next)
- Session memory (remember, recall, forget)
- Decision log (log, history)

Each tool passes its arguments through unchanged to the matching tool class.
A successful envelope is returned as-is; a failed one is raised as ToolError
so the MCP result carries isError=true with the error message.

CRITICAL: MCP servers using stdio transport must NEVER write to stdout
as it corrupts JSON-RPC messages. All logging goes to stderr.
"""

import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from auracore.tools import ContextTools, DecisionTools, MemoryTools, ProjectTools, TaskTools

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("auracore")

NOT_INITIALIZED = {"success": False, "error": "Server not initialized"}


# ==============================================================================
# Global Tool Instances (initialized in main/__main__.py)
# ==============================================================================

project_tools: Optional[ProjectTools] = None
context_tools: Optional[ContextTools] = None
task_tools: Optional[TaskTools] = None
memory_tools: Optional[MemoryTools] = None
decision_tools: Optional[DecisionTools] = None


def set_tool_instances(
    projects: Optional[ProjectTools],
    context: Optional[ContextTools],
    tasks: Optional[TaskTools],
    memory: Optional[MemoryTools],
    decisions: Optional[DecisionTools],
) -> None:
    """Set global tool instances after initialization.

    Called by __main__.py after the store is opened.
    """
    global project_tools, context_tools, task_tools, memory_tools, decision_tools
    project_tools = projects
    context_tools = context
    task_tools = tasks
    memory_tools = memory
    decision_tools = decisions


def _relay(result: dict[str, Any]) -> dict[str, Any]:
    """Return a successful envelope, raise ToolError for a failed one."""
    if not result.get("success"):
        raise ToolError(result.get("error", "Unknown error"))
    return result


# ==============================================================================
# Project Tools
# ==============================================================================


@mcp.tool(name="auracore_create_project")
async def create_project(
    name: str,
    description: Optional[str] = None,
    type: Optional[str] = None,
    workspace_path: Optional[str] = None,
) -> dict[str, Any]:
    """Create a new project to track work. Projects contain tasks and context.

    Args:
        name: Project name
        description: Project description
        type: feature, bugfix, refactor, spike or maintenance (default: feature)
        workspace_path: Path to workspace directory
    """
    if project_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await project_tools.create_project(
        name=name, description=description, type=type, workspace_path=workspace_path
    )
    return _relay(result)


@mcp.tool(name="auracore_list_projects")
async def list_projects(status: Optional[str] = None) -> dict[str, Any]:
    """List all projects, optionally filtered by status.

    Args:
        status: active, paused, completed or archived
    """
    if project_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await project_tools.list_projects(status=status)
    return _relay(result)


@mcp.tool(name="auracore_get_project")
async def get_project(project_id: str) -> dict[str, Any]:
    """Get detailed project information including tasks and context count.

    Args:
        project_id: Project ID
    """
    if project_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await project_tools.get_project(project_id)
    return _relay(result)


@mcp.tool(name="auracore_update_project")
async def update_project(
    project_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
) -> dict[str, Any]:
    """Update project properties (name, description, status, type).

    Args:
        project_id: Project ID
        name: New name
        description: New description
        status: active, paused, completed or archived
        type: feature, bugfix, refactor, spike or maintenance
    """
    if project_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await project_tools.update_project(
        project_id=project_id, name=name, description=description, status=status, type=type
    )
    return _relay(result)


@mcp.tool(name="auracore_delete_project")
async def delete_project(project_id: str) -> dict[str, Any]:
    """Delete a project along with its tasks and project-scoped context.

    Args:
        project_id: Project ID
    """
    if project_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await project_tools.delete_project(project_id)
    return _relay(result)


# ==============================================================================
# Context Tools
# ==============================================================================


@mcp.tool(name="auracore_store_context")
async def store_context(
    type: str,
    name: str,
    content: str,
    project_id: Optional[str] = None,
    category: Optional[str] = None,
    priority: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Store business context (rules, patterns, conventions, decisions).

    This helps maintain persistent knowledge across conversations.

    Args:
        type: business_rule, pattern, convention, glossary, document or decision
        name: Context name/title
        content: Context content (detailed description)
        project_id: Associate with project (omit for global context)
        category: Category for organization
        priority: critical, high, medium or low
        metadata: Optional additional metadata
    """
    if context_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await context_tools.store_context(
        type=type,
        name=name,
        content=content,
        project_id=project_id,
        category=category,
        priority=priority,
        metadata=metadata,
    )
    return _relay(result)


@mcp.tool(name="auracore_query_context")
async def query_context(
    project_id: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
) -> dict[str, Any]:
    """Query stored context by project, type, category, or search term.

    Use this to retrieve relevant business rules and patterns.

    Args:
        project_id: Filter by project (global context is always included)
        type: business_rule, pattern, convention, glossary, document or decision
        category: Filter by category
        search: Search in name and content
        limit: Max results (default 20)
    """
    if context_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await context_tools.query_context(
        project_id=project_id, type=type, category=category, search=search, limit=limit
    )
    return _relay(result)


@mcp.tool(name="auracore_delete_context")
async def delete_context(context_id: str) -> dict[str, Any]:
    """Delete a context entry by ID.

    Args:
        context_id: Context ID to delete
    """
    if context_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await context_tools.delete_context(context_id)
    return _relay(result)


# ==============================================================================
# Task Tools
# ==============================================================================


@mcp.tool(name="auracore_create_task")
async def create_task(
    project_id: str,
    title: str,
    description: Optional[str] = None,
    priority: Optional[str] = None,
    type: Optional[str] = None,
    depends_on: Optional[list[str]] = None,
    estimated_time: Optional[str] = None,
) -> dict[str, Any]:
    """Create a task within a project. Tasks can have dependencies and priorities.

    Args:
        project_id: Project ID
        title: Task title
        description: Task description
        priority: critical, high, medium or low
        type: setup, implementation, testing or documentation
        depends_on: Task IDs this depends on
        estimated_time: Estimated time (e.g., "2h", "1d")
    """
    if task_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await task_tools.create_task(
        project_id=project_id,
        title=title,
        description=description,
        priority=priority,
        type=type,
        depends_on=depends_on,
        estimated_time=estimated_time,
    )
    return _relay(result)


@mcp.tool(name="auracore_update_task")
async def update_task(
    task_id: str,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    description: Optional[str] = None,
) -> dict[str, Any]:
    """Update task status, priority, or description.

    Args:
        task_id: Task ID
        status: pending, in_progress, completed or blocked
        priority: critical, high, medium or low
        description: Updated description
    """
    if task_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await task_tools.update_task(
        task_id=task_id, status=status, priority=priority, description=description
    )
    return _relay(result)


@mcp.tool(name="auracore_get_next_tasks")
async def get_next_tasks(project_id: str, limit: Optional[int] = None) -> dict[str, Any]:
    """Get recommended next tasks for a project based on priority and status.

    Args:
        project_id: Project ID
        limit: Max tasks to return (default 3)
    """
    if task_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await task_tools.get_next_tasks(project_id=project_id, limit=limit)
    return _relay(result)


# ==============================================================================
# Session Memory Tools
# ==============================================================================


@mcp.tool(name="auracore_remember")
async def remember(
    key: str,
    value: str,
    session_id: Optional[str] = None,
    ttl_minutes: Optional[float] = None,
) -> dict[str, Any]:
    """Store a key-value pair in session memory.

    Use this to remember important information during a conversation.

    Args:
        key: Memory key
        value: Value to remember
        session_id: Session ID (default: "default")
        ttl_minutes: Time to live in minutes (no expiry if not set)
    """
    if memory_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await memory_tools.remember(
        key=key, value=value, session_id=session_id, ttl_minutes=ttl_minutes
    )
    return _relay(result)


@mcp.tool(name="auracore_recall")
async def recall(key: str, session_id: Optional[str] = None) -> dict[str, Any]:
    """Recall a value from session memory by key.

    Args:
        key: Memory key
        session_id: Session ID (default: "default")
    """
    if memory_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await memory_tools.recall(key=key, session_id=session_id)
    return _relay(result)


@mcp.tool(name="auracore_forget")
async def forget(key: str, session_id: Optional[str] = None) -> dict[str, Any]:
    """Remove a key from session memory.

    Args:
        key: Memory key to forget
        session_id: Session ID (default: "default")
    """
    if memory_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await memory_tools.forget(key=key, session_id=session_id)
    return _relay(result)


# ==============================================================================
# Decision Log Tools
# ==============================================================================


@mcp.tool(name="auracore_log_decision")
async def log_decision(
    decision_type: str,
    decision: str,
    project_id: Optional[str] = None,
    input_context: Optional[str] = None,
    confidence: Optional[float] = None,
    reasoning: Optional[str] = None,
) -> dict[str, Any]:
    """Log a decision made during development.

    Records what was decided and why, so later work stays consistent.

    Args:
        decision_type: Type of decision (e.g., "architecture", "implementation", "refactor")
        decision: The decision made
        project_id: Associated project
        input_context: Context that led to this decision
        confidence: Confidence level 0-1
        reasoning: Reasoning behind the decision
    """
    if decision_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await decision_tools.log_decision(
        decision_type=decision_type,
        decision=decision,
        project_id=project_id,
        input_context=input_context,
        confidence=confidence,
        reasoning=reasoning,
    )
    return _relay(result)


@mcp.tool(name="auracore_get_decisions")
async def get_decisions(project_id: Optional[str] = None, limit: Optional[int] = None) -> dict[str, Any]:
    """Get decision history. Use this to review past decisions and maintain consistency.

    Args:
        project_id: Filter by project
        limit: Max results (default 10)
    """
    if decision_tools is None:
        return _relay(NOT_INITIALIZED)

    result = await decision_tools.get_decision_history(project_id=project_id, limit=limit)
    return _relay(result)
