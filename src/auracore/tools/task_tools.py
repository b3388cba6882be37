"""Task tools for the AuraCore MCP server.

This module provides MCP tools for task operations:
- create_task: Create a task within a project
- update_task: Change status, priority or description
- get_next_tasks: Recommend what to work on next

Next tasks are pending or in-progress tasks ordered by priority
(critical first), then by age (oldest first).
"""

import json
import logging
import uuid
from typing import Any, Optional

from auracore.errors import NotFoundError, ValidationError
from auracore.storage import (
    Predicate,
    StoreEngine,
    by_id_query,
    insert_statement,
    next_tasks_query,
    update_statement,
    utc_now,
)
from auracore.types import CreateTaskInput, NextTasksInput, Task, TaskStatus, UpdateTaskInput

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class TaskTools:
    """Tool implementations for task operations.

    Args:
        store: Opened StoreEngine

    Example:
        >>> tools = TaskTools(store)
        >>> created = await tools.create_task(project_id=pid, title="Auth", priority="high")
        >>> result = await tools.get_next_tasks(pid)
        >>> result["data"]["tasks"][0]["title"]
        'Auth'
    """

    def __init__(self, store: StoreEngine) -> None:
        self._store = store

    def _fetch(self, task_id: str) -> Optional[Task]:
        row = self._store.query_one(*by_id_query("tasks", task_id).build())
        return Task.from_row(row) if row else None

    async def create_task(
        self,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        type: Optional[str] = None,
        depends_on: Optional[list[str]] = None,
        estimated_time: Optional[str] = None,
    ) -> dict[str, Any]:
        """Create a pending task.

        depends_on is stored as given; the referenced task IDs are not checked.

        Args:
            project_id: Owning project
            title: Task title
            description: Task description
            priority: critical, high, medium (default) or low
            type: setup, implementation, testing or documentation
            depends_on: Task IDs this task depends on
            estimated_time: Free-form estimate such as "2h" or "1d"

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with the stored task
            - error: Error message if operation failed
        """
        try:
            params = CreateTaskInput.parse(
                project_id=project_id,
                title=title,
                description=description,
                priority=priority,
                type=type,
                depends_on=depends_on,
                estimated_time=estimated_time,
            )

            if self._store.query_one(*by_id_query("projects", params.project_id).build()) is None:
                raise NotFoundError("Project not found")

            task_id = str(uuid.uuid4())
            now = utc_now()
            self._store.execute(
                *insert_statement(
                    "tasks",
                    {
                        "id": task_id,
                        "project_id": params.project_id,
                        "title": params.title,
                        "description": params.description,
                        "status": TaskStatus.PENDING.value,
                        "priority": params.priority,
                        "type": params.type,
                        "depends_on": (
                            json.dumps(params.depends_on) if params.depends_on is not None else None
                        ),
                        "estimated_time": params.estimated_time,
                        "created_at": now,
                        "updated_at": now,
                    },
                )
            )

            task = self._fetch(task_id)
            logger.info(f"Created task {task_id} in project {params.project_id}")
            return {"success": True, "data": {"task": task.to_dict()}}

        except (NotFoundError, ValidationError) as e:
            logger.warning(f"create_task rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"create_task failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def update_task(
        self,
        task_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict[str, Any]:
        """Update only the supplied task fields and refresh updated_at.

        Setting status to "completed" stamps completed_at. Moving to any other
        status leaves an earlier completed_at in place.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with the updated task
            - error: "No updates provided", "Task not found" or another failure
        """
        try:
            params = UpdateTaskInput.parse(
                task_id=task_id,
                status=status,
                priority=priority,
                description=description,
            )
            updates = params.updates()
            if not updates:
                raise ValidationError("No updates provided")

            if self._fetch(params.task_id) is None:
                raise NotFoundError("Task not found")

            now = utc_now()
            if updates.get("status") == TaskStatus.COMPLETED.value:
                updates["completed_at"] = now
            updates["updated_at"] = now

            self._store.execute(
                *update_statement("tasks", updates, Predicate("id", "=", params.task_id))
            )

            task = self._fetch(params.task_id)
            logger.info(f"Updated task {params.task_id}: {sorted(updates)}")
            return {"success": True, "data": {"task": task.to_dict()}}

        except (NotFoundError, ValidationError) as e:
            logger.warning(f"update_task rejected for {task_id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"update_task failed for {task_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def get_next_tasks(self, project_id: str, limit: Optional[int] = None) -> dict[str, Any]:
        """Get recommended next tasks for a project.

        Completed and blocked tasks are never returned.

        Args:
            project_id: Project to look in
            limit: Maximum tasks to return (default: 3)

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with tasks and total
            - error: Error message if operation failed
        """
        try:
            params = NextTasksInput.parse(project_id=project_id, limit=limit)
            rows = self._store.query_all(
                *next_tasks_query(params.project_id, params.limit).build()
            )
            tasks = [Task.from_row(row).to_dict() for row in rows]
            return {"success": True, "data": {"tasks": tasks, "total": len(tasks)}}

        except ValidationError as e:
            logger.warning(f"get_next_tasks rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"get_next_tasks failed for {project_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}
