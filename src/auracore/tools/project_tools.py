"""Project tools for the AuraCore MCP server.

This module provides MCP tools for project operations:
- create_project: Create a project to track work
- list_projects: List projects, optionally by status
- get_project: Project details with its tasks and context count
- update_project: Change name, description, status or type
- delete_project: Remove a project together with its tasks and scoped context
"""

import logging
import uuid
from typing import Any, Optional

from auracore.errors import NotFoundError, ValidationError
from auracore.storage import (
    Predicate,
    StoreEngine,
    by_id_query,
    count_query,
    delete_statement,
    insert_statement,
    project_list_query,
    project_tasks_query,
    update_statement,
    utc_now,
)
from auracore.types import (
    CreateProjectInput,
    ListProjectsInput,
    Project,
    Task,
    UpdateProjectInput,
)

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class ProjectTools:
    """Tool implementations for project operations.

    Args:
        store: Opened StoreEngine

    Example:
        >>> tools = ProjectTools(store)
        >>> result = await tools.create_project(name="Site")
        >>> if result["success"]:
        ...     print(result["data"]["project"]["id"])
    """

    def __init__(self, store: StoreEngine) -> None:
        self._store = store

    def _fetch(self, project_id: str) -> Optional[Project]:
        row = self._store.query_one(*by_id_query("projects", project_id).build())
        return Project.from_row(row) if row else None

    async def create_project(
        self,
        name: str,
        description: Optional[str] = None,
        type: Optional[str] = None,
        workspace_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Create a new project with status "active".

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with the stored project
            - error: Error message if operation failed
        """
        try:
            params = CreateProjectInput.parse(
                name=name,
                description=description,
                type=type,
                workspace_path=workspace_path,
            )

            project_id = str(uuid.uuid4())
            now = utc_now()
            self._store.execute(
                *insert_statement(
                    "projects",
                    {
                        "id": project_id,
                        "name": params.name,
                        "description": params.description,
                        "type": params.type,
                        "status": "active",
                        "workspace_path": params.workspace_path,
                        "created_at": now,
                        "updated_at": now,
                    },
                )
            )

            project = self._fetch(project_id)
            logger.info(f"Created project {project_id} ({params.name})")
            return {"success": True, "data": {"project": project.to_dict()}}

        except ValidationError as e:
            logger.warning(f"create_project rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"create_project failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def list_projects(self, status: Optional[str] = None) -> dict[str, Any]:
        """List projects, most recently updated first.

        Args:
            status: Optional status filter (active, paused, completed, archived)
        """
        try:
            params = ListProjectsInput.parse(status=status)
            rows = self._store.query_all(*project_list_query(params.status).build())
            projects = [Project.from_row(row).to_dict() for row in rows]
            return {"success": True, "data": {"projects": projects, "total": len(projects)}}

        except ValidationError as e:
            logger.warning(f"list_projects rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"list_projects failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def get_project(self, project_id: str) -> dict[str, Any]:
        """Get a project with all of its tasks and the count of its own context.

        Global context (no project) is not included in context_count.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with project, tasks (creation order), context_count
            - error: "Project not found" or another failure message
        """
        try:
            project = self._fetch(project_id)
            if project is None:
                raise NotFoundError("Project not found")

            rows = self._store.query_all(*project_tasks_query(project_id).build())
            count_row = self._store.query_one(
                *count_query("context", Predicate("project_id", "=", project_id))
            )

            return {
                "success": True,
                "data": {
                    "project": project.to_dict(),
                    "tasks": [Task.from_row(row).to_dict() for row in rows],
                    "context_count": count_row["count"] if count_row else 0,
                },
            }

        except NotFoundError as e:
            logger.warning(f"get_project {project_id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"get_project failed for {project_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def update_project(
        self,
        project_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Update only the supplied project fields and refresh updated_at.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with the updated project
            - error: "No updates provided", "Project not found" or another failure
        """
        try:
            params = UpdateProjectInput.parse(
                project_id=project_id,
                name=name,
                description=description,
                status=status,
                type=type,
            )
            updates = params.updates()
            if not updates:
                raise ValidationError("No updates provided")

            if self._fetch(params.project_id) is None:
                raise NotFoundError("Project not found")

            updates["updated_at"] = utc_now()
            self._store.execute(
                *update_statement(
                    "projects", updates, Predicate("id", "=", params.project_id)
                )
            )

            project = self._fetch(params.project_id)
            logger.info(f"Updated project {params.project_id}: {sorted(updates)}")
            return {"success": True, "data": {"project": project.to_dict()}}

        except (NotFoundError, ValidationError) as e:
            logger.warning(f"update_project rejected for {project_id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"update_project failed for {project_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def delete_project(self, project_id: str) -> dict[str, Any]:
        """Delete a project.

        Its tasks and project-scoped context are removed with it; decisions
        logged against it keep their row with project_id cleared.
        """
        try:
            if self._fetch(project_id) is None:
                raise NotFoundError("Project not found")

            self._store.execute(*delete_statement("projects", Predicate("id", "=", project_id)))

            logger.info(f"Deleted project {project_id}")
            return {"success": True, "data": {"deleted_id": project_id}}

        except NotFoundError as e:
            logger.warning(f"delete_project {project_id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"delete_project failed for {project_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}
