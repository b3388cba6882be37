"""Tests for ProjectTools.

This module tests project operations through the tool layer:
- create_project defaults and validation
- list_projects ordering and status filter
- get_project with tasks and context_count
- update_project partial updates and failure messages
- delete_project cascading to tasks and scoped context
"""

import asyncio
from unittest.mock import patch

from auracore.errors import StorageError
from auracore.storage import StoreEngine
from auracore.storage import engine as engine_module
from auracore.tools import ContextTools, DecisionTools, ProjectTools, TaskTools


def _create(tools: ProjectTools, **kwargs) -> dict:
    result = asyncio.run(tools.create_project(**kwargs))
    assert result["success"] is True, result
    return result["data"]["project"]


class TestCreateProject:
    """Test project creation."""

    def test_create_defaults(self, project_tools: ProjectTools) -> None:
        project = _create(project_tools, name="Site")

        assert project["name"] == "Site"
        assert project["type"] == "feature"
        assert project["status"] == "active"
        assert project["description"] is None
        assert project["created_at"] == project["updated_at"]
        assert len(project["id"]) == 36

    def test_create_all_fields(self, project_tools: ProjectTools) -> None:
        project = _create(
            project_tools,
            name="Fix login",
            description="Session cookie bug",
            type="bugfix",
            workspace_path="/work/site",
        )

        assert project["type"] == "bugfix"
        assert project["description"] == "Session cookie bug"
        assert project["workspace_path"] == "/work/site"

    def test_create_unique_ids(self, project_tools: ProjectTools) -> None:
        first = _create(project_tools, name="A")
        second = _create(project_tools, name="A")
        assert first["id"] != second["id"]

    def test_create_empty_name_fails(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.create_project(name=""))

        assert result["success"] is False
        assert "name" in result["error"]

    def test_create_invalid_type_fails(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.create_project(name="Site", type="epic"))

        assert result["success"] is False
        assert "type" in result["error"]

    def test_storage_failure_becomes_envelope(self, project_tools: ProjectTools, store: StoreEngine) -> None:
        with patch.object(store, "execute", side_effect=StorageError("disk full")):
            result = asyncio.run(project_tools.create_project(name="Site"))

        assert result == {"success": False, "error": "disk full"}

    def test_failed_persist_leaves_no_project(self, project_tools: ProjectTools, store: StoreEngine) -> None:
        """Test that a create whose write to disk fails is not visible afterwards."""
        with patch.object(engine_module.os, "replace", side_effect=OSError("disk full")):
            result = asyncio.run(project_tools.create_project(name="Ghost"))

        assert result["success"] is False
        assert "disk full" in result["error"]
        listed = asyncio.run(project_tools.list_projects())
        assert listed["data"]["projects"] == []


class TestListProjects:
    def test_list_empty(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.list_projects())

        assert result == {"success": True, "data": {"projects": [], "total": 0}}

    def test_list_most_recently_updated_first(self, project_tools: ProjectTools) -> None:
        first = _create(project_tools, name="First")
        second = _create(project_tools, name="Second")
        asyncio.run(project_tools.update_project(first["id"], description="touched"))

        result = asyncio.run(project_tools.list_projects())

        names = [p["name"] for p in result["data"]["projects"]]
        assert names[0] == "First"
        assert set(names) == {"First", "Second"}
        assert result["data"]["total"] == 2
        assert second["id"] in {p["id"] for p in result["data"]["projects"]}

    def test_list_by_status(self, project_tools: ProjectTools) -> None:
        active = _create(project_tools, name="Active")
        paused = _create(project_tools, name="Paused")
        asyncio.run(project_tools.update_project(paused["id"], status="paused"))

        result = asyncio.run(project_tools.list_projects(status="paused"))

        assert [p["id"] for p in result["data"]["projects"]] == [paused["id"]]
        assert active["id"] not in [p["id"] for p in result["data"]["projects"]]

    def test_list_invalid_status(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.list_projects(status="sleeping"))
        assert result["success"] is False


class TestGetProject:
    def test_get_with_tasks_and_context(
        self, project_tools: ProjectTools, task_tools: TaskTools, context_tools: ContextTools
    ) -> None:
        project = _create(project_tools, name="Site")
        asyncio.run(task_tools.create_task(project_id=project["id"], title="One"))
        asyncio.run(task_tools.create_task(project_id=project["id"], title="Two"))
        asyncio.run(
            context_tools.store_context(
                type="pattern", name="Repo", content="Use repositories", project_id=project["id"]
            )
        )
        asyncio.run(context_tools.store_context(type="convention", name="Global", content="g"))

        result = asyncio.run(project_tools.get_project(project["id"]))

        assert result["success"] is True
        data = result["data"]
        assert data["project"]["id"] == project["id"]
        assert [t["title"] for t in data["tasks"]] == ["One", "Two"]
        assert data["context_count"] == 1

    def test_get_missing(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.get_project("nope"))
        assert result == {"success": False, "error": "Project not found"}


class TestUpdateProject:
    def test_update_changes_only_given_fields(self, project_tools: ProjectTools) -> None:
        project = _create(project_tools, name="Site", description="Original")

        result = asyncio.run(project_tools.update_project(project["id"], status="completed"))

        updated = result["data"]["project"]
        assert updated["status"] == "completed"
        assert updated["description"] == "Original"
        assert updated["name"] == "Site"
        assert updated["created_at"] == project["created_at"]
        assert updated["updated_at"] >= project["updated_at"]

    def test_update_can_clear_description(self, project_tools: ProjectTools) -> None:
        project = _create(project_tools, name="Site", description="Original")

        result = asyncio.run(project_tools.update_project(project["id"], description=""))

        assert result["data"]["project"]["description"] == ""

    def test_update_no_fields(self, project_tools: ProjectTools) -> None:
        project = _create(project_tools, name="Site")

        result = asyncio.run(project_tools.update_project(project["id"]))

        assert result == {"success": False, "error": "No updates provided"}

    def test_update_no_fields_checked_before_existence(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.update_project("nope"))
        assert result["error"] == "No updates provided"

    def test_update_missing_project(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.update_project("nope", name="X"))
        assert result == {"success": False, "error": "Project not found"}

    def test_update_invalid_status(self, project_tools: ProjectTools) -> None:
        project = _create(project_tools, name="Site")

        result = asyncio.run(project_tools.update_project(project["id"], status="gone"))

        assert result["success"] is False
        assert "status" in result["error"]


class TestDeleteProject:
    def test_delete_cascades(
        self,
        project_tools: ProjectTools,
        task_tools: TaskTools,
        context_tools: ContextTools,
        decision_tools: DecisionTools,
        store: StoreEngine,
    ) -> None:
        project = _create(project_tools, name="Site")
        pid = project["id"]
        asyncio.run(task_tools.create_task(project_id=pid, title="One"))
        asyncio.run(context_tools.store_context(type="pattern", name="P", content="c", project_id=pid))
        asyncio.run(context_tools.store_context(type="convention", name="G", content="c"))
        logged = asyncio.run(decision_tools.log_decision(decision_type="a", decision="b", project_id=pid))

        result = asyncio.run(project_tools.delete_project(pid))

        assert result == {"success": True, "data": {"deleted_id": pid}}
        assert store.query_all("SELECT id FROM tasks") == []
        assert [r["name"] for r in store.query_all("SELECT name FROM context")] == ["G"]
        decision = store.query_one(
            "SELECT project_id FROM decision_log WHERE id = ?", [logged["data"]["decision_id"]]
        )
        assert decision == {"project_id": None}

    def test_delete_missing(self, project_tools: ProjectTools) -> None:
        result = asyncio.run(project_tools.delete_project("nope"))
        assert result == {"success": False, "error": "Project not found"}
