"""Tests for ContextTools.

This module tests stored business knowledge through the tool layer:
- store_context defaults, metadata and project checks
- query_context scoping, filters, search, ordering and limit
- delete_context
"""

import asyncio

import pytest

from auracore.storage import StoreEngine, insert_statement
from auracore.tools import ContextTools, ProjectTools


@pytest.fixture
def project_id(project_tools: ProjectTools) -> str:
    result = asyncio.run(project_tools.create_project(name="Site"))
    return result["data"]["project"]["id"]


def _store(tools: ContextTools, **kwargs) -> dict:
    result = asyncio.run(tools.store_context(**kwargs))
    assert result["success"] is True, result
    return result["data"]["context"]


def _names(result: dict) -> list[str]:
    return [entry["name"] for entry in result["data"]["results"]]


class TestStoreContext:
    """Test storing context entries."""

    def test_store_global_defaults(self, context_tools: ContextTools) -> None:
        entry = _store(context_tools, type="convention", name="camelCase", content="vars in camelCase")

        assert entry["project_id"] is None
        assert entry["priority"] == "medium"
        assert entry["category"] is None
        assert entry["metadata"] is None
        assert entry["created_at"] == entry["updated_at"]

    def test_store_with_project_and_metadata(self, context_tools: ContextTools, project_id: str) -> None:
        entry = _store(
            context_tools,
            type="business_rule",
            name="Refunds",
            content="Refunds within 30 days",
            project_id=project_id,
            category="billing",
            priority="critical",
            metadata={"source": "legal", "version": 2},
        )

        assert entry["project_id"] == project_id
        assert entry["category"] == "billing"
        assert entry["priority"] == "critical"
        assert entry["metadata"] == {"source": "legal", "version": 2}

    def test_store_empty_metadata_kept(self, context_tools: ContextTools) -> None:
        entry = _store(context_tools, type="pattern", name="P", content="c", metadata={})

        assert entry["metadata"] == {}

    def test_store_unknown_project(self, context_tools: ContextTools) -> None:
        result = asyncio.run(
            context_tools.store_context(type="pattern", name="P", content="c", project_id="nope")
        )
        assert result == {"success": False, "error": "Project not found"}

    def test_store_invalid_type(self, context_tools: ContextTools) -> None:
        result = asyncio.run(context_tools.store_context(type="rumor", name="P", content="c"))
        assert result["success"] is False
        assert "type" in result["error"]

    def test_store_empty_content(self, context_tools: ContextTools) -> None:
        result = asyncio.run(context_tools.store_context(type="pattern", name="P", content=""))
        assert result["success"] is False


class TestQueryContext:
    """Test filtered lookups."""

    def test_project_query_includes_global(
        self, context_tools: ContextTools, project_tools: ProjectTools, project_id: str
    ) -> None:
        other = asyncio.run(project_tools.create_project(name="Other"))["data"]["project"]["id"]
        _store(context_tools, type="pattern", name="Mine", content="c", project_id=project_id)
        _store(context_tools, type="pattern", name="Theirs", content="c", project_id=other)
        _store(context_tools, type="pattern", name="Global", content="c")

        result = asyncio.run(context_tools.query_context(project_id=project_id))

        assert sorted(_names(result)) == ["Global", "Mine"]
        assert result["data"]["total"] == 2

    def test_no_project_returns_everything(self, context_tools: ContextTools, project_id: str) -> None:
        _store(context_tools, type="pattern", name="Mine", content="c", project_id=project_id)
        _store(context_tools, type="pattern", name="Global", content="c")

        result = asyncio.run(context_tools.query_context())

        assert sorted(_names(result)) == ["Global", "Mine"]

    def test_filter_by_type_and_category(self, context_tools: ContextTools) -> None:
        _store(context_tools, type="convention", name="A", content="c", category="style")
        _store(context_tools, type="convention", name="B", content="c", category="naming")
        _store(context_tools, type="pattern", name="C", content="c", category="style")

        result = asyncio.run(context_tools.query_context(type="convention", category="style"))

        assert _names(result) == ["A"]

    def test_search_name_or_content_case_insensitive(self, context_tools: ContextTools) -> None:
        _store(context_tools, type="convention", name="camelCase", content="variables")
        _store(context_tools, type="convention", name="Indent", content="Use CamelCase classes")
        _store(context_tools, type="convention", name="Tabs", content="no tabs")

        result = asyncio.run(context_tools.query_context(search="camel"))

        assert sorted(_names(result)) == ["Indent", "camelCase"]

    def test_search_wildcards_match_literally(self, context_tools: ContextTools) -> None:
        _store(context_tools, type="document", name="Coverage", content="100% covered")
        _store(context_tools, type="document", name="Other", content="1000 lines")

        result = asyncio.run(context_tools.query_context(search="0%"))

        assert _names(result) == ["Coverage"]

    def test_ordering_priority_then_recency(self, context_tools: ContextTools, store: StoreEngine) -> None:
        rows = [
            ("low-new", "low", "2024-01-05T00:00:00.000Z"),
            ("medium-old", "medium", "2024-01-01T00:00:00.000Z"),
            ("critical", "critical", "2024-01-01T00:00:00.000Z"),
            ("medium-new", "medium", "2024-01-04T00:00:00.000Z"),
            ("high", "high", "2024-01-02T00:00:00.000Z"),
        ]
        for name, priority, updated in rows:
            store.execute(
                *insert_statement(
                    "context",
                    {
                        "id": name,
                        "type": "pattern",
                        "name": name,
                        "content": "c",
                        "priority": priority,
                        "created_at": updated,
                        "updated_at": updated,
                    },
                )
            )

        result = asyncio.run(context_tools.query_context())

        assert _names(result) == ["critical", "high", "medium-new", "medium-old", "low-new"]

    def test_limit(self, context_tools: ContextTools) -> None:
        for i in range(5):
            _store(context_tools, type="pattern", name=f"P{i}", content="c")

        result = asyncio.run(context_tools.query_context(limit=2))

        assert result["data"]["total"] == 2

    def test_default_limit_is_twenty(self, context_tools: ContextTools) -> None:
        for i in range(25):
            _store(context_tools, type="pattern", name=f"P{i}", content="c")

        result = asyncio.run(context_tools.query_context())

        assert result["data"]["total"] == 20

    def test_invalid_limit(self, context_tools: ContextTools) -> None:
        result = asyncio.run(context_tools.query_context(limit=0))
        assert result["success"] is False

    def test_no_matches(self, context_tools: ContextTools) -> None:
        result = asyncio.run(context_tools.query_context(search="nothing"))
        assert result == {"success": True, "data": {"results": [], "total": 0}}


class TestDeleteContext:
    def test_delete(self, context_tools: ContextTools) -> None:
        entry = _store(context_tools, type="pattern", name="P", content="c")

        result = asyncio.run(context_tools.delete_context(entry["id"]))

        assert result == {"success": True, "data": {"deleted_id": entry["id"]}}
        assert _names(asyncio.run(context_tools.query_context())) == []

    def test_delete_missing(self, context_tools: ContextTools) -> None:
        result = asyncio.run(context_tools.delete_context("nope"))
        assert result == {"success": False, "error": "Context not found"}
