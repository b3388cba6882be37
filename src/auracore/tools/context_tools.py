"""Context tools for the AuraCore MCP server.

This module provides MCP tools for stored business knowledge:
- store_context: Store a rule, pattern, convention, glossary term, document or decision
- query_context: Retrieve context by project, type, category or search text
- delete_context: Remove a context entry by ID

Context without a project is global and is returned alongside any
project-scoped query.
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
    context_query,
    delete_statement,
    insert_statement,
    utc_now,
)
from auracore.types import ContextEntry, QueryContextInput, StoreContextInput

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class ContextTools:
    """Tool implementations for context operations.

    Args:
        store: Opened StoreEngine

    Example:
        >>> tools = ContextTools(store)
        >>> await tools.store_context(type="convention", name="camelCase",
        ...                           content="vars in camelCase")
        >>> result = await tools.query_context(search="camel")
        >>> [entry["name"] for entry in result["data"]["results"]]
        ['camelCase']
    """

    def __init__(self, store: StoreEngine) -> None:
        self._store = store

    async def store_context(
        self,
        type: str,
        name: str,
        content: str,
        project_id: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Store a context entry.

        Args:
            type: business_rule, pattern, convention, glossary, document or decision
            name: Short title
            content: Full text
            project_id: Owning project; omit for global context
            category: Free-form grouping label
            priority: critical, high, medium (default) or low
            metadata: Optional additional metadata

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with the stored context entry
            - error: Error message if operation failed
        """
        try:
            params = StoreContextInput.parse(
                type=type,
                name=name,
                content=content,
                project_id=project_id,
                category=category,
                priority=priority,
                metadata=metadata,
            )

            if params.project_id is not None:
                if self._store.query_one(*by_id_query("projects", params.project_id).build()) is None:
                    raise NotFoundError("Project not found")

            context_id = str(uuid.uuid4())
            now = utc_now()
            self._store.execute(
                *insert_statement(
                    "context",
                    {
                        "id": context_id,
                        "project_id": params.project_id,
                        "type": params.type,
                        "name": params.name,
                        "content": params.content,
                        "category": params.category,
                        "priority": params.priority,
                        "metadata": (
                            json.dumps(params.metadata) if params.metadata is not None else None
                        ),
                        "created_at": now,
                        "updated_at": now,
                    },
                )
            )

            row = self._store.query_one(*by_id_query("context", context_id).build())
            logger.info(f"Stored context {context_id} ({params.type}: {params.name})")
            return {"success": True, "data": {"context": ContextEntry.from_row(row).to_dict()}}

        except (NotFoundError, ValidationError) as e:
            logger.warning(f"store_context rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"store_context failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def query_context(
        self,
        project_id: Optional[str] = None,
        type: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict[str, Any]:
        """Query context entries, most important first.

        Ordered by priority (critical, high, medium, low), then most recently
        updated. Search is a case-insensitive substring match on name or content.

        Args:
            project_id: Project scope; global entries are always included
            type: Exact context type
            category: Exact category
            search: Substring to look for in name or content
            limit: Maximum results (default: 20)

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with results and total
            - error: Error message if operation failed
        """
        try:
            params = QueryContextInput.parse(
                project_id=project_id,
                type=type,
                category=category,
                search=search,
                limit=limit,
            )
            query = context_query(
                project_id=params.project_id,
                context_type=params.type,
                category=params.category,
                search=params.search,
                limit=params.limit,
            )
            rows = self._store.query_all(*query.build())
            results = [ContextEntry.from_row(row).to_dict() for row in rows]

            logger.debug(f"query_context returned {len(results)} entries")
            return {"success": True, "data": {"results": results, "total": len(results)}}

        except ValidationError as e:
            logger.warning(f"query_context rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"query_context failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def delete_context(self, context_id: str) -> dict[str, Any]:
        """Delete a context entry.

        Unlike forget, deleting a missing entry is an error.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with deleted_id
            - error: "Context not found" or another failure message
        """
        try:
            if self._store.query_one(*by_id_query("context", context_id).build()) is None:
                raise NotFoundError("Context not found")

            self._store.execute(*delete_statement("context", Predicate("id", "=", context_id)))

            logger.info(f"Deleted context {context_id}")
            return {"success": True, "data": {"deleted_id": context_id}}

        except NotFoundError as e:
            logger.warning(f"delete_context {context_id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"delete_context failed for {context_id}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}
