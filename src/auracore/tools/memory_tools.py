"""Session memory tools for the AuraCore MCP server.

This module provides MCP tools for short-lived key/value memory:
- remember: Store a value under (session_id, key), optionally expiring
- recall: Read a value that has not expired
- forget: Remove a key

Expired entries are hidden from recall but not deleted. A missing key and
an expired key produce the same "Key not found or expired" failure.
"""

import logging
import uuid
from typing import Any, Optional

from auracore.errors import NotFoundError, ValidationError
from auracore.storage import (
    Predicate,
    StoreEngine,
    delete_statement,
    recall_query,
    upsert_statement,
    utc_after,
    utc_now,
)
from auracore.types import ForgetInput, RecallInput, RememberInput, SessionMemory

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class MemoryTools:
    """Tool implementations for session memory operations.

    Args:
        store: Opened StoreEngine

    Example:
        >>> tools = MemoryTools(store)
        >>> await tools.remember(key="endpoint", value="/api/v1")
        >>> result = await tools.recall(key="endpoint")
        >>> result["data"]["value"]
        '/api/v1'
    """

    def __init__(self, store: StoreEngine) -> None:
        self._store = store

    async def remember(
        self,
        key: str,
        value: str,
        session_id: Optional[str] = None,
        ttl_minutes: Optional[float] = None,
    ) -> dict[str, Any]:
        """Store a value in session memory.

        Writing an existing (session_id, key) replaces its value, created_at
        and expires_at in place.

        Args:
            key: Memory key
            value: Value to remember
            session_id: Session scope (default: "default")
            ttl_minutes: Minutes until expiry; omit for no expiry. Zero or
                negative values produce an entry that is already expired.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with session_id, key, expires_at
            - error: Error message if operation failed
        """
        try:
            params = RememberInput.parse(
                key=key, value=value, session_id=session_id, ttl_minutes=ttl_minutes
            )
            expires_at = utc_after(params.ttl_minutes) if params.ttl_minutes is not None else None

            self._store.execute(
                *upsert_statement(
                    "session_memory",
                    {
                        "id": str(uuid.uuid4()),
                        "session_id": params.session_id,
                        "key": params.key,
                        "value": params.value,
                        "created_at": utc_now(),
                        "expires_at": expires_at,
                    },
                    conflict=("session_id", "key"),
                    refresh=("value", "created_at", "expires_at"),
                )
            )

            logger.info(f"Remembered {params.session_id}/{params.key}")
            return {
                "success": True,
                "data": {
                    "session_id": params.session_id,
                    "key": params.key,
                    "expires_at": expires_at,
                },
            }

        except ValidationError as e:
            logger.warning(f"remember rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"remember failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def recall(self, key: str, session_id: Optional[str] = None) -> dict[str, Any]:
        """Recall a value from session memory.

        Expiry is checked against the store's clock when the query runs.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with value and the stored entry
            - error: "Key not found or expired" or another failure message
        """
        try:
            params = RecallInput.parse(key=key, session_id=session_id)
            row = self._store.query_one(*recall_query(params.session_id, params.key).build())
            if row is None:
                raise NotFoundError("Key not found or expired")

            entry = SessionMemory.from_row(row)
            return {"success": True, "data": {"value": entry.value, "memory": entry.to_dict()}}

        except (NotFoundError, ValidationError) as e:
            logger.debug(f"recall {key}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"recall failed for {key}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def forget(self, key: str, session_id: Optional[str] = None) -> dict[str, Any]:
        """Remove a key from session memory.

        Succeeds whether or not the key existed.

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with session_id, key and whether a row was removed
            - error: Error message if operation failed
        """
        try:
            params = ForgetInput.parse(key=key, session_id=session_id)
            removed = self._store.execute(
                *delete_statement(
                    "session_memory",
                    Predicate("session_id", "=", params.session_id),
                    Predicate("key", "=", params.key),
                )
            )

            logger.info(f"Forgot {params.session_id}/{params.key} (removed={removed > 0})")
            return {
                "success": True,
                "data": {
                    "session_id": params.session_id,
                    "key": params.key,
                    "removed": removed > 0,
                },
            }

        except ValidationError as e:
            logger.warning(f"forget rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"forget failed for {key}: {e}", exc_info=True)
            return {"success": False, "error": str(e)}
