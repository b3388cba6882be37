"""Decision log tools for the AuraCore MCP server.

This module provides MCP tools for the append-only decision log:
- log_decision: Record a decision, its confidence and reasoning
- get_decision_history: Review past decisions, newest first

There is no update or delete: once logged, a decision stays as written.
"""

import logging
import uuid
from typing import Any, Optional

from auracore.errors import NotFoundError, ValidationError
from auracore.storage import (
    StoreEngine,
    by_id_query,
    decision_history_query,
    insert_statement,
    utc_now,
)
from auracore.types import DecisionHistoryInput, DecisionLog, LogDecisionInput

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class DecisionTools:
    """Tool implementations for the decision log.

    Args:
        store: Opened StoreEngine
    """

    def __init__(self, store: StoreEngine) -> None:
        self._store = store

    async def log_decision(
        self,
        decision_type: str,
        decision: str,
        project_id: Optional[str] = None,
        input_context: Optional[str] = None,
        confidence: Optional[float] = None,
        reasoning: Optional[str] = None,
    ) -> dict[str, Any]:
        """Log a decision.

        Args:
            decision_type: Kind of decision (e.g. "architecture", "refactor")
            decision: The decision made
            project_id: Associated project
            input_context: Context that led to the decision
            confidence: Confidence from 0.0 to 1.0
            reasoning: Why the decision was made

        Returns:
            Dictionary with:
            - success: Boolean indicating operation success
            - data: Dictionary with decision_id and the stored decision
            - error: Error message if operation failed
        """
        try:
            params = LogDecisionInput.parse(
                decision_type=decision_type,
                decision=decision,
                project_id=project_id,
                input_context=input_context,
                confidence=confidence,
                reasoning=reasoning,
            )

            if params.project_id is not None:
                if self._store.query_one(*by_id_query("projects", params.project_id).build()) is None:
                    raise NotFoundError("Project not found")

            decision_id = str(uuid.uuid4())
            self._store.execute(
                *insert_statement(
                    "decision_log",
                    {
                        "id": decision_id,
                        "project_id": params.project_id,
                        "decision_type": params.decision_type,
                        "input_context": params.input_context,
                        "decision": params.decision,
                        "confidence": params.confidence,
                        "reasoning": params.reasoning,
                        "created_at": utc_now(),
                    },
                )
            )

            row = self._store.query_one(*by_id_query("decision_log", decision_id).build())
            logger.info(f"Logged decision {decision_id} ({params.decision_type})")
            return {
                "success": True,
                "data": {
                    "decision_id": decision_id,
                    "decision": DecisionLog.from_row(row).to_dict(),
                },
            }

        except (NotFoundError, ValidationError) as e:
            logger.warning(f"log_decision rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"log_decision failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    async def get_decision_history(
        self, project_id: Optional[str] = None, limit: Optional[int] = None
    ) -> dict[str, Any]:
        """Get logged decisions, newest first.

        Args:
            project_id: Only decisions for this project
            limit: Maximum results (default: 10)
        """
        try:
            params = DecisionHistoryInput.parse(project_id=project_id, limit=limit)
            rows = self._store.query_all(
                *decision_history_query(params.project_id, params.limit).build()
            )
            decisions = [DecisionLog.from_row(row).to_dict() for row in rows]
            return {"success": True, "data": {"decisions": decisions, "total": len(decisions)}}

        except ValidationError as e:
            logger.warning(f"get_decision_history rejected: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"get_decision_history failed: {e}", exc_info=True)
            return {"success": False, "error": str(e)}
