"""MCP server entry point for AuraCore.

This module provides the main entry point for the AuraCore MCP server with:
- CLI argument parsing (settings come from AURACORE_* variables and .env)
- Store and tool initialization in dependency order
- Signal handling for graceful shutdown
- Logging to stderr (CRITICAL for MCP stdio)

Usage:
    python -m auracore [options]

    Options:
        --db-path PATH          Store file (default: ~/.auracore/auracore.db)
        --log-level LEVEL       Logging level (default: INFO)
        --call TOOL --args JSON Call one tool directly and print the result

CRITICAL: MCP servers using stdio transport must NEVER write to stdout
as it corrupts JSON-RPC messages. All logging goes to stderr.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# Load .env file - must be done before any config access
load_dotenv()

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging to stderr (never stdout for MCP servers).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # Critical: never use stdout in MCP servers
    )

    logger.info(f"Logging initialized at {log_level.upper()} level")


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments. Unset options fall back to AuracoreSettings."""
    parser = argparse.ArgumentParser(
        prog="auracore",
        description="AuraCore MCP server for project, context and task memory",
    )

    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="Store file path (default: AURACORE_DATA_DIR/AURACORE_DB_FILENAME)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: AURACORE_LOG_LEVEL or INFO)",
    )

    # Direct tool call mode
    parser.add_argument(
        "--call",
        type=str,
        metavar="TOOL_NAME",
        help="Call a tool directly, print its JSON result and exit",
    )
    parser.add_argument(
        "--args",
        type=str,
        default="{}",
        help="JSON arguments for --call mode",
    )

    return parser.parse_args(argv)


def initialize_components(db_path: Path) -> dict[str, Any]:
    """Open the store and build the tool instances on top of it.

    Args:
        db_path: Store file path

    Returns:
        Dictionary containing the store and all tool instances

    Raises:
        Exception: If the store cannot be opened
    """
    logger.info("Initializing components...")
    components: dict[str, Any] = {}

    try:
        logger.info(f"Opening store at {db_path}")
        from auracore.storage import StoreEngine

        store = StoreEngine(db_path=db_path).open()
        components["store"] = store

        from auracore.tools import ContextTools, DecisionTools, MemoryTools, ProjectTools, TaskTools

        components["project_tools"] = ProjectTools(store=store)
        components["context_tools"] = ContextTools(store=store)
        components["task_tools"] = TaskTools(store=store)
        components["memory_tools"] = MemoryTools(store=store)
        components["decision_tools"] = DecisionTools(store=store)

        logger.info("All components initialized successfully")
        return components

    except Exception as e:
        logger.error(f"Failed to initialize components: {e}", exc_info=True)
        raise


def build_tool_map(components: dict[str, Any]) -> dict[str, Any]:
    """Map MCP tool names to tool methods."""
    projects = components["project_tools"]
    context = components["context_tools"]
    tasks = components["task_tools"]
    memory = components["memory_tools"]
    decisions = components["decision_tools"]

    return {
        "auracore_create_project": projects.create_project,
        "auracore_list_projects": projects.list_projects,
        "auracore_get_project": projects.get_project,
        "auracore_update_project": projects.update_project,
        "auracore_delete_project": projects.delete_project,
        "auracore_store_context": context.store_context,
        "auracore_query_context": context.query_context,
        "auracore_delete_context": context.delete_context,
        "auracore_create_task": tasks.create_task,
        "auracore_update_task": tasks.update_task,
        "auracore_get_next_tasks": tasks.get_next_tasks,
        "auracore_remember": memory.remember,
        "auracore_recall": memory.recall,
        "auracore_forget": memory.forget,
        "auracore_log_decision": decisions.log_decision,
        "auracore_get_decisions": decisions.get_decision_history,
    }


def call_tool_directly(tool_name: str, raw_args: str, components: dict[str, Any]) -> int:
    """Call one tool and print its JSON result to stdout.

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    try:
        tool_args = json.loads(raw_args)
    except json.JSONDecodeError as e:
        print(json.dumps({"success": False, "error": f"Invalid JSON args: {e}"}))
        return 1

    tool_map = build_tool_map(components)
    if tool_name not in tool_map:
        print(json.dumps({"success": False, "error": f"Unknown tool: {tool_name}"}))
        return 1

    if not isinstance(tool_args, dict):
        print(json.dumps({"success": False, "error": "--args must be a JSON object"}))
        return 1

    async def run_tool() -> dict[str, Any]:
        try:
            return await tool_map[tool_name](**tool_args)
        except TypeError as e:
            return {"success": False, "error": f"Invalid arguments for {tool_name}: {e}"}

    result = asyncio.run(run_tool())
    print(json.dumps(result, indent=2))
    return 0 if result.get("success") else 1


def handle_shutdown(signum: int, _frame: Any) -> None:
    """Handle SIGINT/SIGTERM for graceful shutdown."""
    logger.info(f"Received signal {signum}, shutting down gracefully...")
    sys.exit(0)


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for MCP server.

    Workflow:
    1. Parse CLI arguments and load settings
    2. Setup logging to stderr
    3. Open the store and build tools
    4. Set global tool instances
    5. Register signal handlers
    6. Run MCP server with stdio transport (or a single --call)
    """
    args = parse_arguments(argv)

    from auracore.config import AuracoreSettings

    settings = AuracoreSettings()
    db_path = args.db_path.expanduser().resolve() if args.db_path else settings.get_db_path()

    if args.call:
        setup_logging("WARNING")  # Quiet logging for --call mode
        try:
            components = initialize_components(db_path)
        except Exception:
            sys.exit(1)
        sys.exit(call_tool_directly(args.call, args.args, components))

    setup_logging(args.log_level or settings.log_level)
    logger.info("Starting AuraCore MCP Server...")

    try:
        components = initialize_components(db_path)

        from auracore.mcp_server import mcp, set_tool_instances

        set_tool_instances(
            projects=components["project_tools"],
            context=components["context_tools"],
            tasks=components["task_tools"],
            memory=components["memory_tools"],
            decisions=components["decision_tools"],
        )

        signal.signal(signal.SIGINT, handle_shutdown)
        signal.signal(signal.SIGTERM, handle_shutdown)

        logger.info("MCP server ready, starting stdio transport...")

        # Blocks until shutdown; FastMCP manages its own event loop
        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Server failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
