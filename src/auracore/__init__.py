"""AuraCore - Persistent project and context memory for AI assistants.

AuraCore keeps projects, contextual knowledge, prioritized tasks, expiring
session memory and an append-only decision log in a single SQLite file, and
exposes them as MCP tools.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
