"""AuraCore constants.

Implementation details that do not change between installations. User
settings live in auracore.config.
"""

from pathlib import Path

# =============================================================================
# Storage
# =============================================================================

DEFAULT_DATA_DIR = Path.home() / ".auracore"
DEFAULT_DB_FILENAME = "auracore.db"

# SQLite clock expression producing the same format as utc_now()
SQL_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

# =============================================================================
# Ordering
# =============================================================================

# Lower rank sorts first
PRIORITY_RANK = {
    "critical": 1,
    "high": 2,
    "medium": 3,
    "low": 4,
}

# =============================================================================
# Operation defaults
# =============================================================================

DEFAULT_CONTEXT_LIMIT = 20
DEFAULT_NEXT_TASKS_LIMIT = 3
DEFAULT_DECISION_LIMIT = 10
DEFAULT_SESSION_ID = "default"

ACTIONABLE_TASK_STATUSES = ("pending", "in_progress")
