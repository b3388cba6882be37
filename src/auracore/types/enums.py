"""Value sets for AuraCore records."""

from enum import Enum


class ProjectType(str, Enum):
    """Kind of work a project tracks."""

    FEATURE = "feature"
    BUGFIX = "bugfix"
    REFACTOR = "refactor"
    SPIKE = "spike"
    MAINTENANCE = "maintenance"


class ProjectStatus(str, Enum):
    """Lifecycle state of a project."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ContextType(str, Enum):
    """Kinds of stored business knowledge.

    - BUSINESS_RULE: Domain rule that code must respect
    - PATTERN: Recurring implementation pattern
    - CONVENTION: Naming or style convention
    - GLOSSARY: Definition of a domain term
    - DOCUMENT: Free-form reference text
    - DECISION: Recorded architectural or product decision
    """

    BUSINESS_RULE = "business_rule"
    PATTERN = "pattern"
    CONVENTION = "convention"
    GLOSSARY = "glossary"
    DOCUMENT = "document"
    DECISION = "decision"


class Priority(str, Enum):
    """Priority shared by context entries and tasks. CRITICAL ranks first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Task state. Only PENDING and IN_PROGRESS are candidates for next tasks."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskType(str, Enum):
    SETUP = "setup"
    IMPLEMENTATION = "implementation"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
