"""Pytest configuration and shared fixtures for auracore tests.

This module provides reusable fixtures for testing:
- env_setup: (autouse) Points AURACORE_* settings at a temporary directory
- temp_dir: Temporary directory for file operations
- db_path / store: An opened StoreEngine backed by a temporary file
- project_tools, context_tools, task_tools, memory_tools, decision_tools

Usage:
    def test_something(store, task_tools):
        # Tests run against a real store file in a temp dir
        pass
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from auracore.storage import StoreEngine
from auracore.tools import ContextTools, DecisionTools, MemoryTools, ProjectTools, TaskTools


@pytest.fixture(autouse=True)
def env_setup(tmp_path: Path) -> Generator[None, None, None]:
    """Set AURACORE_* environment variables for all tests.

    Keeps every test away from the real ~/.auracore directory.
    """
    env_vars = {
        "AURACORE_DATA_DIR": str(tmp_path / "auracore-home"),
        "AURACORE_DB_FILENAME": "auracore.db",
        "AURACORE_LOG_LEVEL": "DEBUG",
    }
    # Store original values
    original = {k: os.environ.get(k) for k in env_vars}
    # Set test values
    os.environ.update(env_vars)
    yield
    # Restore original values
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test file operations.

    Yields:
        Path: Path to the temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Store file path inside a not-yet-existing subdirectory."""
    return temp_dir / "data" / "auracore.db"


@pytest.fixture
def store(db_path: Path) -> Generator[StoreEngine, None, None]:
    """Provide an opened StoreEngine on a temporary file.

    Yields:
        StoreEngine: Opened store, closed after the test
    """
    s = StoreEngine(db_path).open()
    yield s
    s.close()


@pytest.fixture
def project_tools(store: StoreEngine) -> ProjectTools:
    return ProjectTools(store=store)


@pytest.fixture
def context_tools(store: StoreEngine) -> ContextTools:
    return ContextTools(store=store)


@pytest.fixture
def task_tools(store: StoreEngine) -> TaskTools:
    return TaskTools(store=store)


@pytest.fixture
def memory_tools(store: StoreEngine) -> MemoryTools:
    return MemoryTools(store=store)


@pytest.fixture
def decision_tools(store: StoreEngine) -> DecisionTools:
    return DecisionTools(store=store)
