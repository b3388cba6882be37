"""Integration tests for AuraCore.

These tests drive the MCP tool wrappers against a real store file and
check behavior that spans several operations:

- test_scenarios.py: project/task, context search and session memory flows,
  cascading deletes, and persistence across server restarts

Usage:
    pytest tests/integration/ -v
"""
