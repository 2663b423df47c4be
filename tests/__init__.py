"""Tests for daily-todo-mcp."""
