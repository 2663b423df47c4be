"""
daily-todo-mcp: MCP server exposing the get_daily_todo tool.

Serves a fixed, formatted to-do list over stdio or a REST endpoint.
"""

__version__ = "0.1.0"
