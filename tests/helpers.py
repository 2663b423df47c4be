"""Shared test fixtures and helpers for daily-todo-mcp tests."""

from pathlib import Path
from typing import Any, Optional

import mcp.types as types

from daily_todo_mcp.config import Config

TASK_TITLES = [
	"完成项目需求文档",
	"代码审查",
	"数据库优化",
	"客户反馈处理",
	"项目进度报告",
]


def make_config(tmp_path: Optional[Path] = None, **kwargs: Any) -> Config:
	"""Create a Config with a key set and directories under tmp_path."""
	kwargs.setdefault("perplexity_api_key", "test-key")
	if tmp_path is not None:
		kwargs.setdefault("config_dir", tmp_path / "config")
		kwargs.setdefault("log_dir", tmp_path / "logs")
	return Config(**kwargs)


def make_call_request(
	name: str = "get_daily_todo",
	arguments: Optional[dict[str, Any]] = None,
	auth: Optional[dict[str, Any]] = None,
) -> types.CallToolRequest:
	"""Build a tools/call request. arguments=None omits the field entirely."""
	params: dict[str, Any] = {"name": name}
	if arguments is not None:
		params["arguments"] = arguments
	if auth is not None:
		params["_meta"] = {"auth": auth}
	return types.CallToolRequest(
		method="tools/call",
		params=types.CallToolRequestParams.model_validate(params),
	)


def result_text(result: types.CallToolResult) -> str:
	"""Text of the single content item of a tool result."""
	assert len(result.content) == 1
	content = result.content[0]
	assert content.type == "text"
	return content.text
