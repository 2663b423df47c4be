"""
Tool catalog and argument shapes.

Each registered tool has an MCP descriptor (advertised on list_tools) and a
pydantic model its raw arguments are validated into before dispatch.
"""

import logging
from typing import Any, Literal, Optional, Union

import mcp.types as types
from pydantic import BaseModel, ConfigDict, ValidationError

from .results import ErrorKind, Ok, Result, err

logger = logging.getLogger(__name__)

DAILY_TODO_TOOL_NAME = "get_daily_todo"

DAILY_TODO_TOOL = types.Tool(
	name=DAILY_TODO_TOOL_NAME,
	description="获取日常待办事项 ",
	inputSchema={
		"type": "object",
		"properties": {
			"erp": {
				"type": "string",
			},
		},
	},
)


class DailyTodoArguments(BaseModel):
	"""Arguments for get_daily_todo. Extra keys are accepted and kept."""
	model_config = ConfigDict(extra="allow")

	tool: Literal["get_daily_todo"] = DAILY_TODO_TOOL_NAME
	erp: Optional[str] = None
	messages: Optional[Any] = None


# Union of every known argument shape, tagged by the `tool` field
ToolArguments = Union[DailyTodoArguments]

ARGUMENT_MODELS: dict[str, type[BaseModel]] = {
	DAILY_TODO_TOOL_NAME: DailyTodoArguments,
}


def list_tools() -> list[types.Tool]:
	"""The fixed tool catalog."""
	return [DAILY_TODO_TOOL]


def is_known_tool(name: str) -> bool:
	return name in ARGUMENT_MODELS


def _describe_validation_error(exc: ValidationError) -> str:
	parts = []
	for error in exc.errors():
		loc = ".".join(str(p) for p in error.get("loc", ())) or "arguments"
		parts.append(f"{loc}: {error.get('msg', 'invalid value')}")
	return "; ".join(parts)


def parse_arguments(name: str, arguments: dict[str, Any]) -> Result[ToolArguments]:
	"""
	Validate raw call arguments into the tool's argument shape.

	Returns:
		Ok(arguments model), or Err with UNKNOWN_TOOL / INVALID_ARGUMENTS
	"""
	model = ARGUMENT_MODELS.get(name)
	if model is None:
		return err(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {name}")

	if not isinstance(arguments, dict):
		return err(
			ErrorKind.INVALID_ARGUMENTS,
			f"Invalid arguments for {name}: expected an object, got {type(arguments).__name__}",
		)

	# The tag comes from the tool name, never from the caller
	payload = {k: v for k, v in arguments.items() if k != "tool"}
	try:
		parsed = model.model_validate({**payload, "tool": name})
	except ValidationError as e:
		message = f"Invalid arguments for {name}: {_describe_validation_error(e)}"
		logger.debug(message)
		return err(ErrorKind.INVALID_ARGUMENTS, message)
	return Ok(parsed)
