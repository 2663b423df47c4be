"""
Tool call dispatch.

Runs the credential gate and argument checks in order, routes known tools to
their handlers and folds every outcome into a CallToolResult. Failures are
reported inside the result (isError=True), never as protocol errors.
"""

import logging
import time
from typing import Any, Mapping, Optional

import mcp.types as types

from .config import Config
from .results import DispatchError, Err, ErrorKind, Ok, Result, err
from .schemas import DailyTodoArguments, ToolArguments, is_known_tool, list_tools, parse_arguments
from .tasks import format_daily_todo

logger = logging.getLogger(__name__)

CREDENTIAL_NAME = "PERPLEXITY_API_KEY"
DEFAULT_MODEL = "sonar-pro"


def resolve_credential(config: Config, auth: Optional[Mapping[str, Any]] = None) -> Result[str]:
	"""Configured key first, then the per-request auth value."""
	api_key = config.perplexity_api_key
	if not api_key and auth:
		api_key = auth.get(CREDENTIAL_NAME) or ""
	if not api_key:
		return err(ErrorKind.CONFIGURATION, f"{CREDENTIAL_NAME} not set")
	return Ok(str(api_key))


def require_arguments(arguments: Optional[dict[str, Any]]) -> Result[dict[str, Any]]:
	"""An empty dict is fine, a missing one is not."""
	if arguments is None:
		return err(ErrorKind.INVALID_REQUEST, "No arguments provided")
	return Ok(arguments)


def require_known_tool(name: str) -> Result[str]:
	if not is_known_tool(name):
		return err(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {name}")
	return Ok(name)


def text_result(text: str) -> types.CallToolResult:
	return types.CallToolResult(
		content=[types.TextContent(type="text", text=text)],
		isError=False,
	)


def error_result(error: DispatchError) -> types.CallToolResult:
	return types.CallToolResult(
		content=[types.TextContent(type="text", text=error.to_text())],
		isError=True,
	)


class Dispatcher:
	"""Routes tool calls for one server instance."""

	def __init__(self, config: Config):
		self.config = config

	async def list_tools(self) -> list[types.Tool]:
		return list_tools()

	async def call_tool(
		self,
		name: str,
		arguments: Optional[dict[str, Any]],
		auth: Optional[Mapping[str, Any]] = None,
	) -> types.CallToolResult:
		"""
		Handle one tools/call request.

		Args:
			name: Requested tool name
			arguments: Raw arguments, None when the request omitted them
			auth: Per-request auth values (from _meta.auth or HTTP headers)

		Returns:
			CallToolResult with isError set on any failure
		"""
		start = time.monotonic()
		result = await self._dispatch(name, arguments, auth)
		duration = time.monotonic() - start

		if isinstance(result, Err):
			logger.warning(
				f"Tool call {name!r} failed ({result.error.kind.value}): "
				f"{result.error.message} [{duration:.4f}s]"
			)
			return error_result(result.error)

		logger.info(f"Tool call {name!r} succeeded [{duration:.4f}s]")
		return text_result(result.value)

	async def _dispatch(
		self,
		name: str,
		arguments: Optional[dict[str, Any]],
		auth: Optional[Mapping[str, Any]],
	) -> Result[str]:
		credential = resolve_credential(self.config, auth)
		if isinstance(credential, Err):
			return credential

		present = require_arguments(arguments)
		if isinstance(present, Err):
			return present

		known = require_known_tool(name)
		if isinstance(known, Err):
			return known

		parsed = parse_arguments(name, present.value)
		if isinstance(parsed, Err):
			return parsed

		try:
			return Ok(await self._run_tool(parsed.value))
		except Exception as e:
			logger.exception(f"Tool {name!r} raised")
			return err(ErrorKind.INTERNAL, str(e))

	async def _run_tool(self, arguments: ToolArguments) -> str:
		if isinstance(arguments, DailyTodoArguments):
			return format_daily_todo(arguments.messages, DEFAULT_MODEL)
		raise TypeError(f"No handler for {type(arguments).__name__}")
