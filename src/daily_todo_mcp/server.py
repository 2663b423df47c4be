"""daily-todo-mcp MCP server."""

import logging
from typing import Any, Mapping, Optional

import mcp.types as types
from mcp.server.lowlevel import Server

from . import __version__
from .config import Config
from .dispatch import CREDENTIAL_NAME, Dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "example-servers/get-daily-todo"


def extract_auth(
	params: types.CallToolRequestParams,
	headers: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
	"""
	Collect per-request auth values.

	HTTP headers (REST mode) are read first, then `_meta.auth` from the
	request params, which wins when both carry the same key.
	"""
	auth: dict[str, Any] = {}
	if headers:
		wanted = CREDENTIAL_NAME.lower()
		for key, value in headers.items():
			if key.lower() == wanted and value:
				auth[CREDENTIAL_NAME] = value

	meta = params.meta
	if meta is not None:
		meta_auth = (meta.model_extra or {}).get("auth")
		if isinstance(meta_auth, dict):
			auth.update(meta_auth)
	return auth


def _request_headers(server: Server) -> Optional[Mapping[str, str]]:
	"""HTTP headers of the request being handled, None on stdio."""
	try:
		request = server.request_context.request
	except LookupError:
		return None
	return getattr(request, "headers", None)


def build_server(config: Config, dispatcher: Optional[Dispatcher] = None) -> Server:
	"""Create the low-level MCP server with the tools capability only."""
	dispatcher = dispatcher or Dispatcher(config)
	server: Server = Server(SERVER_NAME, version=__version__)

	@server.list_tools()
	async def handle_list_tools() -> list[types.Tool]:
		return await dispatcher.list_tools()

	async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
		auth = extract_auth(req.params, _request_headers(server))
		result = await dispatcher.call_tool(req.params.name, req.params.arguments, auth)
		return types.ServerResult(result)

	# Registered directly: the call_tool() decorator replaces omitted
	# arguments with {} and they must reach the dispatcher as None.
	server.request_handlers[types.CallToolRequest] = handle_call_tool

	logger.debug(f"Built MCP server {SERVER_NAME} {__version__}")
	return server
