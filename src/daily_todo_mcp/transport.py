"""
Transport selection: stdio (default) or a REST listener.

The mode is read from Config once at startup. In REST mode the server is
mounted at the configured endpoint of a Starlette app and served by uvicorn.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

import anyio
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .config import Config
from .server import build_server

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
DEFAULT_ACCEPT = b"application/json, text/event-stream"


def _with_default_accept(scope: Scope) -> Scope:
	"""Give plain JSON clients (no Accept, or */*) the Accept header the SDK expects."""
	headers = list(scope.get("headers", []))
	accept = b", ".join(v for k, v in headers if k.lower() == b"accept")
	if b"application/json" in accept:
		return scope
	headers = [(k, v) for k, v in headers if k.lower() != b"accept"]
	headers.append((b"accept", DEFAULT_ACCEPT))
	return {**scope, "headers": headers}


class StreamableHTTPEndpoint:
	"""ASGI endpoint forwarding requests to the session manager."""

	def __init__(self, session_manager: StreamableHTTPSessionManager):
		self.session_manager = session_manager

	async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
		await self.session_manager.handle_request(_with_default_accept(scope), receive, send)


def build_rest_app(server: Server, config: Config) -> Starlette:
	"""Build the Starlette app serving the MCP server at config.endpoint."""
	session_manager = StreamableHTTPSessionManager(
		app=server,
		json_response=True,
		stateless=True,
	)

	@asynccontextmanager
	async def lifespan(app: Starlette) -> AsyncIterator[None]:
		async with session_manager.run():
			logger.info(f"REST endpoint ready at {config.endpoint}")
			yield

	routes = [
		Route(
			config.endpoint,
			endpoint=StreamableHTTPEndpoint(session_manager),
			methods=["GET", "POST", "DELETE"],
		),
	]

	app = Starlette(routes=routes, lifespan=lifespan)
	app.state.session_manager = session_manager
	return app


async def run_stdio(server: Server) -> None:
	"""Serve over the process's stdin/stdout until the client disconnects."""
	async with stdio_server() as (read_stream, write_stream):
		logger.info("Daily todo MCP server running on stdio")
		await server.run(read_stream, write_stream, server.create_initialization_options())


def run_rest(server: Server, config: Config) -> None:
	"""Serve over HTTP. Blocks until the listener stops."""
	import uvicorn

	app = build_rest_app(server, config)
	logger.info(f"Daily todo MCP server listening on http://{config.host}:{config.port}{config.endpoint}")
	uvicorn.run(app, host=config.host, port=config.port, log_level="warning")


def run_server(config: Config, server: Server | None = None) -> None:
	"""Run the server in the configured mode. Startup failures exit with status 1."""
	server = server or build_server(config)
	try:
		if config.mode == "rest":
			run_rest(server, config)
		else:
			anyio.run(run_stdio, server)
	except KeyboardInterrupt:
		logger.info("Server stopped")
	except SystemExit as e:
		# uvicorn exits with status 1 when the port cannot be bound
		if e.code not in (0, None):
			logger.error(f"Fatal error running server: exit status {e.code}")
		raise
	except Exception as e:
		logger.error(f"Fatal error running server: {e}", exc_info=True)
		sys.exit(EXIT_FAILURE)
