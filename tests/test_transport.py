"""Tests for transport selection and the REST listener."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.routing import Route
from starlette.testclient import TestClient

from daily_todo_mcp.config import Config
from daily_todo_mcp.server import build_server
from daily_todo_mcp.transport import (
	DEFAULT_ACCEPT,
	EXIT_FAILURE,
	_with_default_accept,
	build_rest_app,
	run_server,
)
from tests.helpers import make_config

MCP_HEADERS = {
	"Accept": "application/json, text/event-stream",
	"Content-Type": "application/json",
}


def _rest_app(config: Config):
	return build_rest_app(build_server(config), config)


def _rpc(method: str, params: dict | None = None, request_id: int = 1) -> dict:
	message = {"jsonrpc": "2.0", "id": request_id, "method": method}
	if params is not None:
		message["params"] = params
	return message


def test_rest_route_at_configured_endpoint():
	app = _rest_app(make_config(mode="rest", endpoint="/custom/path"))
	paths = [r.path for r in app.routes if isinstance(r, Route)]
	assert paths == ["/custom/path"]


def test_rest_default_endpoint():
	app = _rest_app(make_config(mode="rest"))
	assert [r.path for r in app.routes] == ["/rest"]


def test_rest_list_tools():
	config = make_config(mode="rest")
	with TestClient(_rest_app(config)) as client:
		resp = client.post("/rest", json=_rpc("tools/list"), headers=MCP_HEADERS)
	assert resp.status_code == 200
	body = resp.json()
	assert body["id"] == 1
	assert [t["name"] for t in body["result"]["tools"]] == ["get_daily_todo"]


def test_rest_call_tool():
	config = make_config(mode="rest")
	with TestClient(_rest_app(config)) as client:
		resp = client.post(
			"/rest",
			json=_rpc("tools/call", {"name": "get_daily_todo", "arguments": {}}),
			headers=MCP_HEADERS,
		)
	assert resp.status_code == 200
	result = resp.json()["result"]
	assert result["isError"] is False
	assert result["content"][0]["text"].startswith("待办事项列表:")


def test_rest_credential_from_header():
	config = Config(mode="rest")
	headers = {**MCP_HEADERS, "PERPLEXITY_API_KEY": "from-header"}
	with TestClient(_rest_app(config)) as client:
		resp = client.post(
			"/rest",
			json=_rpc("tools/call", {"name": "get_daily_todo", "arguments": {}}),
			headers=headers,
		)
	assert resp.json()["result"]["isError"] is False


@pytest.mark.parametrize("headers", [{}, {"Accept": "*/*"}])
def test_rest_plain_json_client(headers: dict):
	"""A JSON-RPC POST without the streamable HTTP Accept header is served."""
	config = make_config(mode="rest")
	with TestClient(_rest_app(config)) as client:
		resp = client.post(
			"/rest",
			json=_rpc("tools/call", {"name": "get_daily_todo", "arguments": {}}),
			headers=headers,
		)
	assert resp.status_code == 200
	result = resp.json()["result"]
	assert result["isError"] is False
	assert result["content"][0]["text"].startswith("待办事项列表:")


def test_default_accept_filled_in():
	scope = {"type": "http", "headers": [(b"accept", b"*/*"), (b"host", b"x")]}
	headers = dict(_with_default_accept(scope)["headers"])
	assert headers[b"accept"] == DEFAULT_ACCEPT
	assert headers[b"host"] == b"x"


def test_json_accept_left_alone():
	scope = {"type": "http", "headers": [(b"accept", b"application/json")]}
	assert _with_default_accept(scope) is scope


def test_rest_other_path_not_found():
	config = make_config(mode="rest")
	with TestClient(_rest_app(config)) as client:
		resp = client.post("/elsewhere", json=_rpc("tools/list"), headers=MCP_HEADERS)
	assert resp.status_code == 404


def test_run_server_stdio_mode_uses_stdio():
	"""Default mode runs stdio and never starts a listener."""
	config = make_config()
	with patch("daily_todo_mcp.transport.anyio.run") as anyio_run, \
		patch("daily_todo_mcp.transport.run_rest") as run_rest:
		run_server(config)
	anyio_run.assert_called_once()
	run_rest.assert_not_called()


def test_run_server_rest_mode_uses_listener():
	config = make_config(mode="rest", port=9999, endpoint="/mcp")
	server = MagicMock()
	with patch("daily_todo_mcp.transport.anyio.run") as anyio_run, \
		patch("daily_todo_mcp.transport.run_rest") as run_rest:
		run_server(config, server)
	run_rest.assert_called_once_with(server, config)
	anyio_run.assert_not_called()


def test_run_rest_binds_configured_port():
	config = make_config(mode="rest", port=9999, host="0.0.0.0")
	with patch("uvicorn.run") as uvicorn_run:
		run_server(config)
	_, kwargs = uvicorn_run.call_args
	assert kwargs["port"] == 9999
	assert kwargs["host"] == "0.0.0.0"


def test_startup_failure_exits_nonzero():
	config = make_config(mode="rest")
	with patch("daily_todo_mcp.transport.run_rest", side_effect=OSError("address in use")):
		with pytest.raises(SystemExit) as exc_info:
			run_server(config)
	assert exc_info.value.code == EXIT_FAILURE


def test_bind_failure_exit_propagates():
	"""uvicorn's own SystemExit(1) keeps its status."""
	config = make_config(mode="rest")
	with patch("uvicorn.run", side_effect=SystemExit(1)):
		with pytest.raises(SystemExit) as exc_info:
			run_server(config)
	assert exc_info.value.code == 1


def test_stdio_failure_exits_nonzero():
	config = make_config()
	with patch("daily_todo_mcp.transport.anyio.run", side_effect=RuntimeError("stdin closed")):
		with pytest.raises(SystemExit) as exc_info:
			run_server(config)
	assert exc_info.value.code == EXIT_FAILURE


def test_keyboard_interrupt_is_clean():
	config = make_config()
	with patch("daily_todo_mcp.transport.anyio.run", side_effect=KeyboardInterrupt):
		run_server(config)
