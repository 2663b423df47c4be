"""CLI for daily-todo-mcp: serve, doctor, and setup commands."""

import argparse
import json
import os
import platform
import sys
from pathlib import Path

from importlib.metadata import version as pkg_version

from .config import Config, ConfigError, load_config

EXIT_CONFIG = 2

SERVER_KEY = "daily-todo"

MCP_ENTRY = {
	"type": "stdio",
	"command": "daily-todo-mcp",
	"args": ["serve"],
}


def _detect_claude_code_config() -> Path:
	"""Detect Claude Code MCP settings file."""
	home = Path.home()
	candidates = [
		home / ".claude" / "claude_code_config.json",
		home / ".claude.json",
	]
	for path in candidates:
		if path.exists():
			return path
	# Default location even if it doesn't exist yet
	return home / ".claude" / "claude_code_config.json"


def _detect_claude_desktop_config() -> Path | None:
	"""Detect Claude Desktop MCP settings file."""
	system = platform.system()
	home = Path.home()
	if system == "Darwin":
		path = home / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"
	elif system == "Linux":
		path = home / ".config" / "Claude" / "claude_desktop_config.json"
	elif system == "Windows":
		appdata = os.getenv("APPDATA", "")
		if appdata:
			path = Path(appdata) / "Claude" / "claude_desktop_config.json"
		else:
			return None
	else:
		return None
	return path if path.exists() else None


def _inject_mcp_config(config_path: Path) -> bool:
	"""Inject the daily-todo entry into an MCP config file."""
	try:
		if config_path.exists():
			with open(config_path) as f:
				data = json.load(f)
		else:
			data = {}

		if "mcpServers" not in data:
			data["mcpServers"] = {}

		if SERVER_KEY in data["mcpServers"]:
			print(f"  Already configured in {config_path}")
			return True

		data["mcpServers"][SERVER_KEY] = MCP_ENTRY
		config_path.parent.mkdir(parents=True, exist_ok=True)
		with open(config_path, "w") as f:
			json.dump(data, f, indent=2)
		print(f"  Added to {config_path}")
		return True
	except (json.JSONDecodeError, IOError) as e:
		print(f"  Failed to update {config_path}: {e}")
		return False


def _load_or_exit(overrides: dict | None = None) -> Config:
	try:
		return load_config(overrides)
	except ConfigError as e:
		print(f"Configuration error: {e}", file=sys.stderr)
		sys.exit(EXIT_CONFIG)


def _serve_overrides(args: argparse.Namespace) -> dict:
	"""CLI flags that were actually given, as config overrides."""
	keys = ("perplexity_api_key", "mode", "port", "endpoint", "host", "log_level")
	return {key: getattr(args, key, None) for key in keys}


def cmd_serve(args: argparse.Namespace) -> None:
	"""Run the MCP server in stdio or REST mode."""
	from .logging_config import setup_logging
	from .transport import run_server

	config = _load_or_exit(_serve_overrides(args))
	setup_logging(config)
	run_server(config)


def cmd_setup(args: argparse.Namespace) -> None:
	"""Register the server with the local Claude clients."""
	print("daily-todo-mcp setup")
	print(f"{'=' * 40}")
	print()

	claude_code = _detect_claude_code_config()
	print(f"  Claude Code config: {claude_code}")
	if args.yes:
		_inject_mcp_config(claude_code)
	else:
		response = input("  Add daily-todo-mcp to Claude Code? [Y/n] ").strip().lower()
		if response in ("", "y", "yes"):
			_inject_mcp_config(claude_code)

	claude_desktop = _detect_claude_desktop_config()
	if claude_desktop:
		print(f"  Claude Desktop config: {claude_desktop}")
		if args.yes:
			_inject_mcp_config(claude_desktop)
		else:
			response = input("  Add daily-todo-mcp to Claude Desktop? [Y/n] ").strip().lower()
			if response in ("", "y", "yes"):
				_inject_mcp_config(claude_desktop)
	else:
		print("  Claude Desktop config: not detected")
	print()
	print("  Restart your MCP client to load the server.")


def _check_server_startup(config: Config) -> tuple[str, str | None]:
	"""Build the server and inspect what it advertises. Returns (status, issue_or_none)."""
	try:
		from .schemas import list_tools
		from .server import build_server

		options = build_server(config).create_initialization_options()
		if options.capabilities.tools is None:
			return "FAILED (tools capability missing)", "Server does not advertise tools"
		names = [tool.name for tool in list_tools()]
		return f"OK ({options.server_name} {options.server_version}, tools: {', '.join(names)})", None
	except Exception as e:
		return f"FAILED ({e})", f"Server startup failed: {e}"


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify installation and configuration."""
	print("daily-todo-mcp doctor")
	print(f"{'=' * 40}")

	issues: list[str] = []

	py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
	print(f"  Python:       {py_ver}")
	print(f"  Platform:     {platform.system()} {platform.machine()}")
	print()

	print("  Core deps:")
	core_deps = ["mcp", "pydantic", "platformdirs", "python-dotenv", "starlette", "uvicorn", "anyio"]
	for dep in core_deps:
		try:
			dep_ver = pkg_version(dep)
			print(f"    {dep:22s} {dep_ver}")
		except Exception:
			print(f"    {dep:22s} NOT INSTALLED")
			issues.append(f"{dep} package not installed")
	print()

	print("  Config:")
	try:
		config = load_config()
	except ConfigError as e:
		print(f"    INVALID ({e})")
		issues.append(f"Configuration error: {e}")
		config = None
	if config is not None:
		print(f"    config.toml:         {config.config_file if config.config_file.exists() else 'not found (optional)'}")
		print(f"    mode:                {config.mode}")
		if config.mode == "rest":
			print(f"    listen:              {config.host}:{config.port}{config.endpoint}")
		print(f"    api key:             {config.masked_api_key()}")
		if not config.perplexity_api_key:
			# Not fatal: clients may still send the key per request
			issues.append("PERPLEXITY_API_KEY not set (calls without per-request auth will fail)")
	print()

	if config is not None:
		print("  Server:")
		server_status, server_issue = _check_server_startup(config)
		print(f"    {server_status}")
		if server_issue:
			issues.append(server_issue)
		print()

	if issues:
		print(f"  {len(issues)} issue(s) found:")
		for issue in issues:
			print(f"    - {issue}")
		sys.exit(1)
	else:
		print("  All checks passed.")


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="daily-todo-mcp",
		description="MCP server exposing a daily to-do list tool",
	)
	subparsers = parser.add_subparsers(dest="command")

	# serve
	serve_parser = subparsers.add_parser("serve", help="Run MCP server (stdio or rest)")
	serve_parser.add_argument(
		"--perplexity-api-key", "--perplexity_api_key",
		dest="perplexity_api_key",
		type=str,
		default=None,
		help="API key checked before each tool call (env: PERPLEXITY_API_KEY)",
	)
	serve_parser.add_argument(
		"--mode",
		type=str,
		default=None,
		choices=["stdio", "rest"],
		help="Transport (default: stdio)",
	)
	serve_parser.add_argument("--port", type=int, default=None, help="REST listener port (default: 9593)")
	serve_parser.add_argument("--endpoint", type=str, default=None, help="REST endpoint path (default: /rest)")
	serve_parser.add_argument("--host", type=str, default=None, help="REST listener host (default: 127.0.0.1)")
	serve_parser.add_argument("--log-level", dest="log_level", type=str, default=None, help="Log level (default: INFO)")
	serve_parser.set_defaults(func=cmd_serve)

	# setup
	setup_parser = subparsers.add_parser("setup", help="Register with Claude Code / Claude Desktop")
	setup_parser.add_argument("-y", "--yes", action="store_true", help="Don't prompt")
	setup_parser.set_defaults(func=cmd_setup)

	# doctor
	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.set_defaults(func=cmd_doctor)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	args.func(args)
