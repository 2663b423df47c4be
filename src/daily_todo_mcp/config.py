"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import platformdirs
from dotenv import find_dotenv, load_dotenv

APP_NAME = "daily-todo-mcp"

MODES = ("stdio", "rest")
DEFAULT_PORT = 9593
DEFAULT_ENDPOINT = "/rest"
DEFAULT_HOST = "127.0.0.1"


class ConfigError(ValueError):
	"""Raised when a startup parameter has an unusable value."""


@dataclass
class Config:
	"""Startup parameters, resolved once and passed to the server explicitly."""

	perplexity_api_key: str = ""
	mode: str = "stdio"
	port: int = DEFAULT_PORT
	endpoint: str = DEFAULT_ENDPOINT
	host: str = DEFAULT_HOST
	log_level: str = "INFO"

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	log_dir: Path = field(default_factory=lambda: Path(platformdirs.user_log_dir(APP_NAME)))

	@property
	def config_file(self) -> Path:
		return self.config_dir / "config.toml"

	def masked_api_key(self) -> str:
		"""API key safe for display."""
		if not self.perplexity_api_key:
			return "(not set)"
		if len(self.perplexity_api_key) <= 8:
			return "****"
		return f"{self.perplexity_api_key[:4]}...{self.perplexity_api_key[-4:]}"


# Environment variable -> Config attribute
ENV_MAP = {
	"PERPLEXITY_API_KEY": "perplexity_api_key",
	"MODE": "mode",
	"PORT": "port",
	"ENDPOINT": "endpoint",
	"HOST": "host",
	"LOG_LEVEL": "log_level",
	"DAILY_TODO_CONFIG_DIR": "config_dir",
	"DAILY_TODO_LOG_DIR": "log_dir",
}

_PATH_FIELDS = {"config_dir", "log_dir"}


def _set_value(config: Config, attr: str, val: Any) -> None:
	if attr in _PATH_FIELDS:
		setattr(config, attr, Path(os.path.expanduser(str(val))))
	else:
		setattr(config, attr, val)


def _field_names() -> set[str]:
	return {f.name for f in fields(Config)}


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_file
	if not toml_path.exists():
		return config

	try:
		with open(toml_path, "rb") as f:
			data = tomllib.load(f)
	except (tomllib.TOMLDecodeError, OSError) as e:
		raise ConfigError(f"Cannot read {toml_path}: {e}") from e

	allowed = _field_names() - {"config_dir"}
	for key, val in data.items():
		if key not in allowed:
			raise ConfigError(f"Unknown option in {toml_path}: {key}")
		_set_value(config, key, val)
	return config


def _apply_env_overrides(config: Config) -> Config:
	"""Apply environment variable overrides (including values from .env)."""
	for env_key, attr in ENV_MAP.items():
		val = os.getenv(env_key)
		if val:
			_set_value(config, attr, val)
	return config


def _apply_overrides(config: Config, overrides: dict[str, Any]) -> Config:
	"""Apply explicit overrides, typically parsed CLI flags. None means unset."""
	for key, val in overrides.items():
		if val is None:
			continue
		if key not in _field_names():
			raise ConfigError(f"Unknown config option: {key}")
		_set_value(config, key, val)
	return config


def _normalize(config: Config) -> Config:
	"""Coerce types and reject values the server cannot start with."""
	config.mode = str(config.mode).strip().lower()
	if config.mode not in MODES:
		raise ConfigError(f"Invalid mode: {config.mode!r} (expected one of: {', '.join(MODES)})")

	try:
		config.port = int(config.port)
	except (TypeError, ValueError):
		raise ConfigError(f"Invalid port: {config.port!r}")
	if not 0 < config.port < 65536:
		raise ConfigError(f"Port out of range: {config.port}")

	endpoint = str(config.endpoint).strip() or DEFAULT_ENDPOINT
	if not endpoint.startswith("/"):
		endpoint = "/" + endpoint
	config.endpoint = endpoint

	config.log_level = str(config.log_level).upper()
	config.perplexity_api_key = str(config.perplexity_api_key or "")
	return config


def load_config(overrides: dict[str, Any] | None = None, env_file: str | None = None) -> Config:
	"""Load config with precedence: overrides > env vars (.env) > config.toml > defaults."""
	load_dotenv(env_file or find_dotenv(usecwd=True), override=False)

	config = Config()
	# The config dir itself can only come from the environment or overrides
	if os.getenv("DAILY_TODO_CONFIG_DIR"):
		_set_value(config, "config_dir", os.environ["DAILY_TODO_CONFIG_DIR"])
	if overrides and overrides.get("config_dir"):
		_set_value(config, "config_dir", overrides["config_dir"])

	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config = _apply_overrides(config, overrides or {})
	return _normalize(config)
