"""Centralized logging configuration for daily-todo-mcp."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import Config

LOGGER_NAME = "daily_todo_mcp"


def setup_logging(config: Config, name: str = LOGGER_NAME) -> logging.Logger:
	"""
	Set up logging with console and file handlers.

	The console handler writes to stderr: in stdio mode stdout carries the
	protocol stream and must stay clean.

	Args:
		config: Loaded configuration (log_level, log_dir)
		name: Logger name

	Returns:
		Configured logger
	"""
	log_level = getattr(logging, config.log_level.upper(), logging.INFO)

	logger = logging.getLogger(name)
	logger.setLevel(log_level)

	# Avoid duplicate handlers
	if logger.handlers:
		return logger

	detailed_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	simple_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(message)s",
		datefmt="%H:%M:%S",
	)

	console_handler = logging.StreamHandler(sys.stderr)
	console_handler.setLevel(log_level)
	console_handler.setFormatter(simple_formatter)
	logger.addHandler(console_handler)

	try:
		config.log_dir.mkdir(parents=True, exist_ok=True)
		file_handler = RotatingFileHandler(
			config.log_dir / f"{name}.log",
			maxBytes=10 * 1024 * 1024,  # 10 MB
			backupCount=5,
			encoding="utf-8",
		)
	except OSError as e:
		logger.warning(f"File logging disabled ({config.log_dir}): {e}")
	else:
		file_handler.setLevel(logging.DEBUG)  # File gets all logs
		file_handler.setFormatter(detailed_formatter)
		logger.addHandler(file_handler)

	return logger
