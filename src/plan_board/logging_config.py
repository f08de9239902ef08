"""Logging setup for the plan-board service, driven by Config."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import Config

LOGGER_NAME = "plan_board"

# uvicorn's own loggers share the service log file
SERVER_LOGGERS = ("uvicorn.error", "uvicorn.access")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"


def _file_handler(config: Config) -> RotatingFileHandler:
	config.log_dir.mkdir(parents=True, exist_ok=True)
	handler = RotatingFileHandler(
		config.log_dir / f"{LOGGER_NAME}.log",
		maxBytes=10 * 1024 * 1024,  # 10 MB
		backupCount=5,
	)
	handler.setLevel(logging.DEBUG)
	handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
	return handler


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
	"""
	Configure the package logger from the loaded config.

	Args:
		config: Supplies log_level and log_dir
		console: Also log to stdout

	Returns:
		The plan_board logger
	"""
	log_level = getattr(logging, config.log_level.upper(), logging.INFO)

	logger = logging.getLogger(LOGGER_NAME)
	logger.setLevel(log_level)

	# Repeated calls (tests, reloads) only adjust the level
	if logger.handlers:
		return logger

	if console:
		console_handler = logging.StreamHandler(sys.stdout)
		console_handler.setLevel(log_level)
		console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
		logger.addHandler(console_handler)

	file_handler = _file_handler(config)
	logger.addHandler(file_handler)
	for name in SERVER_LOGGERS:
		logging.getLogger(name).addHandler(file_handler)

	logger.debug(f"Logging to {config.log_dir} at {config.log_level}")
	return logger


def teardown_logging() -> None:
	"""Detach and close every handler installed by setup_logging."""
	logger = logging.getLogger(LOGGER_NAME)
	for handler in list(logger.handlers):
		for name in SERVER_LOGGERS:
			logging.getLogger(name).removeHandler(handler)
		logger.removeHandler(handler)
		handler.close()
