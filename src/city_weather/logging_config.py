"""Centralized logging configuration."""

import logging
import os
from collections import deque
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

THIRD_PARTY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "fastapi",
    "mcp",
)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure a consistent logging format for the entire application.

    Args:
        level: Root log level name
        log_file: Optional path of an append-only log file
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    log_level = logging.getLevelName(level) if isinstance(level, str) else level
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Create a console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    handlers = [console_handler]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        handlers.append(file_handler)

    # Configure specific third-party loggers to use the same format
    for logger_name in THIRD_PARTY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicate logs
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # Don't propagate to avoid duplicate messages
        logger.propagate = False

        for handler in handlers:
            logger.addHandler(handler)


def read_log_tail(log_file: str, max_lines: int = 50) -> Optional[str]:
    """Return the last lines of a log file.

    Args:
        log_file: Path of the log file
        max_lines: Maximum number of trailing lines to return

    Returns:
        The trailing lines joined by newlines, or None if the file does not exist
    """
    if max_lines < 1:
        raise ValueError("max_lines must be at least 1")

    try:
        with open(log_file, "r", encoding="utf-8") as handle:
            lines = deque(handle, maxlen=max_lines)
    except FileNotFoundError:
        return None

    return "".join(lines)
