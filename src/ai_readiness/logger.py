"""
Centralized logging configuration for ai-readiness
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Optional

PACKAGE_LOGGER = "ai_readiness"

# Package-level logger, configured once
_logger: Optional[logging.Logger] = None


def _configure() -> logging.Logger:
    global _logger

    if _logger is None:
        _logger = logging.getLogger(PACKAGE_LOGGER)
        _logger.setLevel(logging.INFO)

        # Avoid adding handlers multiple times (e.g. Flask reloader)
        if not _logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)

            # Format: [LEVEL] message
            formatter = logging.Formatter(
                "[%(levelname)s] %(message)s",
                datefmt="%H:%M:%S",
            )
            console_handler.setFormatter(formatter)

            _logger.addHandler(console_handler)

    return _logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger that writes through the package handler.

    Args:
        name: Module name (``__name__``); child loggers of ``ai_readiness``
              propagate to the configured package logger.

    Returns:
        Logger instance
    """
    root = _configure()
    if name == PACKAGE_LOGGER or not name.startswith(PACKAGE_LOGGER + "."):
        return root
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """
    Set the package log level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               or integer level
    """
    logger = _configure()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def set_log_stream(stream: IO[str]) -> IO[str]:
    """
    Point the package handler at another stream.

    Returns:
        The stream the handler wrote to before
    """
    logger = _configure()
    previous = sys.stdout
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            previous = handler.stream
            handler.setStream(stream)
    return previous
