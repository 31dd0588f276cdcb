"""
Logging utilities for the rewind engine.

All modules log under the ``agent_rewind_engine`` logger so applications can
route tool, snapshot and permission events with a single handler.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_ROOT_NAME = "agent_rewind_engine"
_root_logger = logging.getLogger(_ROOT_NAME)

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | None = None,
) -> None:
    """
    Configure logging for the rewind engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream (defaults to stderr)
        file: Optional file path to write logs

    Example:
        from agent_rewind_engine.logging import setup_logging

        setup_logging("DEBUG")
        setup_logging("INFO", file="rewind.log")
    """
    level = _coerce_level(level)
    _root_logger.setLevel(level)
    _root_logger.handlers.clear()

    formatter = logging.Formatter(format or DEFAULT_FORMAT)

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    _root_logger.addHandler(stream_handler)

    if file:
        file_handler = logging.FileHandler(file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        _root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name (e.g., "executor", "snapshots.manager")

    Returns:
        Logger instance
    """
    if name.startswith(f"{_ROOT_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


def set_level(level: str | int) -> None:
    """Set the log level for the rewind engine."""
    _root_logger.setLevel(_coerce_level(level))


_saved_level: int | None = None


def disable() -> None:
    """Disable all logging for the rewind engine."""
    global _saved_level
    if not _root_logger.disabled:
        _saved_level = _root_logger.level
    # Child loggers inherit the level, so this silences the whole hierarchy
    _root_logger.setLevel(logging.CRITICAL + 1)
    _root_logger.disabled = True


def enable() -> None:
    """Re-enable logging for the rewind engine."""
    global _saved_level
    if _root_logger.disabled and _saved_level is not None:
        _root_logger.setLevel(_saved_level)
        _saved_level = None
    _root_logger.disabled = False
