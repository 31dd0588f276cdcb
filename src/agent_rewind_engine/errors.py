"""
Error kinds and exceptions used across the engine.

Failures that cross the engine boundary are reported as structured results
tagged with an :class:`ErrorKind`. The exceptions below are raised internally
(tools, diff lookups) and carry the same kind so callers can branch on it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Categories of failure reported by the engine."""

    UNKNOWN_TOOL = "unknown_tool"
    MISSING_PARAMETER = "missing_parameter"
    PERMISSION_DENIED = "permission_denied"
    EXECUTION_FAILURE = "execution_failure"
    SNAPSHOT_NOT_FOUND = "snapshot_not_found"
    PARTIAL_REVERT_FAILURE = "partial_revert_failure"


class RewindError(Exception):
    """Base exception for the rewind engine."""

    kind: ErrorKind = ErrorKind.EXECUTION_FAILURE


class ToolExecutionError(RewindError):
    """
    Raised by a tool when the underlying operation fails.

    ``data`` optionally carries partial output (e.g. stdout/stderr of a
    failed command) that is attached to the failed result.
    """

    kind = ErrorKind.EXECUTION_FAILURE

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.data = data


class SnapshotNotFoundError(RewindError, LookupError):
    """Raised when a snapshot id cannot be loaded from the store."""

    kind = ErrorKind.SNAPSHOT_NOT_FOUND

    def __init__(self, snapshot_id: str) -> None:
        super().__init__(f"Snapshot not found: {snapshot_id}")
        self.snapshot_id = snapshot_id
