"""
Snapshot module.

Captures file contents before mutations, stores them as JSON records and
restores or compares them later.
"""

from agent_rewind_engine.snapshots.diff import DiffEngine, render_line_diff
from agent_rewind_engine.snapshots.manager import SnapshotManager
from agent_rewind_engine.snapshots.models import (
    DiffSummary,
    FileChange,
    FileSnapshot,
    RevertError,
    RevertOptions,
    RevertResult,
    Snapshot,
    SnapshotDiff,
    SnapshotHistory,
    SnapshotInfo,
    SnapshotMetadata,
    compute_hash,
)
from agent_rewind_engine.snapshots.store import SnapshotStore

__all__ = [
    # Manager
    "SnapshotManager",
    "SnapshotStore",
    # Diff
    "DiffEngine",
    "render_line_diff",
    # Models
    "DiffSummary",
    "FileChange",
    "FileSnapshot",
    "RevertError",
    "RevertOptions",
    "RevertResult",
    "Snapshot",
    "SnapshotDiff",
    "SnapshotHistory",
    "SnapshotInfo",
    "SnapshotMetadata",
    "compute_hash",
]
