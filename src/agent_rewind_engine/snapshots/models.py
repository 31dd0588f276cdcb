"""
Snapshot data models.

A :class:`Snapshot` is an immutable point-in-time copy of a set of files,
stored as one JSON record. The remaining types describe listings, revert
requests/results and snapshot-to-snapshot diffs.
"""

from __future__ import annotations

import base64
import hashlib
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from agent_rewind_engine.errors import ErrorKind

ChangeType = Literal["added", "modified", "deleted"]


def compute_hash(content: str | bytes) -> str:
    """SHA-256 hex digest of *content*; text is hashed as its UTF-8 bytes."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class FileSnapshot:
    path: str
    content: str
    hash: str
    size: int
    mtime: float
    # "utf-8" for text, "base64" when the bytes are not valid UTF-8
    encoding: str = "utf-8"

    @classmethod
    def from_bytes(cls, path: str, data: bytes, mtime: float) -> FileSnapshot:
        try:
            content, encoding = data.decode("utf-8"), "utf-8"
        except UnicodeDecodeError:
            content, encoding = base64.b64encode(data).decode("ascii"), "base64"
        return cls(
            path=path,
            content=content,
            hash=compute_hash(data),
            size=len(data),
            mtime=mtime,
            encoding=encoding,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileSnapshot:
        return cls(
            path=data["path"],
            content=data["content"],
            hash=data["hash"],
            size=int(data.get("size", 0)),
            mtime=float(data.get("mtime", 0.0)),
            encoding=data.get("encoding", "utf-8"),
        )

    @property
    def is_binary(self) -> bool:
        return self.encoding == "base64"

    def to_bytes(self) -> bytes:
        """The captured file content, byte for byte."""
        if self.is_binary:
            return base64.b64decode(self.content)
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class SnapshotInfo:
    """Context recorded alongside a snapshot."""

    working_directory: str
    tool_used: str | None = None
    user_message: str | None = None
    # Requested paths that did not exist when the snapshot was taken
    missing_files: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotInfo:
        return cls(
            working_directory=data.get("working_directory", ""),
            tool_used=data.get("tool_used"),
            user_message=data.get("user_message"),
            missing_files=tuple(data.get("missing_files") or ()),
        )


@dataclass(frozen=True)
class Snapshot:
    id: str
    timestamp: float
    reason: str
    files: tuple[FileSnapshot, ...]
    metadata: SnapshotInfo
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["files"] = [asdict(f) for f in self.files]
        data["metadata"]["missing_files"] = list(self.metadata.missing_files)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            id=data["id"],
            timestamp=float(data["timestamp"]),
            reason=data.get("reason", ""),
            files=tuple(FileSnapshot.from_dict(f) for f in data.get("files") or ()),
            metadata=SnapshotInfo.from_dict(data.get("metadata") or {}),
            session_id=data.get("session_id"),
        )

    def get_file(self, path: str) -> FileSnapshot | None:
        for f in self.files:
            if f.path == path:
                return f
        return None

    def to_metadata(self) -> SnapshotMetadata:
        return SnapshotMetadata(
            id=self.id,
            timestamp=self.timestamp,
            reason=self.reason,
            file_count=len(self.files),
            session_id=self.session_id,
        )


@dataclass(frozen=True)
class SnapshotMetadata:
    """Listing entry for a snapshot (no file contents)."""

    id: str
    timestamp: float
    reason: str
    file_count: int
    session_id: str | None = None


@dataclass
class SnapshotHistory:
    session_id: str
    snapshots: list[Snapshot]  # newest first
    total_snapshots: int
    created_at: float
    last_updated: float


@dataclass
class RevertOptions:
    snapshot_id: str
    files: list[str] | None = None
    create_backup: bool = True
    remove_missing: bool = True


@dataclass(frozen=True)
class RevertError:
    file: str
    error: str


@dataclass
class RevertResult:
    success: bool
    files_reverted: list[str] = field(default_factory=list)
    files_removed: list[str] = field(default_factory=list)
    errors: list[RevertError] = field(default_factory=list)
    backup_snapshot_id: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None


@dataclass(frozen=True)
class FileChange:
    path: str
    type: ChangeType
    diff: str
    old_content: str | None = None
    new_content: str | None = None


@dataclass(frozen=True)
class DiffSummary:
    files_added: int = 0
    files_modified: int = 0
    files_deleted: int = 0


@dataclass(frozen=True)
class SnapshotDiff:
    snapshot_id: str
    timestamp: float
    changes: tuple[FileChange, ...]
    summary: DiffSummary
    previous_snapshot_id: str | None = None
