"""
SnapshotManager - capture, list, revert and prune file snapshots.

Snapshots are taken before a mutating tool runs so that every change can be
rolled back. Reverting optionally takes a backup snapshot first, making the
revert itself undoable.
"""

from __future__ import annotations

import os
import time
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path

from agent_rewind_engine.errors import ErrorKind
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.snapshots.models import (
    FileSnapshot,
    RevertError,
    RevertOptions,
    RevertResult,
    Snapshot,
    SnapshotHistory,
    SnapshotInfo,
    SnapshotMetadata,
)
from agent_rewind_engine.snapshots.store import SnapshotStore

logger = get_logger("snapshots")


def _absolute(path: str | Path, working_directory: str | Path) -> str:
    """Resolve *path* against *working_directory* without following symlinks."""
    return os.path.abspath(os.path.join(working_directory, os.path.expanduser(str(path))))


def _capture(path: str) -> FileSnapshot | None:
    """Read *path* as a FileSnapshot, or None if it is not a readable file."""
    try:
        with open(path, "rb") as fh:
            data = fh.read()
        stat = os.stat(path)
    except OSError as e:
        logger.debug("Not capturing %s: %s", path, e)
        return None
    return FileSnapshot.from_bytes(path, data, stat.st_mtime)


class SnapshotManager:
    """
    High-level snapshot API over a :class:`SnapshotStore`.

    Args:
        store_dir: Directory holding the ``<id>.json`` records.
        clock: Source of timestamps (epoch seconds).
    """

    def __init__(
        self,
        store_dir: str | Path,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = SnapshotStore(store_dir)
        self._clock = clock

    @property
    def store_dir(self) -> Path:
        return self.store.store_dir

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def create(
        self,
        reason: str,
        working_directory: str | Path,
        file_paths: Iterable[str | Path] = (),
        session_id: str | None = None,
        tool_used: str | None = None,
        user_message: str | None = None,
    ) -> Snapshot:
        """
        Capture the current content of *file_paths* and persist it.

        Paths that do not exist are recorded in ``metadata.missing_files``.
        Text is stored as-is and other content as base64. Directories and
        unreadable files are skipped.
        """
        wd = os.path.abspath(str(working_directory))
        files: list[FileSnapshot] = []
        missing: list[str] = []
        seen: set[str] = set()

        for raw in file_paths:
            path = _absolute(raw, wd)
            if path in seen:
                continue
            seen.add(path)

            if not os.path.lexists(path):
                missing.append(path)
                continue
            captured = _capture(path)
            if captured is not None:
                files.append(captured)

        snapshot = Snapshot(
            id=str(uuid.uuid4()),
            timestamp=self._clock(),
            reason=reason,
            files=tuple(files),
            metadata=SnapshotInfo(
                working_directory=wd,
                tool_used=tool_used,
                user_message=user_message,
                missing_files=tuple(missing),
            ),
            session_id=session_id,
        )
        self.store.save(snapshot)
        logger.info(
            "Created snapshot %s (%s): %d file(s), %d missing",
            snapshot.id, reason, len(files), len(missing),
        )
        return snapshot

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def load(self, snapshot_id: str) -> Snapshot | None:
        return self.store.load(snapshot_id)

    def list(self, session_id: str | None = None) -> list[SnapshotMetadata]:
        """List snapshots newest first, optionally for one session."""
        entries = [
            s.to_metadata()
            for s in self.store.iter_all()
            if session_id is None or s.session_id == session_id
        ]
        entries.sort(key=lambda m: m.timestamp, reverse=True)
        return entries

    def history(self, session_id: str) -> SnapshotHistory:
        snapshots = [
            s for s in (self.load(m.id) for m in self.list(session_id)) if s is not None
        ]
        now = self._clock()
        return SnapshotHistory(
            session_id=session_id,
            snapshots=snapshots,
            total_snapshots=len(snapshots),
            created_at=snapshots[-1].timestamp if snapshots else now,
            last_updated=snapshots[0].timestamp if snapshots else now,
        )

    # ------------------------------------------------------------------
    # Revert
    # ------------------------------------------------------------------

    def revert(
        self,
        options: RevertOptions | str,
        files: list[str] | None = None,
        create_backup: bool = True,
        remove_missing: bool = True,
    ) -> RevertResult:
        """
        Restore files to their content in a snapshot.

        Accepts either a :class:`RevertOptions` or a snapshot id plus keyword
        options. Per-file failures are collected and do not stop the rest.
        """
        if not isinstance(options, RevertOptions):
            options = RevertOptions(
                snapshot_id=options,
                files=files,
                create_backup=create_backup,
                remove_missing=remove_missing,
            )

        snapshot = self.load(options.snapshot_id)
        if snapshot is None:
            return RevertResult(
                success=False,
                error_kind=ErrorKind.SNAPSHOT_NOT_FOUND,
                error=f"Snapshot not found: {options.snapshot_id}",
            )

        wd = snapshot.metadata.working_directory
        to_restore = list(snapshot.files)
        to_remove = list(snapshot.metadata.missing_files) if options.remove_missing else []

        if options.files is not None:
            wanted = {_absolute(f, wd) for f in options.files}
            to_restore = [f for f in to_restore if f.path in wanted]
            to_remove = [p for p in to_remove if p in wanted]

        backup_id = None
        if options.create_backup:
            try:
                backup = self.create(
                    reason=f"Backup before reverting to {snapshot.id}",
                    working_directory=wd,
                    file_paths=[f.path for f in to_restore] + to_remove,
                    session_id=snapshot.session_id,
                )
            except OSError as e:
                logger.warning("Backup before reverting to %s failed: %s", snapshot.id, e)
                return RevertResult(
                    success=False,
                    error_kind=ErrorKind.EXECUTION_FAILURE,
                    error=f"Failed to create backup snapshot: {e}",
                )
            backup_id = backup.id

        result = RevertResult(success=True, backup_snapshot_id=backup_id)

        for file_snapshot in to_restore:
            try:
                os.makedirs(os.path.dirname(file_snapshot.path), exist_ok=True)
                with open(file_snapshot.path, "wb") as fh:
                    fh.write(file_snapshot.to_bytes())
                result.files_reverted.append(file_snapshot.path)
            except OSError as e:
                result.errors.append(RevertError(file=file_snapshot.path, error=str(e)))

        for path in to_remove:
            if os.path.isdir(path) and not os.path.islink(path):
                continue
            if not os.path.lexists(path):
                continue
            try:
                os.unlink(path)
                result.files_removed.append(path)
            except OSError as e:
                result.errors.append(RevertError(file=path, error=str(e)))

        if result.errors:
            result.success = False
            result.error_kind = ErrorKind.PARTIAL_REVERT_FAILURE
            result.error = f"Failed to revert {len(result.errors)} file(s)"
            logger.warning(
                "Revert to %s finished with %d error(s)", snapshot.id, len(result.errors),
            )
        else:
            logger.info(
                "Reverted to snapshot %s: %d restored, %d removed",
                snapshot.id, len(result.files_reverted), len(result.files_removed),
            )
        return result

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def delete(self, snapshot_id: str) -> bool:
        return self.store.delete(snapshot_id)

    def clean_old(self, keep_per_session: int = 10) -> int:
        """Keep the newest *keep_per_session* snapshots per session; delete the rest."""
        keep = max(0, keep_per_session)
        groups: dict[str | None, list[SnapshotMetadata]] = {}
        for meta in self.list():
            groups.setdefault(meta.session_id, []).append(meta)

        deleted = 0
        for entries in groups.values():
            for meta in entries[keep:]:
                if self.delete(meta.id):
                    deleted += 1

        if deleted:
            logger.info("Cleaned %d old snapshot(s)", deleted)
        return deleted
