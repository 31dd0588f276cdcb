"""
JSON file store for snapshots.

Each snapshot is one ``<id>.json`` file. Writes go through a temporary file
and ``os.replace`` so readers never observe a partial record. Writers are
serialized with an in-process lock plus an advisory ``fcntl`` lock on
``.lock`` in the store directory, so concurrent processes sharing a store do
not interleave.
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import os
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path

from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.snapshots.models import Snapshot

logger = get_logger("snapshots.store")

_LOCK_FILE = ".lock"


class SnapshotStore:
    """Persist and enumerate :class:`Snapshot` records in a directory."""

    def __init__(self, store_dir: str | Path) -> None:
        self.store_dir = Path(store_dir)
        self._lock = threading.RLock()

    def _ensure_dir(self) -> None:
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _record_path(self, snapshot_id: str) -> Path:
        # ids are uuid4 strings; reject anything that could escape the directory
        if not snapshot_id or "/" in snapshot_id or "\\" in snapshot_id or snapshot_id.startswith("."):
            raise ValueError(f"Invalid snapshot id: {snapshot_id!r}")
        return self.store_dir / f"{snapshot_id}.json"

    @contextlib.contextmanager
    def write_lock(self) -> Iterator[None]:
        """Hold the single-writer lock for the store."""
        self._ensure_dir()
        with self._lock:
            with open(self.store_dir / _LOCK_FILE, "a") as lock_fh:
                fcntl.flock(lock_fh.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_fh.fileno(), fcntl.LOCK_UN)

    def save(self, snapshot: Snapshot) -> Path:
        """Write *snapshot* atomically and return its record path."""
        with self.write_lock():
            path = self._record_path(snapshot.id)
            fd, tmp = tempfile.mkstemp(dir=self.store_dir, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(snapshot.to_dict(), fh, indent=2)
                os.replace(tmp, path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp)
                raise
        return path

    def load(self, snapshot_id: str) -> Snapshot | None:
        """Load a snapshot, or ``None`` if it is missing or unreadable."""
        try:
            path = self._record_path(snapshot_id)
        except ValueError:
            return None
        if not path.is_file():
            return None
        return self._read(path)

    def delete(self, snapshot_id: str) -> bool:
        """Delete a snapshot record. Returns True if it existed."""
        try:
            path = self._record_path(snapshot_id)
        except ValueError:
            return False
        with self.write_lock():
            try:
                path.unlink()
            except FileNotFoundError:
                return False
        return True

    def iter_all(self) -> Iterator[Snapshot]:
        """Yield every readable snapshot; corrupt records are skipped."""
        if not self.store_dir.is_dir():
            return
        for path in sorted(self.store_dir.glob("*.json")):
            if path.name.startswith("."):
                continue
            snapshot = self._read(path)
            if snapshot is not None:
                yield snapshot

    def _read(self, path: Path) -> Snapshot | None:
        try:
            with open(path, encoding="utf-8") as fh:
                return Snapshot.from_dict(json.load(fh))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Skipping corrupt snapshot record %s: %s", path.name, e)
            return None
