"""
Snapshot comparison and text diff rendering.

The line diff is an index-wise equality scan: line *i* of the old content is
compared with line *i* of the new content. It is cheap and predictable but
not a minimal edit script; an inserted line shows every following line as
changed.
"""

from __future__ import annotations

from datetime import datetime

from agent_rewind_engine.errors import SnapshotNotFoundError
from agent_rewind_engine.snapshots.manager import SnapshotManager
from agent_rewind_engine.snapshots.models import (
    ChangeType,
    DiffSummary,
    FileChange,
    FileSnapshot,
    Snapshot,
    SnapshotDiff,
)

_SEPARATOR_WIDTH = 80

_CHANGE_SYMBOLS = {"added": "+", "modified": "~", "deleted": "-"}


def render_line_diff(old: str, new: str, path: str, context_lines: int = 1) -> str:
    """
    Render a unified-style diff of *old* and *new*.

    Differing line indices within ``2 * context_lines`` of each other share a
    hunk. Each hunk carries up to *context_lines* unchanged lines on each side.
    """
    context_lines = max(0, context_lines)
    old_lines = old.split("\n")
    new_lines = new.split("\n")
    total = max(len(old_lines), len(new_lines))

    def line_at(lines: list[str], i: int) -> str | None:
        return lines[i] if i < len(lines) else None

    changed = [i for i in range(total) if line_at(old_lines, i) != line_at(new_lines, i)]

    out = [f"--- {path}", f"+++ {path}"]
    if not changed:
        return "\n".join(out)

    groups: list[list[int]] = [[changed[0], changed[0]]]
    for i in changed[1:]:
        if i - groups[-1][1] <= 2 * context_lines + 1:
            groups[-1][1] = i
        else:
            groups.append([i, i])

    for first, last in groups:
        start = max(0, first - context_lines)
        end = min(total - 1, last + context_lines)
        body: list[str] = []
        old_count = new_count = 0

        for i in range(start, end + 1):
            old_line = line_at(old_lines, i)
            new_line = line_at(new_lines, i)
            if old_line == new_line:
                body.append(f" {old_line}")
                old_count += 1
                new_count += 1
                continue
            if old_line is not None:
                body.append(f"-{old_line}")
                old_count += 1
            if new_line is not None:
                body.append(f"+{new_line}")
                new_count += 1

        old_start = start + 1 if old_count else start
        new_start = start + 1 if new_count else start
        out.append(f"@@ -{old_start},{old_count} +{new_start},{new_count} @@")
        out.extend(body)

    return "\n".join(out)


def _whole_file(content: str, path: str, sign: str) -> str:
    header = f"+++ {path}" if sign == "+" else f"--- {path}"
    return "\n".join([header, *(f"{sign}{line}" for line in content.split("\n"))])


def _text(snapshot: FileSnapshot | None) -> str | None:
    if snapshot is None or snapshot.is_binary:
        return None
    return snapshot.content


def _binary_note(path: str, old: FileSnapshot | None, new: FileSnapshot | None) -> str:
    if old is None:
        return f"Binary file {path} added ({new.size} bytes)"
    if new is None:
        return f"Binary file {path} deleted ({old.size} bytes)"
    return f"Binary file {path} changed ({old.size} -> {new.size} bytes)"


class DiffEngine:
    """Compare snapshots held by a :class:`SnapshotManager`."""

    def __init__(self, manager: SnapshotManager, context_lines: int = 1) -> None:
        self.manager = manager
        self.context_lines = context_lines

    def _require(self, snapshot_id: str) -> Snapshot:
        snapshot = self.manager.load(snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(snapshot_id)
        return snapshot

    def compare(
        self, snapshot_id: str, previous_snapshot_id: str | None = None,
    ) -> SnapshotDiff:
        """
        Describe how *snapshot_id* differs from *previous_snapshot_id*.

        Without a previous snapshot every captured file counts as added.

        Raises:
            SnapshotNotFoundError: If either snapshot cannot be loaded.
        """
        current = self._require(snapshot_id)
        previous = self._require(previous_snapshot_id) if previous_snapshot_id else None

        current_files = {f.path: f for f in current.files}
        previous_files = {f.path: f for f in previous.files} if previous else {}

        changes: list[FileChange] = []
        for path, new in current_files.items():
            old = previous_files.get(path)
            if old is None:
                changes.append(self._change(path, "added", None, new))
            elif old.hash != new.hash:
                changes.append(self._change(path, "modified", old, new))

        for path, old in previous_files.items():
            if path not in current_files:
                changes.append(self._change(path, "deleted", old, None))

        summary = DiffSummary(
            files_added=sum(1 for c in changes if c.type == "added"),
            files_modified=sum(1 for c in changes if c.type == "modified"),
            files_deleted=sum(1 for c in changes if c.type == "deleted"),
        )
        return SnapshotDiff(
            snapshot_id=snapshot_id,
            previous_snapshot_id=previous_snapshot_id,
            timestamp=current.timestamp,
            changes=tuple(changes),
            summary=summary,
        )

    def _change(
        self,
        path: str,
        change_type: ChangeType,
        old: FileSnapshot | None,
        new: FileSnapshot | None,
    ) -> FileChange:
        old_text, new_text = _text(old), _text(new)
        if (old is not None and old_text is None) or (new is not None and new_text is None):
            diff = _binary_note(path, old, new)
        elif old_text is None:
            diff = _whole_file(new_text, path, "+")
        elif new_text is None:
            diff = _whole_file(old_text, path, "-")
        else:
            diff = render_line_diff(old_text, new_text, path, self.context_lines)
        return FileChange(
            path=path, type=change_type, diff=diff, old_content=old_text, new_content=new_text,
        )

    @staticmethod
    def format_summary(diff: SnapshotDiff) -> str:
        when = datetime.fromtimestamp(diff.timestamp).strftime("%Y-%m-%d %H:%M:%S")
        lines = [
            f"Snapshot: {diff.snapshot_id}",
            f"Timestamp: {when}",
            "",
            "Changes:",
            f"  Added: {diff.summary.files_added} file(s)",
            f"  Modified: {diff.summary.files_modified} file(s)",
            f"  Deleted: {diff.summary.files_deleted} file(s)",
            "",
        ]
        lines.extend(f"{_CHANGE_SYMBOLS[c.type]} {c.path}" for c in diff.changes)
        return "\n".join(lines) + "\n"

    @classmethod
    def format_full(cls, diff: SnapshotDiff) -> str:
        parts = [cls.format_summary(diff), "", "=" * _SEPARATOR_WIDTH, ""]
        for change in diff.changes:
            parts.append(f"File: {change.path} ({change.type})")
            parts.append("-" * _SEPARATOR_WIDTH)
            parts.append(change.diff)
            parts.append("")
        return "\n".join(parts)
