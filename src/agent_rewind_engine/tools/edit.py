"""edit_file - exact string replacement in files."""
from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.edit")

_MAX_DIFF_LINES = 100


@dataclass(frozen=True)
class EditFileParams:
    file_path: str
    old_string: str
    new_string: str
    replace_all: bool = False


class EditFileTool(BaseTool):
    """Perform exact string replacement in files."""

    needs_snapshot = True
    params_type = EditFileParams

    @property
    def name(self) -> str:
        return "edit_file"

    @property
    def description(self) -> str:
        return (
            "Make precise edits to a file using string replacement. The old_string "
            "must appear exactly once unless replace_all is true."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("file_path", "string", "Path to the file to edit", required=True),
            ToolParameter("old_string", "string", "Exact string to find and replace", required=True),
            ToolParameter("new_string", "string", "String to replace with", required=True),
            ToolParameter(
                "replace_all", "boolean",
                "Replace every occurrence instead of requiring a unique match",
                default=False,
            ),
        ]

    def affected_paths(self, params: EditFileParams) -> list[str]:
        return [str(self._resolve_path(params.file_path))] if params.file_path else []

    async def execute(self, params: EditFileParams) -> dict[str, Any]:
        if not params.file_path:
            raise ToolExecutionError("file_path is required")
        if not params.old_string:
            raise ToolExecutionError("old_string is required and cannot be empty")
        if params.old_string == params.new_string:
            raise ToolExecutionError("old_string and new_string must be different")

        resolved = self._resolve_path(params.file_path)

        if not resolved.exists():
            raise ToolExecutionError(f"File not found: {resolved}")
        if resolved.is_dir():
            raise ToolExecutionError(f"{resolved} is a directory, not a file")

        # newline="" keeps line endings byte-for-byte outside the replaced span
        try:
            with open(resolved, encoding="utf-8", newline="") as fh:
                original = fh.read()
        except UnicodeDecodeError as e:
            raise ToolExecutionError(f"{resolved.name} is not valid UTF-8 text") from e

        count = original.count(params.old_string)

        if count == 0:
            msg = f"String not found in {resolved.name}: {params.old_string[:50]!r}"
            hint = self._find_close_match(original, params.old_string)
            if hint:
                msg += f"\n\nDid you mean:\n{hint}"
            raise ToolExecutionError(msg)

        if count > 1 and not params.replace_all:
            raise ToolExecutionError(
                f"String appears {count} times in {resolved.name}. "
                "Provide more surrounding context so it appears exactly once, "
                "or set replace_all=true."
            )

        if params.replace_all:
            updated = original.replace(params.old_string, params.new_string)
        else:
            updated = original.replace(params.old_string, params.new_string, 1)

        with open(resolved, "w", encoding="utf-8", newline="") as fh:
            fh.write(updated)

        logger.debug("Edited %s: %d replacement(s)", resolved, count)
        return {
            "file_path": str(resolved),
            "replacements": count,
            "changes": {
                "old_length": len(params.old_string),
                "new_length": len(params.new_string),
            },
            "diff": self._make_diff(original, updated, resolved.name),
        }

    def _make_diff(self, original: str, updated: str, filename: str) -> str:
        """Generate a unified diff preview between original and updated content."""
        diff_lines = list(
            difflib.unified_diff(
                original.splitlines(keepends=True),
                updated.splitlines(keepends=True),
                fromfile=f"a/{filename}",
                tofile=f"b/{filename}",
                lineterm="",
            )
        )

        if not diff_lines:
            return "(no visible diff)"

        if len(diff_lines) > _MAX_DIFF_LINES:
            hidden = len(diff_lines) - _MAX_DIFF_LINES
            diff_lines = diff_lines[:_MAX_DIFF_LINES]
            diff_lines.append(f"... ({hidden} more lines)")

        return "".join(line.rstrip("\n") + "\n" for line in diff_lines)

    def _find_close_match(self, content: str, target: str) -> str | None:
        """Try to find a line close to the first line of *target*."""
        if len(target) > 500 or len(target) < 3:
            return None

        target_lines = target.splitlines()
        if not target_lines:
            return None

        first_target_line = target_lines[0].strip()
        if len(first_target_line) < 3:
            return None

        matches = difflib.get_close_matches(
            first_target_line,
            [line.strip() for line in content.splitlines()],
            n=1,
            cutoff=0.6,
        )
        return matches[0] if matches else None
