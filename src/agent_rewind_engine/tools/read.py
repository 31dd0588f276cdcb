"""read_file - read file contents with optional line range."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.read")

# Maximum line length before truncation
_MAX_LINE_LENGTH = 2000


@dataclass(frozen=True)
class ReadFileParams:
    file_path: str
    offset: int | None = None
    limit: int | None = None


class ReadFileTool(BaseTool):
    """Read a text file and return numbered lines."""

    params_type = ReadFileParams

    @property
    def name(self) -> str:
        return "read_file"

    @property
    def description(self) -> str:
        return "Read file contents with optional line range"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("file_path", "string", "Path to the file to read", required=True),
            ToolParameter("offset", "integer", "Line number to start reading from (1-based)"),
            ToolParameter("limit", "integer", "Number of lines to read"),
        ]

    async def execute(self, params: ReadFileParams) -> dict[str, Any]:
        if not params.file_path:
            raise ToolExecutionError("file_path is required")

        resolved = self._resolve_path(params.file_path)

        if not resolved.exists():
            raise ToolExecutionError(f"File not found: {resolved}")
        if resolved.is_dir():
            raise ToolExecutionError(
                f"{resolved} is a directory, not a file. Use list_directory instead."
            )

        try:
            text = resolved.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Failed to read %s: %s", resolved, e)
            raise ToolExecutionError(f"Error reading file: {e}") from e

        lines = text.split("\n")
        total_lines = len(lines)

        start = max(1, params.offset or 1)
        limit = params.limit if params.limit is not None else total_lines
        selected = lines[start - 1:start - 1 + max(0, limit)]

        numbered: list[str] = []
        for i, line in enumerate(selected, start=start):
            if len(line) > _MAX_LINE_LENGTH:
                line = line[:_MAX_LINE_LENGTH] + "... (truncated)"
            numbered.append(f"{i}: {line}")

        logger.debug("Read %s (%d of %d lines)", resolved, len(selected), total_lines)
        return {
            "file_path": str(resolved),
            "content": "\n".join(numbered),
            "total_lines": total_lines,
            "start_line": start,
            "end_line": start + len(selected) - 1,
        }
