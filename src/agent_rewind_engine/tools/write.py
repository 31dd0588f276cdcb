"""write_file - create or overwrite files."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.write")


@dataclass(frozen=True)
class WriteFileParams:
    file_path: str
    content: str


class WriteFileTool(BaseTool):
    """Create or overwrite files, creating parent directories as needed."""

    needs_snapshot = True
    params_type = WriteFileParams

    @property
    def name(self) -> str:
        return "write_file"

    @property
    def description(self) -> str:
        return "Create or overwrite a file with content"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("file_path", "string", "Path to the file to write", required=True),
            ToolParameter("content", "string", "Content to write to the file", required=True),
        ]

    def affected_paths(self, params: WriteFileParams) -> list[str]:
        return [str(self._resolve_path(params.file_path))] if params.file_path else []

    async def execute(self, params: WriteFileParams) -> dict[str, Any]:
        if not params.file_path:
            raise ToolExecutionError("file_path is required")

        resolved = self._resolve_path(params.file_path)
        if resolved.is_dir():
            raise ToolExecutionError(f"{resolved} is a directory, not a file")

        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            existed = resolved.exists()
            with open(resolved, "w", encoding="utf-8", newline="") as fh:
                fh.write(params.content)
        except PermissionError as e:
            raise ToolExecutionError(f"Permission denied writing to {resolved}") from e

        bytes_written = len(params.content.encode("utf-8"))
        logger.debug(
            "%s %s (%d bytes)", "Overwrote" if existed else "Created", resolved, bytes_written,
        )
        return {
            "file_path": str(resolved),
            "bytes_written": bytes_written,
            "created": not existed,
        }
