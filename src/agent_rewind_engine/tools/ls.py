"""list_directory - list directory contents."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.ls")

# Safety limit for recursive listing
_MAX_ENTRIES = 1000

_SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv"}


@dataclass(frozen=True)
class ListDirectoryParams:
    path: str | None = None
    recursive: bool = False


class ListDirectoryTool(BaseTool):
    """List files and directories; directories carry a trailing slash."""

    params_type = ListDirectoryParams

    @property
    def name(self) -> str:
        return "list_directory"

    @property
    def description(self) -> str:
        return "List files and directories"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("path", "string", "Path to list (default: current directory)"),
            ToolParameter("recursive", "boolean", "List recursively", default=False),
        ]

    async def execute(self, params: ListDirectoryParams) -> dict[str, Any]:
        target = self._resolve_path(params.path) if params.path else Path(self.cwd).absolute()

        if not target.exists():
            raise ToolExecutionError(f"Path not found: {target}")
        if not target.is_dir():
            raise ToolExecutionError(f"{target} is not a directory")

        try:
            if params.recursive:
                files, truncated = self._list_recursive(target)
            else:
                files = sorted(
                    f"{entry.name}/" if entry.is_dir() else entry.name
                    for entry in target.iterdir()
                )
                truncated = False
        except PermissionError as e:
            raise ToolExecutionError(f"Permission denied: {target}") from e

        logger.debug("Listed %s (%d entries)", target, len(files))
        return {
            "path": str(target),
            "files": files,
            "total": len(files),
            "truncated": truncated,
        }

    def _list_recursive(self, directory: Path) -> tuple[list[str], bool]:
        entries: list[str] = []
        for root_path, dirs, files in os.walk(directory):
            root = Path(root_path)
            dirs[:] = sorted(d for d in dirs if d not in _SKIP_DIRS)

            for d in dirs:
                entries.append(f"{(root / d).relative_to(directory).as_posix()}/")
            for f in sorted(files):
                entries.append((root / f).relative_to(directory).as_posix())

            if len(entries) >= _MAX_ENTRIES:
                return sorted(entries[:_MAX_ENTRIES]), True

        return sorted(entries), False
