"""glob - find files by glob pattern."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.find")

_DEFAULT_LIMIT = 1000


@dataclass(frozen=True)
class GlobParams:
    pattern: str
    path: str | None = None


class GlobTool(BaseTool):
    """Find files matching a glob pattern, returned as sorted relative paths."""

    params_type = GlobParams

    @property
    def name(self) -> str:
        return "glob"

    @property
    def description(self) -> str:
        return "Find files matching a glob pattern (e.g. '**/*.py', 'src/*.ts')"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("pattern", "string", "Glob pattern to match files against", required=True),
            ToolParameter("path", "string", "Directory to search in (default: current directory)"),
        ]

    async def execute(self, params: GlobParams) -> dict[str, Any]:
        if not params.pattern:
            raise ToolExecutionError("pattern is required")

        search_dir = self._resolve_path(params.path) if params.path else Path(self.cwd).absolute()
        if not search_dir.exists():
            raise ToolExecutionError(f"Directory not found: {search_dir}")
        if not search_dir.is_dir():
            raise ToolExecutionError(f"{search_dir} is not a directory")

        try:
            found = sorted(
                p.relative_to(search_dir).as_posix()
                for p in search_dir.glob(params.pattern)
                if p.is_file()
            )
        except (ValueError, NotImplementedError) as e:
            raise ToolExecutionError(f"Invalid glob pattern: {e}") from e

        truncated = len(found) > _DEFAULT_LIMIT
        files = found[:_DEFAULT_LIMIT]

        logger.debug("Glob %r in %s: %d files", params.pattern, search_dir, len(found))
        return {
            "pattern": params.pattern,
            "path": str(search_dir),
            "files": files,
            "total": len(found),
            "truncated": truncated,
        }
