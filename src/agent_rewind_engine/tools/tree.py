"""tree - render a directory tree."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.tree")

_SKIP_DIRS = {".git", "node_modules", "__pycache__"}


@dataclass(frozen=True)
class TreeParams:
    path: str | None = None
    max_depth: int = 3
    show_hidden: bool = False


class TreeTool(BaseTool):
    """Show the directory structure, directories before files."""

    params_type = TreeParams

    @property
    def name(self) -> str:
        return "tree"

    @property
    def description(self) -> str:
        return "Show directory tree structure"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("path", "string", "Root directory (default: current directory)"),
            ToolParameter("max_depth", "integer", "Maximum depth to descend", default=3),
            ToolParameter("show_hidden", "boolean", "Include dotfiles", default=False),
        ]

    async def execute(self, params: TreeParams) -> dict[str, Any]:
        root = self._resolve_path(params.path) if params.path else Path(self.cwd).absolute()
        if not root.exists():
            raise ToolExecutionError(f"Path not found: {root}")
        if not root.is_dir():
            raise ToolExecutionError(f"{root} is not a directory")

        lines = [root.name or str(root)]
        counts = {"directories": 0, "files": 0}
        self._walk(root, "", 1, max(0, int(params.max_depth)), params.show_hidden, lines, counts)

        return {
            "path": str(root),
            "tree": "\n".join(lines),
            "directories": counts["directories"],
            "files": counts["files"],
        }

    def _walk(
        self,
        directory: Path,
        prefix: str,
        depth: int,
        max_depth: int,
        show_hidden: bool,
        lines: list[str],
        counts: dict[str, int],
    ) -> None:
        if depth > max_depth:
            return
        try:
            entries = [
                e for e in directory.iterdir()
                if (show_hidden or not e.name.startswith("."))
                and not (e.is_dir() and e.name in _SKIP_DIRS)
            ]
        except PermissionError:
            lines.append(f"{prefix}└── [permission denied]")
            return

        entries.sort(key=lambda e: (not e.is_dir(), e.name.lower()))

        for i, entry in enumerate(entries):
            last = i == len(entries) - 1
            connector = "└── " if last else "├── "
            if entry.is_dir():
                counts["directories"] += 1
                lines.append(f"{prefix}{connector}{entry.name}/")
                extension = "    " if last else "│   "
                self._walk(
                    entry, prefix + extension, depth + 1, max_depth, show_hidden, lines, counts,
                )
            else:
                counts["files"] += 1
                lines.append(f"{prefix}{connector}{entry.name}")
