"""search_files - regex search across files."""
from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.grep")

_MAX_MATCHES = 500
_MAX_LINE_LENGTH = 500

_SKIP_DIRS = {
    ".git", "node_modules", "__pycache__", ".venv", "venv",
    ".tox", ".mypy_cache", ".pytest_cache", "dist", "build",
}


@dataclass(frozen=True)
class SearchFilesParams:
    pattern: str
    path: str | None = None
    file_pattern: str | None = None


class SearchFilesTool(BaseTool):
    """Case-insensitive regex search over text files."""

    params_type = SearchFilesParams

    @property
    def name(self) -> str:
        return "search_files"

    @property
    def description(self) -> str:
        return "Search for a regex pattern in files (case-insensitive)"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("pattern", "string", "Regex pattern to search for", required=True),
            ToolParameter("path", "string", "Directory or file to search (default: current directory)"),
            ToolParameter("file_pattern", "string", "Only search files matching this glob (e.g. '*.py')"),
        ]

    async def execute(self, params: SearchFilesParams) -> dict[str, Any]:
        try:
            compiled = re.compile(params.pattern, re.IGNORECASE)
        except re.error as e:
            raise ToolExecutionError(f"Invalid regex pattern: {e}") from e

        search_path = self._resolve_path(params.path) if params.path else Path(self.cwd).absolute()
        if not search_path.exists():
            raise ToolExecutionError(f"Path not found: {search_path}")

        matches: list[dict[str, Any]] = []
        truncated = False

        for file_path in self._collect_files(search_path, params.file_pattern):
            try:
                text = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError:
                continue

            for line_no, line in enumerate(text.splitlines(), 1):
                if not compiled.search(line):
                    continue
                if len(matches) >= _MAX_MATCHES:
                    truncated = True
                    break
                matches.append({
                    "file": self._relative_display(file_path, search_path),
                    "line": line_no,
                    "content": line[:_MAX_LINE_LENGTH],
                })
            if truncated:
                break

        logger.debug("Searched %s for %r: %d matches", search_path, params.pattern, len(matches))
        return {
            "pattern": params.pattern,
            "matches": matches,
            "total_matches": len(matches),
            "truncated": truncated,
        }

    def _collect_files(self, search_path: Path, file_pattern: str | None) -> list[Path]:
        """Collect files to search, skipping common non-source directories."""
        if search_path.is_file():
            return [search_path]

        files: list[Path] = []
        for root, dirs, names in os.walk(search_path):
            dirs[:] = sorted(d for d in dirs if d not in _SKIP_DIRS)
            for name in sorted(names):
                if file_pattern and not fnmatch.fnmatch(name, file_pattern):
                    continue
                files.append(Path(root) / name)
        return files

    def _relative_display(self, path: Path, base: Path) -> str:
        if base.is_file():
            return path.name
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            return str(path)
