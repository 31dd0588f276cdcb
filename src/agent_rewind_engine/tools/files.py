"""File management tools: copy_file, move_file, delete_file and create_directory."""
from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.files")


def files_under(path: Path) -> list[Path]:
    """Regular files at or beneath *path* (symlinked directories are not followed)."""
    if not path.is_dir():
        return [path]
    found: list[Path] = []
    for root, _dirs, names in os.walk(path):
        found.extend(Path(root) / name for name in names)
    return sorted(found)


def _landing_path(source: Path, destination: Path) -> Path:
    """Where *source* ends up when copied or moved to *destination*."""
    if destination.is_dir():
        return destination / source.name
    return destination


def _mapped_paths(source: Path, destination: Path) -> list[str]:
    target = _landing_path(source, destination)
    if not source.is_dir():
        return [str(target)]
    return [str(target / f.relative_to(source)) for f in files_under(source)]


@dataclass(frozen=True)
class CopyFileParams:
    source: str
    destination: str


class CopyFileTool(BaseTool):
    """Copy a file, or a directory recursively."""

    needs_snapshot = True
    params_type = CopyFileParams

    @property
    def name(self) -> str:
        return "copy_file"

    @property
    def description(self) -> str:
        return "Copy a file or directory"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("source", "string", "Source path", required=True),
            ToolParameter("destination", "string", "Destination path", required=True),
        ]

    def affected_paths(self, params: CopyFileParams) -> list[str]:
        return _mapped_paths(self._resolve_path(params.source), self._resolve_path(params.destination))

    async def execute(self, params: CopyFileParams) -> dict[str, Any]:
        source = self._resolve_path(params.source)
        if not source.exists():
            raise ToolExecutionError(f"Source not found: {source}")
        target = _landing_path(source, self._resolve_path(params.destination))

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if source.is_dir():
                shutil.copytree(source, target, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target)
        except OSError as e:
            raise ToolExecutionError(f"Failed to copy {source} to {target}: {e}") from e

        logger.debug("Copied %s -> %s", source, target)
        return {"source": str(source), "destination": str(target)}


@dataclass(frozen=True)
class MoveFileParams:
    source: str
    destination: str


class MoveFileTool(BaseTool):
    """Move or rename a file or directory."""

    needs_snapshot = True
    params_type = MoveFileParams

    @property
    def name(self) -> str:
        return "move_file"

    @property
    def description(self) -> str:
        return "Move or rename a file or directory"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("source", "string", "Source path", required=True),
            ToolParameter("destination", "string", "Destination path", required=True),
        ]

    def affected_paths(self, params: MoveFileParams) -> list[str]:
        source = self._resolve_path(params.source)
        sources = [str(p) for p in files_under(source)]
        return sources + _mapped_paths(source, self._resolve_path(params.destination))

    async def execute(self, params: MoveFileParams) -> dict[str, Any]:
        source = self._resolve_path(params.source)
        if not source.exists():
            raise ToolExecutionError(f"Source not found: {source}")
        target = _landing_path(source, self._resolve_path(params.destination))

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(target))
        except OSError as e:
            raise ToolExecutionError(f"Failed to move {source} to {target}: {e}") from e

        logger.debug("Moved %s -> %s", source, target)
        return {"source": str(source), "destination": str(target)}


@dataclass(frozen=True)
class DeleteFileParams:
    path: str


class DeleteFileTool(BaseTool):
    """Delete a file, or a directory with everything under it."""

    dangerous = True
    needs_snapshot = True
    params_type = DeleteFileParams

    @property
    def name(self) -> str:
        return "delete_file"

    @property
    def description(self) -> str:
        return "Delete a file or directory (directories are removed recursively)"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter("path", "string", "Path to delete", required=True)]

    def affected_paths(self, params: DeleteFileParams) -> list[str]:
        return [str(p) for p in files_under(self._resolve_path(params.path))]

    async def execute(self, params: DeleteFileParams) -> dict[str, Any]:
        target = self._resolve_path(params.path)
        if not target.exists() and not target.is_symlink():
            raise ToolExecutionError(f"Path not found: {target}")

        is_dir = target.is_dir() and not target.is_symlink()
        try:
            if is_dir:
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise ToolExecutionError(f"Failed to delete {target}: {e}") from e

        logger.debug("Deleted %s", target)
        return {"path": str(target), "type": "directory" if is_dir else "file"}


@dataclass(frozen=True)
class CreateDirectoryParams:
    path: str
    recursive: bool = True


class CreateDirectoryTool(BaseTool):
    params_type = CreateDirectoryParams

    @property
    def name(self) -> str:
        return "create_directory"

    @property
    def description(self) -> str:
        return "Create a directory"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("path", "string", "Directory to create", required=True),
            ToolParameter("recursive", "boolean", "Create missing parents", default=True),
        ]

    async def execute(self, params: CreateDirectoryParams) -> dict[str, Any]:
        target = self._resolve_path(params.path)
        if target.exists() and not target.is_dir():
            raise ToolExecutionError(f"{target} exists and is not a directory")

        created = not target.exists()
        try:
            target.mkdir(parents=params.recursive, exist_ok=True)
        except FileNotFoundError as e:
            raise ToolExecutionError(
                f"Parent directory does not exist: {target.parent}"
            ) from e
        except OSError as e:
            raise ToolExecutionError(f"Failed to create {target}: {e}") from e

        return {"path": str(target), "created": created}
