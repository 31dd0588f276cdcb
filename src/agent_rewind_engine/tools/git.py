"""Read-only git tools: git_status, git_diff and git_log."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

if TYPE_CHECKING:
    from git import Repo

logger = get_logger("tools.git")


class _GitTool(BaseTool):
    """Shared plumbing: open the repository around the working directory."""

    def _repo(self, cwd: str | None = None) -> Repo:
        # GitPython looks up the git binary on import
        import git

        path = self._resolve_path(cwd) if cwd else Path(self.cwd)
        try:
            return git.Repo(path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise ToolExecutionError(f"Not a git repository: {path}") from e

    async def _git(self, command: str, *args: str, cwd: str | None = None) -> str:
        import git

        repo = self._repo(cwd)
        try:
            return await asyncio.to_thread(getattr(repo.git, command), *args)
        except git.exc.GitCommandError as e:
            stderr = str(e.stderr or "").strip()
            logger.debug("git %s failed: %s", command, stderr)
            raise ToolExecutionError(
                f"git {command} failed: {stderr or e}",
                data={"stderr": stderr, "exit_code": e.status},
            ) from e


@dataclass(frozen=True)
class GitStatusParams:
    cwd: str | None = None


class GitStatusTool(_GitTool):
    params_type = GitStatusParams

    @property
    def name(self) -> str:
        return "git_status"

    @property
    def description(self) -> str:
        return "Show git working tree status"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter("cwd", "string", "Repository directory (default: working directory)")]

    async def execute(self, params: GitStatusParams) -> dict[str, Any]:
        output = await self._git("status", "--porcelain=v1", "--branch", cwd=params.cwd)
        lines = output.splitlines()
        branch = None
        if lines and lines[0].startswith("## "):
            branch = lines.pop(0)[3:].split("...")[0]

        files = [{"status": line[:2].strip(), "path": line[3:]} for line in lines if line]
        return {"branch": branch, "files": files, "clean": not files}


@dataclass(frozen=True)
class GitDiffParams:
    file: str | None = None
    staged: bool = False


class GitDiffTool(_GitTool):
    params_type = GitDiffParams

    @property
    def name(self) -> str:
        return "git_diff"

    @property
    def description(self) -> str:
        return "Show git diff of working tree or staged changes"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("file", "string", "Limit the diff to this file"),
            ToolParameter("staged", "boolean", "Show staged changes", default=False),
        ]

    async def execute(self, params: GitDiffParams) -> dict[str, Any]:
        args = ["--cached"] if params.staged else []
        if params.file:
            args.extend(["--", params.file])
        output = await self._git("diff", *args)
        return {"diff": output, "staged": params.staged, "file": params.file}


@dataclass(frozen=True)
class GitLogParams:
    limit: int = 10


class GitLogTool(_GitTool):
    params_type = GitLogParams

    @property
    def name(self) -> str:
        return "git_log"

    @property
    def description(self) -> str:
        return "Show recent git commits"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter("limit", "integer", "Number of commits to show", default=10)]

    async def execute(self, params: GitLogParams) -> dict[str, Any]:
        repo = self._repo()
        limit = max(1, int(params.limit))

        def read_commits() -> list[dict[str, Any]]:
            try:
                commits = list(repo.iter_commits(max_count=limit))
            except ValueError:
                # No commits on the current branch yet
                return []
            return [
                {
                    "hash": c.hexsha,
                    "author": c.author.name,
                    "date": c.authored_datetime.isoformat(),
                    "message": c.summary,
                }
                for c in commits
            ]

        return {"commits": await asyncio.to_thread(read_commits)}
