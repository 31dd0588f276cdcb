"""execute_code - run a snippet of Python, JavaScript, TypeScript or shell."""
from __future__ import annotations

import contextlib
import os
import sys
import tempfile
from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.runtime import ExecutionResult, ShellRuntime
from agent_rewind_engine.tools.bash import process_failure
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.code")

SUPPORTED_LANGUAGES = ("python", "javascript", "typescript", "shell")


@dataclass(frozen=True)
class ExecuteCodeParams:
    language: str
    code: str
    timeout: float = 30


class ExecuteCodeTool(BaseTool):
    """Run source code in a subprocess for the requested language."""

    dangerous = True
    params_type = ExecuteCodeParams

    def __init__(self, cwd: str | None = None, runtime: ShellRuntime | None = None) -> None:
        super().__init__(cwd)
        self.runtime = runtime or ShellRuntime()

    @property
    def name(self) -> str:
        return "execute_code"

    @property
    def description(self) -> str:
        return f"Execute code ({', '.join(SUPPORTED_LANGUAGES)})"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("language", "string", "One of: " + ", ".join(SUPPORTED_LANGUAGES), required=True),
            ToolParameter("code", "string", "Source code to run", required=True),
            ToolParameter("timeout", "number", "Timeout in seconds", default=30),
        ]

    async def execute(self, params: ExecuteCodeParams) -> dict[str, Any]:
        language = params.language.lower()
        if language not in SUPPORTED_LANGUAGES:
            raise ToolExecutionError(f"Unsupported language: {params.language}")

        result = await self._run(language, params.code, params.timeout)
        if not result.success:
            raise process_failure(result)

        return {
            "language": language,
            "stdout": result.output,
            "stderr": result.stderr,
            "exit_code": result.exit_code,
            "duration_ms": result.duration_ms,
        }

    async def _run(self, language: str, code: str, timeout: float) -> ExecutionResult:
        if language == "python":
            return await self.runtime.execute_args(
                [sys.executable, "-c", code], cwd=self.cwd, timeout=timeout, label="Python",
            )
        if language == "javascript":
            return await self.runtime.execute_args(
                ["node", "-e", code], cwd=self.cwd, timeout=timeout, label="Node",
            )
        if language == "shell":
            return await self.runtime.execute(code, cwd=self.cwd, timeout=timeout)

        # typescript runs from a temporary file through tsx
        fd, script = tempfile.mkstemp(suffix=".ts", prefix="are_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(code)
            return await self.runtime.execute_args(
                ["npx", "--yes", "tsx", script], cwd=self.cwd, timeout=timeout,
                label="TypeScript",
            )
        finally:
            with contextlib.suppress(OSError):
                os.unlink(script)
