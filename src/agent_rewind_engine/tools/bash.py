"""bash - execute shell commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.runtime import ExecutionResult, ShellRuntime
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.bash")


@dataclass(frozen=True)
class BashParams:
    command: str
    timeout: float = 30
    cwd: str | None = None


def process_failure(result: ExecutionResult) -> ToolExecutionError:
    """Build the error for a failed process run, keeping its captured output."""
    return ToolExecutionError(
        result.error or "Command failed",
        data={
            "stdout": result.output,
            "stderr": result.stderr,
            "exit_code": result.exit_code,
            "timed_out": result.timed_out,
            "output_exceeded": result.output_exceeded,
        },
    )


class BashTool(BaseTool):
    """Execute shell commands and return their output."""

    dangerous = True
    params_type = BashParams

    def __init__(self, cwd: str | None = None, runtime: ShellRuntime | None = None) -> None:
        super().__init__(cwd)
        self.runtime = runtime or ShellRuntime()

    @property
    def name(self) -> str:
        return "bash"

    @property
    def description(self) -> str:
        return (
            "Execute a shell command and return stdout and stderr. "
            "Commands run in the working directory under a timeout."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("command", "string", "The shell command to execute", required=True),
            ToolParameter("timeout", "number", "Timeout in seconds", default=30),
            ToolParameter("cwd", "string", "Working directory for the command"),
        ]

    async def execute(self, params: BashParams) -> dict[str, Any]:
        if not params.command:
            raise ToolExecutionError("command is required")

        workdir = str(self._resolve_path(params.cwd)) if params.cwd else self.cwd
        result = await self.runtime.execute(params.command, cwd=workdir, timeout=params.timeout)

        if not result.success:
            logger.debug("Command failed (%s): %s", result.exit_code, params.command)
            raise process_failure(result)

        return {
            "command": params.command,
            "stdout": result.output,
            "stderr": result.stderr,
            "cwd": workdir,
            "exit_code": result.exit_code,
        }
