"""
Shell execution runtime with a hard timeout and output cap.

Commands run in their own process group. When the timeout elapses or the
combined stdout/stderr exceeds ``max_output_size`` bytes, the whole group is
killed and an error result is returned. A cancelled command never reports
partial success.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
from collections.abc import Sequence

from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.runtime.base import ExecutionResult, Timer

logger = get_logger("runtime.shell")

_CHUNK_SIZE = 64 * 1024


class ShellRuntime:
    """
    Runs shell commands and argv-style programs.

    Args:
        shell: Shell used for :meth:`execute` (``<shell> -c <command>``).
        default_timeout: Seconds allowed when the caller gives no timeout.
        max_timeout: Upper clamp for caller-supplied timeouts.
        max_output_size: Maximum combined stdout+stderr bytes.
    """

    def __init__(
        self,
        shell: str = "/bin/bash",
        default_timeout: float = 30.0,
        max_timeout: float = 600.0,
        max_output_size: int = 10 * 1024 * 1024,
    ) -> None:
        self.shell = shell
        self.default_timeout = default_timeout
        self.max_timeout = max_timeout
        self.max_output_size = max_output_size

    def clamp_timeout(self, timeout: float | None) -> float:
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            return self.default_timeout
        return min(float(timeout), self.max_timeout)

    async def execute(
        self,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> ExecutionResult:
        """Execute a shell command."""
        return await self.execute_args(
            [self.shell, "-c", command], cwd=cwd, env=env, timeout=timeout,
            label="Command",
        )

    async def execute_args(
        self,
        argv: Sequence[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        label: str = "Process",
    ) -> ExecutionResult:
        """Execute a program given as an argument vector (no shell parsing)."""
        timer = Timer()
        timeout = self.clamp_timeout(timeout)

        full_env = os.environ.copy()
        if env:
            full_env.update(env)

        logger.debug("Executing %s (cwd=%s, timeout=%ss)", list(argv), cwd, timeout)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=full_env,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            return ExecutionResult.error_result(
                error=f"Executable or working directory not found: {e.filename or e}",
                exit_code=127,
                duration_ms=timer.elapsed_ms(),
            )
        except OSError as e:
            return ExecutionResult.error_result(
                error=str(e), exit_code=-1, duration_ms=timer.elapsed_ms(),
            )

        return await self._collect(process, timer, timeout, label)

    async def _collect(
        self,
        process: asyncio.subprocess.Process,
        timer: Timer,
        timeout: float,
        label: str,
    ) -> ExecutionResult:
        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        total = 0
        exceeded = asyncio.Event()

        async def _read(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
            nonlocal total
            if stream is None:
                return
            while True:
                chunk = await stream.read(_CHUNK_SIZE)
                if not chunk:
                    return
                total += len(chunk)
                if total > self.max_output_size:
                    exceeded.set()
                    return
                chunks.append(chunk)

        readers = asyncio.gather(
            _read(process.stdout, stdout_chunks),
            _read(process.stderr, stderr_chunks),
        )
        limit_watch = asyncio.ensure_future(exceeded.wait())

        try:
            await asyncio.wait(
                {readers, limit_watch},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )

            if exceeded.is_set():
                await self._kill(process)
                return ExecutionResult.error_result(
                    error=(
                        f"{label} output exceeded {self.max_output_size} bytes "
                        "and was terminated"
                    ),
                    exit_code=-1,
                    duration_ms=timer.elapsed_ms(),
                    output_exceeded=True,
                )

            if not readers.done():
                await self._kill(process)
                return self._timed_out(label, timeout, timer)

            # The pipes may close long before the process exits
            remaining = timeout - timer.elapsed_ms() / 1000
            try:
                await asyncio.wait_for(process.wait(), max(remaining, 0.001))
            except asyncio.TimeoutError:
                await self._kill(process)
                return self._timed_out(label, timeout, timer)
        finally:
            limit_watch.cancel()
            if not readers.done():
                readers.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await readers
            with contextlib.suppress(asyncio.CancelledError):
                await limit_watch

        output = self._decode(b"".join(stdout_chunks))
        error_output = self._decode(b"".join(stderr_chunks))

        if process.returncode == 0:
            return ExecutionResult.success_result(
                output=output, stderr=error_output, duration_ms=timer.elapsed_ms(),
            )
        return ExecutionResult.error_result(
            error=error_output.strip() or f"{label} failed with exit code {process.returncode}",
            exit_code=process.returncode or 1,
            output=output,
            stderr=error_output,
            duration_ms=timer.elapsed_ms(),
        )

    @staticmethod
    def _timed_out(label: str, timeout: float, timer: Timer) -> ExecutionResult:
        return ExecutionResult.error_result(
            error=f"{label} timed out after {timeout}s",
            exit_code=-1,
            duration_ms=timer.elapsed_ms(),
            timed_out=True,
        )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        """Kill the process group started for *process* and reap it."""
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await process.wait()

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")
