"""
Process execution result types.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExecutionResult:
    """Result of running a command or script."""

    success: bool
    output: str = ""
    stderr: str = ""
    error: str | None = None
    exit_code: int = 0
    duration_ms: float = 0.0
    timed_out: bool = False
    output_exceeded: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success_result(
        cls, output: str, stderr: str = "", duration_ms: float = 0.0,
    ) -> ExecutionResult:
        """Create a successful result."""
        return cls(success=True, output=output, stderr=stderr, duration_ms=duration_ms)

    @classmethod
    def error_result(
        cls,
        error: str,
        exit_code: int = 1,
        output: str = "",
        stderr: str = "",
        duration_ms: float = 0.0,
        timed_out: bool = False,
        output_exceeded: bool = False,
    ) -> ExecutionResult:
        """Create an error result."""
        return cls(
            success=False,
            output=output,
            stderr=stderr,
            error=error,
            exit_code=exit_code,
            duration_ms=duration_ms,
            timed_out=timed_out,
            output_exceeded=output_exceeded,
        )


class Timer:
    """Simple timer for measuring execution duration."""

    def __init__(self) -> None:
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
