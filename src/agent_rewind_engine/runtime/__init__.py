"""
Process execution runtime.
"""

from agent_rewind_engine.runtime.base import ExecutionResult, Timer
from agent_rewind_engine.runtime.shell import ShellRuntime

__all__ = ["ExecutionResult", "ShellRuntime", "Timer"]
