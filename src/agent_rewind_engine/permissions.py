"""
Permission modes: normal, auto-accept and plan (read-only).

A :class:`PermissionContext` holds the current mode and the verbose flag. One
instance is created per executor and passed in explicitly, so separate
sessions in the same process never share a mode by accident.

Example:
    perms = PermissionContext()
    perms.cycle_mode()                               # -> AUTO_ACCEPT
    perms.should_execute_tool("write_file", "plan")  # -> False
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from agent_rewind_engine.logging import get_logger

if TYPE_CHECKING:
    from agent_rewind_engine.tools.registry import ToolDefinition

logger = get_logger("permissions")


class PermissionMode(str, Enum):
    """Execution trust mode."""

    NORMAL = "normal"
    AUTO_ACCEPT = "auto-accept"
    PLAN = "plan"


_CYCLE_ORDER = [PermissionMode.NORMAL, PermissionMode.AUTO_ACCEPT, PermissionMode.PLAN]

# Tools that may run in plan mode.
READ_ONLY_TOOLS = frozenset({
    "read_file",
    "list_directory",
    "glob",
    "tree",
    "git_status",
    "git_diff",
    "git_log",
    "analyze_code",
    "find_symbol",
    "get_imports",
})

_MODE_INDICATORS = {
    PermissionMode.NORMAL: "⏵",
    PermissionMode.AUTO_ACCEPT: "⏵⏵",
    PermissionMode.PLAN: "⏸",
}

_MODE_DESCRIPTIONS = {
    PermissionMode.NORMAL: "Normal - Require approval for dangerous tools",
    PermissionMode.AUTO_ACCEPT: "Auto-Accept - Automatically approve all tools",
    PermissionMode.PLAN: "Plan Mode - Read-only analysis (mutating tools are blocked)",
}


def get_mode_indicator(mode: PermissionMode | str) -> str:
    """Short symbol for status lines."""
    return _MODE_INDICATORS[PermissionMode(mode)]


def get_mode_description(mode: PermissionMode | str) -> str:
    """Human-readable description of a mode."""
    return _MODE_DESCRIPTIONS[PermissionMode(mode)]


class PermissionContext:
    """Mutable permission state for one executor (mode + verbose flag)."""

    def __init__(
        self,
        mode: PermissionMode | str = PermissionMode.NORMAL,
        verbose: bool = False,
    ) -> None:
        self._mode = PermissionMode(mode)
        self._verbose = verbose

    def __repr__(self) -> str:
        return f"PermissionContext(mode={self._mode.value!r}, verbose={self._verbose})"

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    def get_mode(self) -> PermissionMode:
        return self._mode

    @property
    def mode(self) -> PermissionMode:
        return self._mode

    def set_mode(self, mode: PermissionMode | str) -> None:
        """Set the mode. Unknown values raise ``ValueError``."""
        new_mode = PermissionMode(mode)
        if new_mode is not self._mode:
            logger.info("Permission mode: %s -> %s", self._mode.value, new_mode.value)
        self._mode = new_mode

    def cycle_mode(self) -> PermissionMode:
        """Rotate normal -> auto-accept -> plan -> normal and return the new mode."""
        idx = _CYCLE_ORDER.index(self._mode)
        self.set_mode(_CYCLE_ORDER[(idx + 1) % len(_CYCLE_ORDER)])
        return self._mode

    def reset(self) -> None:
        """Back to normal mode with verbose off."""
        self._mode = PermissionMode.NORMAL
        self._verbose = False

    # ------------------------------------------------------------------
    # Gating
    # ------------------------------------------------------------------

    def _effective(self, mode: PermissionMode | str | None) -> PermissionMode:
        return self._mode if mode is None else PermissionMode(mode)

    def should_execute_tool(
        self, tool_name: str, mode: PermissionMode | str | None = None,
    ) -> bool:
        """In plan mode only read-only tools may run; otherwise everything may."""
        if self._effective(mode) is PermissionMode.PLAN:
            return tool_name in READ_ONLY_TOOLS
        return True

    def should_auto_approve(self, mode: PermissionMode | str | None = None) -> bool:
        return self._effective(mode) is PermissionMode.AUTO_ACCEPT

    def requires_confirmation(
        self,
        definition: ToolDefinition,
        mode: PermissionMode | str | None = None,
    ) -> bool:
        """Dangerous tools need explicit approval unless auto-accepting."""
        return definition.dangerous and not self.should_auto_approve(mode)

    # ------------------------------------------------------------------
    # Verbose
    # ------------------------------------------------------------------

    def is_verbose(self) -> bool:
        return self._verbose

    def toggle_verbose(self) -> bool:
        self._verbose = not self._verbose
        return self._verbose
