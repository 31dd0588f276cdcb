"""
Tool executor.

The single gate every tool call passes through. A call is validated, checked
against the permission mode and safety rules, offered to event handlers,
confirmed when the tool is dangerous, snapshotted when it mutates files and
only then run. Every outcome is returned as a :class:`ToolCallResult`; no
exception escapes :meth:`ToolExecutor.execute`.
"""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from agent_rewind_engine.config import RewindConfig
from agent_rewind_engine.errors import ErrorKind, ToolExecutionError
from agent_rewind_engine.events import (
    AFTER_TOOL_RESULT,
    BEFORE_TOOL_CALL,
    CONFIRM_TOOL_CALL,
    AfterToolResultEvent,
    BeforeToolCallEvent,
    ConfirmationDecision,
    ConfirmationRequest,
    EventBus,
    ToolCallEventResult,
)
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.permissions import PermissionContext
from agent_rewind_engine.runtime import ShellRuntime, Timer
from agent_rewind_engine.snapshots import DiffEngine, SnapshotManager
from agent_rewind_engine.tools import ToolCatalog, ToolDefinition, create_default_catalog

logger = get_logger("executor")

# Arguments that name filesystem locations, checked against the sandbox
_PATH_ARGS = ("file_path", "path", "source", "destination", "cwd", "file")

_CRITICAL_PATHS = frozenset({
    "/", "/bin", "/boot", "/dev", "/etc", "/home", "/lib", "/lib64", "/opt",
    "/proc", "/root", "/sbin", "/sys", "/usr", "/var",
})

_DESTRUCTIVE_TOOLS = {"delete_file": ("path",), "move_file": ("source",)}


@dataclass(frozen=True)
class ToolCallRequest:
    tool: str
    parameters: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None


@dataclass(frozen=True)
class ToolCallResult:
    success: bool
    data: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    snapshot_id: str | None = None
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ToolUsage:
    tool: str
    timestamp: float
    success: bool
    execution_time_ms: float
    snapshot_id: str | None = None


@dataclass(frozen=True)
class UsageStats:
    total_calls: int
    success_count: int
    failure_count: int
    success_rate: float
    tool_usage: dict[str, int]


def _failure(error: str, kind: ErrorKind, **kwargs: Any) -> ToolCallResult:
    return ToolCallResult(success=False, error=error, error_kind=kind, **kwargs)


class ToolExecutor:
    """
    Runs tool calls one at a time through the validation, permission,
    confirmation and snapshot steps.

    Args:
        catalog: Tools available to callers.
        snapshots: Manager used to capture files before mutations.
        permissions: Mode state consulted for every call.
        working_directory: Base for relative paths and snapshot metadata.
        config: Safety limits (sandbox, blocked commands).
        bus: Event bus for hooks and confirmation.
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        snapshots: SnapshotManager,
        permissions: PermissionContext | None = None,
        working_directory: str | Path = ".",
        config: RewindConfig | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.catalog = catalog
        self.snapshots = snapshots
        self.config = config or RewindConfig()
        self.permissions = permissions or PermissionContext(self.config.initial_mode)
        self.working_directory = os.path.abspath(str(working_directory))
        self.bus = bus or EventBus()
        self._lock = asyncio.Lock()
        self._usage: list[ToolUsage] = []

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self, request: ToolCallRequest) -> ToolCallResult:
        """Execute one tool call. Calls on the same executor never overlap."""
        async with self._lock:
            return await self._execute(request)

    async def _execute(self, request: ToolCallRequest) -> ToolCallResult:
        name = request.tool
        args = dict(request.parameters)

        validation = self.catalog.validate(name, args)
        if not validation.valid:
            return _failure(validation.error or "Invalid tool call", validation.error_kind
                            or ErrorKind.MISSING_PARAMETER)
        definition = self.catalog.get(name)
        if definition is None:
            return _failure(f"Unknown tool: {name}", ErrorKind.UNKNOWN_TOOL)

        if not self.permissions.should_execute_tool(name):
            logger.info("Blocked %s in plan mode", name)
            return _failure(f"Blocked in plan mode: {name}", ErrorKind.PERMISSION_DENIED)

        violation = self._check_safety(name, args)
        if violation:
            logger.info("Blocked %s: %s", name, violation)
            return _failure(violation, ErrorKind.PERMISSION_DENIED)

        # Hooks may veto or rewrite the arguments
        for r in await self.bus.emit(
            BEFORE_TOOL_CALL,
            BeforeToolCallEvent(tool_name=name, args=dict(args), session_id=request.session_id),
        ):
            if not isinstance(r, ToolCallEventResult):
                continue
            if r.block:
                reason = r.reason or "Blocked by event handler"
                logger.info("Blocked %s by hook: %s", name, reason)
                return _failure(reason, ErrorKind.PERMISSION_DENIED)
            if r.modified_args is not None:
                args = dict(r.modified_args)

        if args != request.parameters:
            validation = self.catalog.validate(name, args)
            if not validation.valid:
                return _failure(validation.error or "Invalid tool call", validation.error_kind
                                or ErrorKind.MISSING_PARAMETER)
            violation = self._check_safety(name, args)
            if violation:
                logger.info("Blocked %s: %s", name, violation)
                return _failure(violation, ErrorKind.PERMISSION_DENIED)

        if self.permissions.requires_confirmation(definition):
            if not await self._confirm(name, args, request.session_id):
                logger.info("Cancelled %s: not confirmed", name)
                return _failure("Operation cancelled by user", ErrorKind.PERMISSION_DENIED)

        try:
            params = definition.bind(args)
        except (TypeError, ValueError) as e:
            return _failure(f"Invalid parameters for {name}: {e}", ErrorKind.EXECUTION_FAILURE)

        snapshot_id = None
        if definition.needs_snapshot:
            try:
                snapshot = await asyncio.to_thread(
                    self.snapshots.create,
                    reason=f"Before {name}",
                    working_directory=self.working_directory,
                    file_paths=definition.affected_paths(params) if definition.affected_paths else (),
                    session_id=request.session_id,
                    tool_used=name,
                )
            except Exception as e:
                logger.warning("Snapshot before %s failed: %s", name, e)
                return _failure(
                    f"Failed to create snapshot: {e}", ErrorKind.EXECUTION_FAILURE,
                )
            snapshot_id = snapshot.id

        timer = Timer()
        result = await self._run(definition, params, snapshot_id)

        self._usage.append(ToolUsage(
            tool=name,
            timestamp=result.timestamp,
            success=result.success,
            execution_time_ms=timer.elapsed_ms(),
            snapshot_id=snapshot_id,
        ))

        await self.bus.emit(
            AFTER_TOOL_RESULT,
            AfterToolResultEvent(
                tool_name=name, args=args, result=result, session_id=request.session_id,
            ),
        )
        return result

    async def _run(
        self, definition: ToolDefinition, params: Any, snapshot_id: str | None,
    ) -> ToolCallResult:
        try:
            data = await definition.handler(params)
        except ToolExecutionError as e:
            logger.debug("Tool %s failed: %s", definition.name, e)
            return _failure(str(e), ErrorKind.EXECUTION_FAILURE, data=e.data,
                            snapshot_id=snapshot_id)
        except Exception as e:
            logger.debug("Tool %s raised", definition.name, exc_info=True)
            return _failure(str(e) or type(e).__name__, ErrorKind.EXECUTION_FAILURE,
                            snapshot_id=snapshot_id)
        return ToolCallResult(success=True, data=data, snapshot_id=snapshot_id)

    async def _confirm(self, name: str, args: dict[str, Any], session_id: str | None) -> bool:
        """Approved only if some handler approves and none denies."""
        decisions = [
            r for r in await self.bus.emit(
                CONFIRM_TOOL_CALL,
                ConfirmationRequest(
                    tool_name=name,
                    args=dict(args),
                    mode=self.permissions.get_mode().value,
                    session_id=session_id,
                ),
            )
            if isinstance(r, ConfirmationDecision)
        ]
        return bool(decisions) and all(d.approved for d in decisions)

    # ------------------------------------------------------------------
    # Safety
    # ------------------------------------------------------------------

    def _resolve(self, value: str) -> str:
        return os.path.abspath(os.path.join(self.working_directory, os.path.expanduser(value)))

    def _check_safety(self, name: str, args: dict[str, Any]) -> str | None:
        """Return the reason a call is refused, or None if it may proceed."""
        if self.config.sandbox_paths:
            roots = [self._resolve(str(p)) for p in self.config.sandbox_paths]
            for key in _PATH_ARGS:
                value = args.get(key)
                if not isinstance(value, str) or not value:
                    continue
                target = self._resolve(value)
                if not any(target == root or target.startswith(root.rstrip(os.sep) + os.sep)
                           for root in roots):
                    return f"Path outside allowed directories: {target}"

        for key in _DESTRUCTIVE_TOOLS.get(name, ()):
            value = args.get(key)
            if isinstance(value, str) and value:
                target = self._resolve(value)
                if target in _CRITICAL_PATHS or target == os.path.expanduser("~"):
                    return f"Refusing to modify critical path: {target}"

        command = None
        if name == "bash":
            command = args.get("command")
        elif name == "execute_code" and str(args.get("language", "")).lower() == "shell":
            command = args.get("code")
        if isinstance(command, str):
            for pattern in self.config.blocked_commands:
                if pattern and pattern in command:
                    return f"Command blocked: matches {pattern!r}"

        return None

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def diff_engine(self) -> DiffEngine:
        """A diff engine over this executor's snapshots, using the configured context."""
        return DiffEngine(self.snapshots, context_lines=self.config.diff_context_lines)

    def clean_snapshots(self) -> int:
        """Apply the configured retention. Returns the number of snapshots deleted."""
        return self.snapshots.clean_old(self.config.keep_per_session)

    # ------------------------------------------------------------------
    # Usage ledger
    # ------------------------------------------------------------------

    @property
    def usage_history(self) -> list[ToolUsage]:
        return list(self._usage)

    def get_usage_stats(self) -> UsageStats:
        total = len(self._usage)
        successes = sum(1 for u in self._usage if u.success)
        per_tool: dict[str, int] = {}
        for u in self._usage:
            per_tool[u.tool] = per_tool.get(u.tool, 0) + 1
        return UsageStats(
            total_calls=total,
            success_count=successes,
            failure_count=total - successes,
            success_rate=successes / total if total else 0.0,
            tool_usage=per_tool,
        )

    def clear_usage(self) -> None:
        self._usage.clear()


def create_tool_executor(
    working_directory: str | Path,
    config: RewindConfig | None = None,
    permissions: PermissionContext | None = None,
    bus: EventBus | None = None,
) -> ToolExecutor:
    """Wire the default catalog, per-project snapshot store and runtime."""
    config = config or RewindConfig()
    cwd = os.path.abspath(str(working_directory))
    runtime = ShellRuntime(
        shell=config.shell,
        default_timeout=config.default_timeout_seconds,
        max_timeout=config.max_timeout_seconds,
        max_output_size=config.max_output_size,
    )
    return ToolExecutor(
        catalog=create_default_catalog(cwd, runtime),
        snapshots=SnapshotManager(config.resolve_snapshot_dir(cwd)),
        permissions=permissions or PermissionContext(config.initial_mode),
        working_directory=cwd,
        config=config,
        bus=bus,
    )
