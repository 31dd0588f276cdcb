"""
Agent Rewind Engine - safe, undoable tool execution for LLM agents.

Every file-mutating tool call is preceded by a snapshot of the files it
touches, so any change an agent makes can be compared and rolled back.
Execution is gated by a permission mode (normal, auto-accept, plan) and
dangerous tools require explicit confirmation.

Example:
    from agent_rewind_engine import (
        ConfirmationDecision, ToolCallRequest, create_tool_executor,
    )

    executor = create_tool_executor("./my-project")

    @executor.bus.on("confirm_tool_call")
    def approve(request):
        return ConfirmationDecision(approved=True)

    result = await executor.execute(ToolCallRequest(
        tool="write_file",
        parameters={"file_path": "notes.txt", "content": "hello"},
    ))

    # Undo it
    executor.snapshots.revert(result.snapshot_id)
"""

from agent_rewind_engine.config import RewindConfig, get_snapshot_dir
from agent_rewind_engine.errors import (
    ErrorKind,
    RewindError,
    SnapshotNotFoundError,
    ToolExecutionError,
)
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
from agent_rewind_engine.executor import (
    ToolCallRequest,
    ToolCallResult,
    ToolExecutor,
    ToolUsage,
    UsageStats,
    create_tool_executor,
)
from agent_rewind_engine.logging import get_logger, setup_logging
from agent_rewind_engine.permissions import (
    READ_ONLY_TOOLS,
    PermissionContext,
    PermissionMode,
    get_mode_description,
    get_mode_indicator,
)
from agent_rewind_engine.runtime import ExecutionResult, ShellRuntime
from agent_rewind_engine.snapshots import (
    DiffEngine,
    FileChange,
    FileSnapshot,
    RevertOptions,
    RevertResult,
    Snapshot,
    SnapshotDiff,
    SnapshotHistory,
    SnapshotManager,
    SnapshotMetadata,
)
from agent_rewind_engine.tools import (
    BaseTool,
    ToolCatalog,
    ToolDefinition,
    ToolParameter,
    create_default_catalog,
)
from agent_rewind_engine.verbose import augment_messages_for_verbose, format_verbose_response

__version__ = "0.1.0"

__all__ = [
    # Executor
    "ToolExecutor",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolUsage",
    "UsageStats",
    "create_tool_executor",
    # Tools
    "BaseTool",
    "ToolCatalog",
    "ToolDefinition",
    "ToolParameter",
    "create_default_catalog",
    # Permissions
    "PermissionContext",
    "PermissionMode",
    "READ_ONLY_TOOLS",
    "get_mode_indicator",
    "get_mode_description",
    "augment_messages_for_verbose",
    "format_verbose_response",
    # Snapshots
    "SnapshotManager",
    "DiffEngine",
    "Snapshot",
    "FileSnapshot",
    "SnapshotMetadata",
    "SnapshotHistory",
    "SnapshotDiff",
    "FileChange",
    "RevertOptions",
    "RevertResult",
    # Events
    "EventBus",
    "BEFORE_TOOL_CALL",
    "CONFIRM_TOOL_CALL",
    "AFTER_TOOL_RESULT",
    "BeforeToolCallEvent",
    "ToolCallEventResult",
    "ConfirmationRequest",
    "ConfirmationDecision",
    "AfterToolResultEvent",
    # Runtime
    "ShellRuntime",
    "ExecutionResult",
    # Config / errors / logging
    "RewindConfig",
    "get_snapshot_dir",
    "ErrorKind",
    "RewindError",
    "SnapshotNotFoundError",
    "ToolExecutionError",
    "setup_logging",
    "get_logger",
]
