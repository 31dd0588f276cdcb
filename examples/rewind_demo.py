#!/usr/bin/env python3
"""
Agent Rewind Engine Demo

Runs a few tool calls in a throwaway project, shows the diff between the
snapshots they produced and rolls everything back.

Usage:
    python examples/rewind_demo.py
"""

import asyncio
import sys
import tempfile
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agent_rewind_engine import (
    ConfirmationDecision,
    DiffEngine,
    PermissionMode,
    RewindConfig,
    ToolCallRequest,
    create_tool_executor,
    setup_logging,
)


async def demo() -> None:
    setup_logging("INFO")

    with tempfile.TemporaryDirectory() as tmp:
        project = Path(tmp) / "project"
        project.mkdir()
        (project / "app.py").write_text("def greet():\n    return 'hi'\n")

        executor = create_tool_executor(
            project, config=RewindConfig(snapshot_dir=Path(tmp) / "snapshots"),
        )

        @executor.bus.on("confirm_tool_call")
        def approve(request):
            print(f"  [confirm] {request.tool_name} {request.args}")
            return ConfirmationDecision(approved=True)

        print("=" * 60)
        print("Agent Rewind Engine - Demo")
        print("=" * 60)

        first = await executor.execute(ToolCallRequest(
            tool="edit_file",
            parameters={"file_path": "app.py", "old_string": "'hi'", "new_string": "'hello'"},
        ))
        print(f"\nedit_file -> success={first.success}, snapshot={first.snapshot_id}")

        second = await executor.execute(ToolCallRequest(
            tool="write_file",
            parameters={"file_path": "README.md", "content": "# Demo\n"},
        ))
        print(f"write_file -> success={second.success}, snapshot={second.snapshot_id}")

        executor.permissions.set_mode(PermissionMode.PLAN)
        blocked = await executor.execute(ToolCallRequest(
            tool="delete_file", parameters={"path": "app.py"},
        ))
        print(f"delete_file in plan mode -> {blocked.error}")
        executor.permissions.set_mode(PermissionMode.NORMAL)

        # Capture the current state and compare it with the first snapshot
        now = executor.snapshots.create("Current state", project, ["app.py", "README.md"])
        engine = DiffEngine(executor.snapshots)
        print("\n" + engine.format_full(engine.compare(now.id, first.snapshot_id)))

        # Roll back both tool calls, newest first
        for snapshot_id in (second.snapshot_id, first.snapshot_id):
            result = executor.snapshots.revert(snapshot_id)
            print(
                f"Reverted {snapshot_id}: restored={len(result.files_reverted)} "
                f"removed={len(result.files_removed)}"
            )

        print("\napp.py is back to:")
        print((project / "app.py").read_text())

        stats = executor.get_usage_stats()
        print(f"Calls: {stats.total_calls}, success rate: {stats.success_rate:.0%}")


if __name__ == "__main__":
    asyncio.run(demo())
