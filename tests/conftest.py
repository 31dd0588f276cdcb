"""Shared pytest fixtures for agent-rewind-engine tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from agent_rewind_engine.config import RewindConfig
from agent_rewind_engine.events import ConfirmationDecision, EventBus
from agent_rewind_engine.executor import ToolExecutor
from agent_rewind_engine.permissions import PermissionContext
from agent_rewind_engine.runtime import ShellRuntime
from agent_rewind_engine.snapshots import SnapshotManager
from agent_rewind_engine.tools import create_default_catalog


class FakeClock:
    """Monotonic clock that advances one second per call."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A working directory with a couple of files in it."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_text("alpha\n")
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("print('hello')\n")
    return root


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    return tmp_path / "snapshots"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(store_dir: Path, clock: FakeClock) -> SnapshotManager:
    return SnapshotManager(store_dir, clock=clock)


@pytest.fixture
def runtime() -> ShellRuntime:
    return ShellRuntime(default_timeout=10.0, max_timeout=30.0)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def permissions() -> PermissionContext:
    return PermissionContext()


@pytest.fixture
def executor(
    project_dir: Path,
    manager: SnapshotManager,
    permissions: PermissionContext,
    runtime: ShellRuntime,
    bus: EventBus,
) -> ToolExecutor:
    return ToolExecutor(
        catalog=create_default_catalog(str(project_dir), runtime),
        snapshots=manager,
        permissions=permissions,
        working_directory=project_dir,
        config=RewindConfig(),
        bus=bus,
    )


@pytest.fixture
def approve_all(bus: EventBus) -> None:
    """Approve every confirmation request."""
    bus.on("confirm_tool_call", lambda request: ConfirmationDecision(approved=True))
