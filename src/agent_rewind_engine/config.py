"""
Configuration for the rewind engine.

Provides a configuration object that can be loaded from YAML files or
constructed programmatically.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Snapshot storage location
# ---------------------------------------------------------------------------

SNAPSHOT_DIR_ENV = "ARE_SNAPSHOT_DIR"

_DEFAULT_SNAPSHOT_BASE = Path.home() / ".agent-rewind" / "snapshots"

DEFAULT_BLOCKED_COMMANDS = [
    "rm -rf /",
    "mkfs",
    "dd if=",
    ":(){ :|:& };:",
]


def get_snapshot_base() -> Path:
    """Base directory for all snapshot stores (``$ARE_SNAPSHOT_DIR`` overrides)."""
    val = os.environ.get(SNAPSHOT_DIR_ENV)
    if val:
        return Path(val).expanduser()
    return _DEFAULT_SNAPSHOT_BASE


def get_snapshot_dir(cwd: str | Path, base: Path | None = None) -> Path:
    """
    Return the snapshot store directory for the project at *cwd*.

    The directory is ``{base}/{cwd-hash}/`` where *cwd-hash* is the first 16
    hex characters of the SHA-256 digest of the resolved *cwd*, so each
    project gets its own store.
    """
    resolved = str(Path(cwd).resolve())
    cwd_hash = hashlib.sha256(resolved.encode()).hexdigest()[:16]
    return (base or get_snapshot_base()) / cwd_hash


@dataclass
class RewindConfig:
    """
    Main configuration for the rewind engine.

    Example YAML:
        snapshot_dir: ~/.agent-rewind/snapshots/my-project
        default_timeout_seconds: 30
        max_output_size: 10485760
        keep_per_session: 10
        sandbox_paths:
          - ./src
          - ./tests
        blocked_commands:
          - "rm -rf /"
        initial_mode: normal
    """

    # Snapshot storage
    snapshot_dir: Path | None = None  # None = per-project dir under the base
    keep_per_session: int = 10  # Retention used by maintenance commands

    # Process execution
    default_timeout_seconds: float = 30.0
    max_timeout_seconds: float = 600.0
    max_output_size: int = 10 * 1024 * 1024
    shell: str = "/bin/bash"

    # Safety
    sandbox_paths: list[Path] = field(default_factory=list)  # Empty = unrestricted
    blocked_commands: list[str] = field(
        default_factory=lambda: list(DEFAULT_BLOCKED_COMMANDS)
    )

    # Presentation / modes
    diff_context_lines: int = 1
    initial_mode: str = "normal"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RewindConfig:
        """Create config from a dictionary."""
        snapshot_dir = data.get("snapshot_dir")
        blocked = data.get("blocked_commands")
        return cls(
            snapshot_dir=Path(snapshot_dir).expanduser() if snapshot_dir else None,
            keep_per_session=data.get("keep_per_session", 10),
            default_timeout_seconds=data.get("default_timeout_seconds", 30.0),
            max_timeout_seconds=data.get("max_timeout_seconds", 600.0),
            max_output_size=data.get("max_output_size", 10 * 1024 * 1024),
            shell=data.get("shell", "/bin/bash"),
            sandbox_paths=[Path(p) for p in data.get("sandbox_paths", [])],
            blocked_commands=(
                list(blocked) if blocked is not None else list(DEFAULT_BLOCKED_COMMANDS)
            ),
            diff_context_lines=data.get("diff_context_lines", 1),
            initial_mode=data.get("initial_mode", "normal"),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> RewindConfig:
        """Load config from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_string(cls, content: str) -> RewindConfig:
        """Load config from a YAML string."""
        data = yaml.safe_load(content)
        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "snapshot_dir": str(self.snapshot_dir) if self.snapshot_dir else None,
            "keep_per_session": self.keep_per_session,
            "default_timeout_seconds": self.default_timeout_seconds,
            "max_timeout_seconds": self.max_timeout_seconds,
            "max_output_size": self.max_output_size,
            "shell": self.shell,
            "sandbox_paths": [str(p) for p in self.sandbox_paths],
            "blocked_commands": list(self.blocked_commands),
            "diff_context_lines": self.diff_context_lines,
            "initial_mode": self.initial_mode,
        }

    def resolve_snapshot_dir(self, cwd: str | Path) -> Path:
        """Snapshot store for *cwd*: the explicit dir if set, else per-project."""
        if self.snapshot_dir is not None:
            return self.snapshot_dir
        return get_snapshot_dir(cwd)
