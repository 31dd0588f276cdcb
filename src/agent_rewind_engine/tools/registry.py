"""Tool definitions, the tool base class and the catalog that validates calls."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from agent_rewind_engine.errors import ErrorKind

ParamType = Literal["string", "integer", "number", "boolean", "array"]


@dataclass(frozen=True)
class ToolParameter:
    """One named parameter of a tool."""

    name: str
    type: ParamType
    description: str
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class ToolDefinition:
    """Static description of a tool plus the callables that run it."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()
    dangerous: bool = False  # needs explicit confirmation outside auto-accept
    needs_snapshot: bool = False  # mutates files; capture them first
    handler: Any = None  # async callable(params) -> dict
    params_type: type | None = None
    affected_paths: Callable[[Any], list[str]] | None = None

    @property
    def required_parameters(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def to_json_schema(self) -> dict[str, Any]:
        """Render the parameters as a JSON Schema object."""
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type, "description": param.description}
            if param.default is not None:
                prop["default"] = param.default
            properties[param.name] = prop
        return {
            "type": "object",
            "properties": properties,
            "required": self.required_parameters,
        }

    def bind(self, args: dict[str, Any]) -> Any:
        """
        Convert a raw argument map into the tool's typed parameters.

        Missing optional parameters take their declared defaults; unknown
        keys are dropped.
        """
        values: dict[str, Any] = {}
        for param in self.parameters:
            if args.get(param.name) is not None:
                values[param.name] = args[param.name]
            elif param.default is not None:
                values[param.name] = param.default
        if self.params_type is None:
            return values
        return self.params_type(**values)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None
    error_kind: ErrorKind | None = None


class BaseTool(ABC):
    """Base class for built-in tools."""

    dangerous: bool = False
    needs_snapshot: bool = False
    params_type: type | None = None

    def __init__(self, cwd: str | None = None) -> None:
        self.cwd = cwd or "."

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]: ...

    @abstractmethod
    async def execute(self, params: Any) -> dict[str, Any]:
        """Run the tool. Raise ``ToolExecutionError`` on failure."""

    def affected_paths(self, params: Any) -> list[str]:
        """Absolute paths this call may modify (captured before mutation)."""
        return []

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=tuple(self.parameters),
            dangerous=self.dangerous,
            needs_snapshot=self.needs_snapshot,
            handler=self.execute,
            params_type=self.params_type,
            affected_paths=self.affected_paths,
        )

    def _resolve_path(self, file_path: str) -> Path:
        """Resolve a file path, making it absolute if needed."""
        p = Path(file_path).expanduser()
        if p.is_absolute():
            return p
        return (Path(self.cwd) / p).absolute()


class ToolCatalog:
    """Fixed mapping from tool name to definition, in registration order."""

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def all(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def validate(self, name: str, params: dict[str, Any]) -> ValidationResult:
        """Check the tool exists and every required parameter is present."""
        definition = self._tools.get(name)
        if definition is None:
            return ValidationResult(
                valid=False,
                error=f"Unknown tool: {name}",
                error_kind=ErrorKind.UNKNOWN_TOOL,
            )

        for param in definition.parameters:
            if param.required and params.get(param.name) is None:
                return ValidationResult(
                    valid=False,
                    error=f"Missing required parameter: {param.name}",
                    error_kind=ErrorKind.MISSING_PARAMETER,
                )

        return ValidationResult(valid=True)

    def get_definitions(self) -> list[dict[str, Any]]:
        """Get tool definitions in OpenAI function calling format."""
        return [
            {
                "type": "function",
                "function": {
                    "name": t.name,
                    "description": t.description,
                    "parameters": t.to_json_schema(),
                },
            }
            for t in self._tools.values()
        ]

    def get_tools_prompt(self) -> str:
        """Plain-text tool listing for system prompts."""
        lines = ["Available tools:", ""]
        for tool in self._tools.values():
            lines.append(f"## {tool.name}")
            lines.append(tool.description)
            if tool.dangerous:
                lines.append("Requires user confirmation")
            lines.append("")
            lines.append("Parameters:")
            for param in tool.parameters:
                flag = "(required)" if param.required else "(optional)"
                lines.append(f"- {param.name} {flag}: {param.description}")
            lines.append("")
        return "\n".join(lines)
