"""Built-in tools and the catalog that dispatches to them."""
from __future__ import annotations

from agent_rewind_engine.runtime import ShellRuntime
from agent_rewind_engine.tools.analysis import AnalyzeCodeTool, FindSymbolTool, GetImportsTool
from agent_rewind_engine.tools.bash import BashTool
from agent_rewind_engine.tools.code import ExecuteCodeTool
from agent_rewind_engine.tools.edit import EditFileTool
from agent_rewind_engine.tools.files import (
    CopyFileTool,
    CreateDirectoryTool,
    DeleteFileTool,
    MoveFileTool,
)
from agent_rewind_engine.tools.find import GlobTool
from agent_rewind_engine.tools.git import GitDiffTool, GitLogTool, GitStatusTool
from agent_rewind_engine.tools.grep import SearchFilesTool
from agent_rewind_engine.tools.ls import ListDirectoryTool
from agent_rewind_engine.tools.read import ReadFileTool
from agent_rewind_engine.tools.registry import (
    BaseTool,
    ToolCatalog,
    ToolDefinition,
    ToolParameter,
    ValidationResult,
)
from agent_rewind_engine.tools.tree import TreeTool
from agent_rewind_engine.tools.write import WriteFileTool

__all__ = [
    "BaseTool",
    "ToolCatalog",
    "ToolDefinition",
    "ToolParameter",
    "ValidationResult",
    "ReadFileTool",
    "WriteFileTool",
    "EditFileTool",
    "ListDirectoryTool",
    "SearchFilesTool",
    "GlobTool",
    "TreeTool",
    "GitStatusTool",
    "GitDiffTool",
    "GitLogTool",
    "AnalyzeCodeTool",
    "FindSymbolTool",
    "GetImportsTool",
    "BashTool",
    "ExecuteCodeTool",
    "CopyFileTool",
    "MoveFileTool",
    "DeleteFileTool",
    "CreateDirectoryTool",
    "create_default_tools",
    "create_default_catalog",
]


def create_default_tools(
    cwd: str | None = None, runtime: ShellRuntime | None = None,
) -> list[BaseTool]:
    """Instantiate every built-in tool, in catalog order."""
    runtime = runtime or ShellRuntime()
    return [
        ReadFileTool(cwd),
        WriteFileTool(cwd),
        EditFileTool(cwd),
        ListDirectoryTool(cwd),
        SearchFilesTool(cwd),
        GlobTool(cwd),
        TreeTool(cwd),
        GitStatusTool(cwd),
        GitDiffTool(cwd),
        GitLogTool(cwd),
        AnalyzeCodeTool(cwd),
        FindSymbolTool(cwd),
        GetImportsTool(cwd),
        BashTool(cwd, runtime),
        ExecuteCodeTool(cwd, runtime),
        CopyFileTool(cwd),
        MoveFileTool(cwd),
        DeleteFileTool(cwd),
        CreateDirectoryTool(cwd),
    ]


def create_default_catalog(
    cwd: str | None = None, runtime: ShellRuntime | None = None,
) -> ToolCatalog:
    """Build the fixed catalog of built-in tools."""
    return ToolCatalog(t.definition() for t in create_default_tools(cwd, runtime))
