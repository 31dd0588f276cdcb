"""
Static code analysis tools: analyze_code, find_symbol and get_imports.

Python sources are parsed with :mod:`ast`. JavaScript and TypeScript are
scanned with regular expressions, which is approximate but needs no parser.
All three tools are read-only and therefore available in plan mode.
"""
from __future__ import annotations

import ast
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_rewind_engine.errors import ToolExecutionError
from agent_rewind_engine.logging import get_logger
from agent_rewind_engine.tools.registry import BaseTool, ToolParameter

logger = get_logger("tools.analysis")

_JS_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}
_SOURCE_EXTENSIONS = _JS_EXTENSIONS | {".py"}

_SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv", "dist", "build"}

_MAX_RESULTS = 500

_JS_FUNCTION = re.compile(r"function\s+(\w+)")
_JS_CLASS = re.compile(r"class\s+(\w+)")
_JS_INTERFACE = re.compile(r"interface\s+(\w+)")
_JS_EXPORT = re.compile(r"export\s+(?:const|function|class|interface)\s+(\w+)")
_JS_IMPORT = re.compile(r"import\s+.+from\s+['\"]")

_JS_NAMED_IMPORT = re.compile(r"import\s+\{([^}]+)\}\s+from\s+['\"]([^'\"]+)['\"]")
_JS_DEFAULT_IMPORT = re.compile(r"import\s+(\w+)\s+from\s+['\"]([^'\"]+)['\"]")
_JS_NAMESPACE_IMPORT = re.compile(r"import\s+\*\s+as\s+(\w+)\s+from\s+['\"]([^'\"]+)['\"]")


class _SourceTool(BaseTool):
    def _read_source(self, file_path: str) -> tuple[Path, str]:
        path = self._resolve_path(file_path)
        if not path.is_file():
            raise ToolExecutionError(f"File not found: {file_path}")
        try:
            return path, path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ToolExecutionError(f"{file_path} is not valid UTF-8 text") from e


def _parse_python(content: str, file_path: str) -> ast.Module:
    try:
        return ast.parse(content, filename=file_path)
    except SyntaxError as e:
        raise ToolExecutionError(f"Cannot parse {file_path}: {e.msg} (line {e.lineno})") from e


@dataclass(frozen=True)
class AnalyzeCodeParams:
    file_path: str


class AnalyzeCodeTool(_SourceTool):
    """Summarize the structure of a source file."""

    params_type = AnalyzeCodeParams

    @property
    def name(self) -> str:
        return "analyze_code"

    @property
    def description(self) -> str:
        return "Analyze code structure (functions, classes, imports) of a file"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter("file_path", "string", "Path to the source file", required=True)]

    async def execute(self, params: AnalyzeCodeParams) -> dict[str, Any]:
        path, content = self._read_source(params.file_path)
        ext = path.suffix
        analysis: dict[str, Any] = {
            "file": params.file_path,
            "extension": ext,
            "lines": len(content.split("\n")),
            "size": len(content.encode("utf-8")),
        }

        if ext in _JS_EXTENSIONS:
            analysis.update(
                functions=_JS_FUNCTION.findall(content),
                classes=_JS_CLASS.findall(content),
                interfaces=_JS_INTERFACE.findall(content),
                exports=_JS_EXPORT.findall(content),
                imports=len(_JS_IMPORT.findall(content)),
            )
        elif ext == ".py":
            tree = _parse_python(content, params.file_path)
            nodes = list(ast.walk(tree))
            analysis.update(
                functions=[
                    n.name for n in nodes
                    if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))
                ],
                classes=[n.name for n in nodes if isinstance(n, ast.ClassDef)],
                imports=sum(1 for n in tree.body if isinstance(n, (ast.Import, ast.ImportFrom))),
            )

        return analysis


@dataclass(frozen=True)
class FindSymbolParams:
    symbol: str
    path: str | None = None


class FindSymbolTool(BaseTool):
    """Find definitions and usages of an identifier across source files."""

    params_type = FindSymbolParams

    @property
    def name(self) -> str:
        return "find_symbol"

    @property
    def description(self) -> str:
        return "Find where a symbol is defined and used in source files"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter("symbol", "string", "Identifier to look for", required=True),
            ToolParameter("path", "string", "Directory to search (default: current directory)"),
        ]

    async def execute(self, params: FindSymbolParams) -> dict[str, Any]:
        if not params.symbol:
            raise ToolExecutionError("symbol must not be empty")

        search_path = self._resolve_path(params.path) if params.path else Path(self.cwd).absolute()
        if not search_path.is_dir():
            raise ToolExecutionError(f"Directory not found: {search_path}")

        name = re.escape(params.symbol)
        definition = re.compile(
            rf"\b(?:function|const|let|var|class|interface|type)\s+{name}\b|\bdef\s+{name}\b"
        )
        usage = re.compile(rf"\b{name}\b")

        results: list[dict[str, Any]] = []
        truncated = False
        for file_path in self._source_files(search_path):
            try:
                text = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for line_no, line in enumerate(text.split("\n"), 1):
                is_definition = bool(definition.search(line))
                if not is_definition and not usage.search(line):
                    continue
                if len(results) >= _MAX_RESULTS:
                    truncated = True
                    break
                results.append({
                    "file": file_path.relative_to(search_path).as_posix(),
                    "line": line_no,
                    "content": line.strip(),
                    "type": "definition" if is_definition else "usage",
                })
            if truncated:
                break

        definitions = sum(1 for r in results if r["type"] == "definition")
        logger.debug("find_symbol %r: %d result(s)", params.symbol, len(results))
        return {
            "symbol": params.symbol,
            "results": results,
            "total": len(results),
            "definitions": definitions,
            "usages": len(results) - definitions,
            "truncated": truncated,
        }

    @staticmethod
    def _source_files(root: Path) -> list[Path]:
        files: list[Path] = []
        for current, dirs, names in os.walk(root):
            dirs[:] = sorted(d for d in dirs if d not in _SKIP_DIRS)
            files.extend(
                Path(current) / n for n in sorted(names)
                if os.path.splitext(n)[1] in _SOURCE_EXTENSIONS
            )
        return files


@dataclass(frozen=True)
class GetImportsParams:
    file_path: str


class GetImportsTool(_SourceTool):
    """List the import statements of a source file."""

    params_type = GetImportsParams

    @property
    def name(self) -> str:
        return "get_imports"

    @property
    def description(self) -> str:
        return "List all imports in a source file"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter("file_path", "string", "Path to the source file", required=True)]

    async def execute(self, params: GetImportsParams) -> dict[str, Any]:
        path, content = self._read_source(params.file_path)

        if path.suffix in _JS_EXTENSIONS:
            imports = self._js_imports(content)
        elif path.suffix == ".py":
            imports = self._python_imports(_parse_python(content, params.file_path))
        else:
            imports = []

        return {"file": params.file_path, "imports": imports, "total": len(imports)}

    @staticmethod
    def _js_imports(content: str) -> list[dict[str, Any]]:
        imports: list[dict[str, Any]] = []
        for line_no, line in enumerate(content.split("\n"), 1):
            named = _JS_NAMED_IMPORT.search(line)
            default = _JS_DEFAULT_IMPORT.search(line)
            namespace = _JS_NAMESPACE_IMPORT.search(line)
            if named:
                imports.append({
                    "source": named.group(2),
                    "imports": [s.strip() for s in named.group(1).split(",") if s.strip()],
                    "line": line_no,
                })
            elif default:
                imports.append({
                    "source": default.group(2), "imports": [default.group(1)], "line": line_no,
                })
            if namespace:
                imports.append({
                    "source": namespace.group(2),
                    "imports": [f"* as {namespace.group(1)}"],
                    "line": line_no,
                })
        return imports

    @staticmethod
    def _python_imports(tree: ast.Module) -> list[dict[str, Any]]:
        imports: list[dict[str, Any]] = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    imports.append({
                        "source": alias.name,
                        "imports": [alias.asname or alias.name],
                        "line": node.lineno,
                    })
            elif isinstance(node, ast.ImportFrom):
                imports.append({
                    "source": "." * node.level + (node.module or ""),
                    "imports": [a.asname or a.name for a in node.names],
                    "line": node.lineno,
                })
        imports.sort(key=lambda entry: entry["line"])
        return imports
