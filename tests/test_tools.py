"""Tests for built-in tools and the tool catalog."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from agent_rewind_engine.errors import ErrorKind, ToolExecutionError
from agent_rewind_engine.runtime import ShellRuntime
from agent_rewind_engine.tools import (
    AnalyzeCodeTool,
    BashTool,
    CopyFileTool,
    CreateDirectoryTool,
    DeleteFileTool,
    EditFileTool,
    ExecuteCodeTool,
    FindSymbolTool,
    GetImportsTool,
    GitDiffTool,
    GitLogTool,
    GitStatusTool,
    GlobTool,
    ListDirectoryTool,
    MoveFileTool,
    ReadFileTool,
    SearchFilesTool,
    ToolCatalog,
    ToolDefinition,
    ToolParameter,
    TreeTool,
    WriteFileTool,
    create_default_catalog,
)
from agent_rewind_engine.tools.edit import EditFileParams
from agent_rewind_engine.tools.files import (
    CopyFileParams,
    CreateDirectoryParams,
    DeleteFileParams,
    MoveFileParams,
)
from agent_rewind_engine.tools.read import ReadFileParams
from agent_rewind_engine.tools.write import WriteFileParams


def _bind(tool, **args):
    return tool.definition().bind(args)


class TestToolCatalog:
    """Tests for ToolCatalog."""

    def test_default_catalog_contents(self) -> None:
        """Should register every built-in tool in a fixed order."""
        catalog = create_default_catalog("/tmp")

        assert catalog.names() == [
            "read_file", "write_file", "edit_file", "list_directory",
            "search_files", "glob", "tree", "git_status", "git_diff",
            "git_log", "analyze_code", "find_symbol", "get_imports", "bash",
            "execute_code", "copy_file", "move_file", "delete_file",
            "create_directory",
        ]
        assert len(catalog) == 19
        assert "bash" in catalog

    def test_dangerous_and_snapshot_flags(self) -> None:
        """Should flag dangerous and snapshotting tools."""
        catalog = create_default_catalog("/tmp")

        dangerous = {t.name for t in catalog.all() if t.dangerous}
        snapshotting = {t.name for t in catalog.all() if t.needs_snapshot}

        assert dangerous == {"bash", "execute_code", "delete_file"}
        assert snapshotting == {
            "write_file", "edit_file", "copy_file", "move_file", "delete_file",
        }

    def test_validate_unknown_tool(self) -> None:
        """Should report unknown tools."""
        result = create_default_catalog("/tmp").validate("frobnicate", {})

        assert not result.valid
        assert result.error == "Unknown tool: frobnicate"
        assert result.error_kind is ErrorKind.UNKNOWN_TOOL

    def test_validate_missing_parameter(self) -> None:
        """Should name the first missing required parameter."""
        result = create_default_catalog("/tmp").validate("write_file", {"file_path": "x"})

        assert not result.valid
        assert result.error == "Missing required parameter: content"
        assert result.error_kind is ErrorKind.MISSING_PARAMETER

    def test_validate_ok(self) -> None:
        """Should accept calls with all required parameters."""
        result = create_default_catalog("/tmp").validate("read_file", {"file_path": "x"})

        assert result.valid
        assert result.error is None

    def test_get_definitions_openai_format(self) -> None:
        """Should render function-calling definitions with JSON Schema."""
        catalog = create_default_catalog("/tmp")
        defs = {d["function"]["name"]: d for d in catalog.get_definitions()}

        edit = defs["edit_file"]
        assert edit["type"] == "function"
        schema = edit["function"]["parameters"]
        assert schema["required"] == ["file_path", "old_string", "new_string"]
        assert schema["properties"]["replace_all"]["default"] is False

    def test_tools_prompt_marks_dangerous(self) -> None:
        """Should list tools and mark the ones needing confirmation."""
        prompt = create_default_catalog("/tmp").get_tools_prompt()

        assert "## bash" in prompt
        assert "Requires user confirmation" in prompt
        assert "- file_path (required)" in prompt

    def test_custom_definition(self) -> None:
        """Should accept hand-built definitions."""
        async def handler(params):
            return {"ok": True}

        catalog = ToolCatalog([
            ToolDefinition(
                name="ping",
                description="Ping",
                parameters=(ToolParameter("host", "string", "Host", required=True),),
                handler=handler,
            )
        ])

        ping = catalog.get("ping")
        assert ping is not None
        assert ping.bind({"host": "a", "extra": 1}) == {"host": "a"}


class TestBind:
    """Tests for binding raw arguments to typed parameters."""

    def test_defaults_filled(self) -> None:
        """Should fill declared defaults for omitted optional parameters."""
        params = _bind(EditFileTool("/tmp"), file_path="f", old_string="a", new_string="b")

        assert isinstance(params, EditFileParams)
        assert params.replace_all is False

    def test_none_values_use_defaults(self) -> None:
        """Should treat explicit None as omitted."""
        params = _bind(ReadFileTool("/tmp"), file_path="f", offset=None)

        assert params == ReadFileParams(file_path="f")


class TestReadFileTool:
    """Tests for read_file."""

    async def test_reads_numbered_lines(self, tmp_path: Path) -> None:
        """Should return numbered lines and the total line count."""
        (tmp_path / "f.txt").write_text("one\ntwo\nthree")
        tool = ReadFileTool(str(tmp_path))

        data = await tool.execute(ReadFileParams(file_path="f.txt"))

        assert data["content"] == "1: one\n2: two\n3: three"
        assert data["total_lines"] == 3

    async def test_line_range(self, tmp_path: Path) -> None:
        """Should honor offset and limit."""
        (tmp_path / "f.txt").write_text("\n".join(f"line{i}" for i in range(1, 11)))
        tool = ReadFileTool(str(tmp_path))

        data = await tool.execute(ReadFileParams(file_path="f.txt", offset=4, limit=2))

        assert data["content"] == "4: line4\n5: line5"
        assert data["start_line"] == 4
        assert data["end_line"] == 5

    async def test_missing_file(self, tmp_path: Path) -> None:
        """Should raise for a missing file."""
        with pytest.raises(ToolExecutionError, match="File not found"):
            await ReadFileTool(str(tmp_path)).execute(ReadFileParams(file_path="nope"))

    async def test_directory(self, tmp_path: Path) -> None:
        """Should refuse to read a directory."""
        with pytest.raises(ToolExecutionError, match="directory"):
            await ReadFileTool(str(tmp_path)).execute(ReadFileParams(file_path="."))


class TestWriteFileTool:
    """Tests for write_file."""

    async def test_creates_with_parents(self, tmp_path: Path) -> None:
        """Should create missing parent directories."""
        tool = WriteFileTool(str(tmp_path))

        data = await tool.execute(WriteFileParams(file_path="a/b/c.txt", content="hi"))

        assert (tmp_path / "a" / "b" / "c.txt").read_text() == "hi"
        assert data["created"] is True
        assert data["bytes_written"] == 2

    async def test_overwrite_preserves_line_endings(self, tmp_path: Path) -> None:
        """Should write content byte-for-byte."""
        target = tmp_path / "f.txt"
        target.write_text("old")

        data = await WriteFileTool(str(tmp_path)).execute(
            WriteFileParams(file_path=str(target), content="a\r\nb\n"),
        )

        assert target.read_bytes() == b"a\r\nb\n"
        assert data["created"] is False

    def test_affected_paths(self, tmp_path: Path) -> None:
        """Should report the resolved target file."""
        tool = WriteFileTool(str(tmp_path))

        assert tool.affected_paths(WriteFileParams("x.txt", "")) == [str(tmp_path / "x.txt")]


class TestEditFileTool:
    """Tests for edit_file."""

    async def test_unique_replacement(self, tmp_path: Path) -> None:
        """Should change only the matched span."""
        target = tmp_path / "f.py"
        target.write_bytes(b"def foo():\r\n    return 1\r\n")

        data = await EditFileTool(str(tmp_path)).execute(
            EditFileParams(file_path="f.py", old_string="return 1", new_string="return 2"),
        )

        assert target.read_bytes() == b"def foo():\r\n    return 2\r\n"
        assert data["replacements"] == 1
        assert "+    return 2" in data["diff"]

    async def test_multiple_occurrences_fail_without_write(self, tmp_path: Path) -> None:
        """Should refuse ambiguous edits and leave the file untouched."""
        target = tmp_path / "f.txt"
        target.write_text("x = 1\nx = 1\nx = 1\n")

        with pytest.raises(ToolExecutionError, match="3 times"):
            await EditFileTool(str(tmp_path)).execute(
                EditFileParams(file_path="f.txt", old_string="x = 1", new_string="x = 2"),
            )

        assert target.read_text() == "x = 1\nx = 1\nx = 1\n"

    async def test_replace_all(self, tmp_path: Path) -> None:
        """Should replace every occurrence when asked."""
        target = tmp_path / "f.txt"
        target.write_text("a a a")

        data = await EditFileTool(str(tmp_path)).execute(
            EditFileParams(file_path="f.txt", old_string="a", new_string="b", replace_all=True),
        )

        assert target.read_text() == "b b b"
        assert data["replacements"] == 3

    async def test_not_found_hint(self, tmp_path: Path) -> None:
        """Should suggest a close match when the string is absent."""
        (tmp_path / "f.py").write_text("def calculate_total(items):\n    pass\n")

        with pytest.raises(ToolExecutionError) as exc_info:
            await EditFileTool(str(tmp_path)).execute(
                EditFileParams(
                    file_path="f.py",
                    old_string="def calculate_totals(items):",
                    new_string="def total(items):",
                ),
            )

        message = str(exc_info.value)
        assert "not found" in message
        assert "Did you mean" in message

    async def test_identical_strings_rejected(self, tmp_path: Path) -> None:
        """Should reject no-op edits."""
        (tmp_path / "f.txt").write_text("abc")

        with pytest.raises(ToolExecutionError, match="must be different"):
            await EditFileTool(str(tmp_path)).execute(
                EditFileParams(file_path="f.txt", old_string="abc", new_string="abc"),
            )


class TestListDirectoryTool:
    """Tests for list_directory."""

    async def test_sorted_with_dir_suffix(self, project_dir: Path) -> None:
        """Should sort entries and suffix directories with a slash."""
        data = await ListDirectoryTool(str(project_dir)).execute(
            _bind(ListDirectoryTool(str(project_dir))),
        )

        assert data["files"] == ["a.txt", "src/"]
        assert data["total"] == 2

    async def test_recursive(self, project_dir: Path) -> None:
        """Should include nested entries as relative paths."""
        tool = ListDirectoryTool(str(project_dir))

        data = await tool.execute(_bind(tool, recursive=True))

        assert "src/main.py" in data["files"]
        assert data["truncated"] is False

    async def test_not_a_directory(self, project_dir: Path) -> None:
        """Should raise for a file path."""
        tool = ListDirectoryTool(str(project_dir))

        with pytest.raises(ToolExecutionError, match="not a directory"):
            await tool.execute(_bind(tool, path="a.txt"))


class TestSearchFilesTool:
    """Tests for search_files."""

    async def test_case_insensitive(self, project_dir: Path) -> None:
        """Should match regardless of case and report file and line."""
        tool = SearchFilesTool(str(project_dir))

        data = await tool.execute(_bind(tool, pattern="HELLO"))

        assert data["total_matches"] == 1
        assert data["matches"][0] == {
            "file": "src/main.py", "line": 1, "content": "print('hello')",
        }

    async def test_skips_vendor_dirs(self, project_dir: Path) -> None:
        """Should not descend into node_modules or .git."""
        (project_dir / "node_modules").mkdir()
        (project_dir / "node_modules" / "lib.js").write_text("hello")
        tool = SearchFilesTool(str(project_dir))

        data = await tool.execute(_bind(tool, pattern="hello"))

        assert [m["file"] for m in data["matches"]] == ["src/main.py"]

    async def test_file_pattern(self, project_dir: Path) -> None:
        """Should restrict the search to matching file names."""
        tool = SearchFilesTool(str(project_dir))

        data = await tool.execute(_bind(tool, pattern="alpha|hello", file_pattern="*.txt"))

        assert [m["file"] for m in data["matches"]] == ["a.txt"]

    async def test_invalid_regex(self, project_dir: Path) -> None:
        """Should report a bad pattern."""
        tool = SearchFilesTool(str(project_dir))

        with pytest.raises(ToolExecutionError, match="Invalid regex"):
            await tool.execute(_bind(tool, pattern="("))


class TestGlobTool:
    """Tests for glob."""

    async def test_sorted_relative(self, project_dir: Path) -> None:
        """Should return sorted relative paths."""
        (project_dir / "b.txt").write_text("")
        tool = GlobTool(str(project_dir))

        data = await tool.execute(_bind(tool, pattern="**/*.txt"))

        assert data["files"] == ["a.txt", "b.txt"]

    async def test_no_matches(self, project_dir: Path) -> None:
        tool = GlobTool(str(project_dir))

        data = await tool.execute(_bind(tool, pattern="*.rs"))

        assert data["files"] == []


class TestTreeTool:
    """Tests for tree."""

    async def test_directories_first(self, project_dir: Path) -> None:
        """Should list directories before files."""
        (project_dir / ".hidden").write_text("")
        tool = TreeTool(str(project_dir))

        data = await tool.execute(_bind(tool))

        lines = data["tree"].splitlines()
        assert lines[1].endswith("src/")
        assert not any(".hidden" in line for line in lines)
        assert data["files"] == 2

    async def test_max_depth(self, project_dir: Path) -> None:
        """Should stop descending at max_depth."""
        tool = TreeTool(str(project_dir))

        data = await tool.execute(_bind(tool, max_depth=1))

        assert "main.py" not in data["tree"]


class TestFileManagementTools:
    """Tests for copy/move/delete/create_directory."""

    async def test_copy_file(self, project_dir: Path) -> None:
        tool = CopyFileTool(str(project_dir))

        await tool.execute(CopyFileParams(source="a.txt", destination="b.txt"))

        assert (project_dir / "b.txt").read_text() == "alpha\n"
        assert (project_dir / "a.txt").exists()

    async def test_copy_directory_affected_paths(self, project_dir: Path) -> None:
        """Should map every file under a directory to its destination."""
        tool = CopyFileTool(str(project_dir))

        paths = tool.affected_paths(CopyFileParams(source="src", destination="lib"))

        assert paths == [str(project_dir / "lib" / "main.py")]

    async def test_move_file(self, project_dir: Path) -> None:
        tool = MoveFileTool(str(project_dir))

        await tool.execute(MoveFileParams(source="a.txt", destination="moved/a.txt"))

        assert not (project_dir / "a.txt").exists()
        assert (project_dir / "moved" / "a.txt").read_text() == "alpha\n"

    async def test_move_affected_paths(self, project_dir: Path) -> None:
        """Should include both the source and the destination."""
        tool = MoveFileTool(str(project_dir))

        paths = tool.affected_paths(MoveFileParams(source="a.txt", destination="b.txt"))

        assert paths == [str(project_dir / "a.txt"), str(project_dir / "b.txt")]

    async def test_delete_directory(self, project_dir: Path) -> None:
        """Should remove directories recursively and expose their files."""
        tool = DeleteFileTool(str(project_dir))
        params = DeleteFileParams(path="src")

        assert tool.affected_paths(params) == [str(project_dir / "src" / "main.py")]
        data = await tool.execute(params)

        assert data["type"] == "directory"
        assert not (project_dir / "src").exists()

    async def test_delete_missing(self, project_dir: Path) -> None:
        with pytest.raises(ToolExecutionError, match="Path not found"):
            await DeleteFileTool(str(project_dir)).execute(DeleteFileParams(path="nope"))

    async def test_create_directory(self, project_dir: Path) -> None:
        tool = CreateDirectoryTool(str(project_dir))

        data = await tool.execute(CreateDirectoryParams(path="x/y/z"))

        assert (project_dir / "x" / "y" / "z").is_dir()
        assert data["created"] is True

    async def test_create_directory_non_recursive(self, project_dir: Path) -> None:
        """Should fail when parents are missing and recursive is off."""
        tool = CreateDirectoryTool(str(project_dir))

        with pytest.raises(ToolExecutionError, match="Parent directory"):
            await tool.execute(CreateDirectoryParams(path="p/q", recursive=False))


class TestBashTool:
    """Tests for bash."""

    async def test_success(self, tmp_path: Path, runtime: ShellRuntime) -> None:
        tool = BashTool(str(tmp_path), runtime)

        data = await tool.execute(_bind(tool, command="echo hi; echo err >&2"))

        assert data["stdout"] == "hi\n"
        assert data["stderr"] == "err\n"
        assert data["exit_code"] == 0
        assert data["cwd"] == str(tmp_path)

    async def test_failure_keeps_output(self, tmp_path: Path, runtime: ShellRuntime) -> None:
        """Should attach stdout/stderr to the raised error."""
        tool = BashTool(str(tmp_path), runtime)

        with pytest.raises(ToolExecutionError) as exc_info:
            await tool.execute(_bind(tool, command="echo partial; echo boom >&2; exit 3"))

        assert str(exc_info.value) == "boom"
        assert exc_info.value.data["stdout"] == "partial\n"
        assert exc_info.value.data["exit_code"] == 3

    async def test_timeout(self, tmp_path: Path, runtime: ShellRuntime) -> None:
        tool = BashTool(str(tmp_path), runtime)

        with pytest.raises(ToolExecutionError, match="timed out"):
            await tool.execute(_bind(tool, command="sleep 5", timeout=0.3))


class TestExecuteCodeTool:
    """Tests for execute_code."""

    async def test_python(self, tmp_path: Path, runtime: ShellRuntime) -> None:
        tool = ExecuteCodeTool(str(tmp_path), runtime)

        data = await tool.execute(_bind(tool, language="python", code="print(6 * 7)"))

        assert data["stdout"].strip() == "42"

    async def test_shell(self, tmp_path: Path, runtime: ShellRuntime) -> None:
        tool = ExecuteCodeTool(str(tmp_path), runtime)

        data = await tool.execute(_bind(tool, language="shell", code="echo $((2 + 3))"))

        assert data["stdout"].strip() == "5"

    async def test_unsupported_language(self, tmp_path: Path) -> None:
        tool = ExecuteCodeTool(str(tmp_path))

        with pytest.raises(ToolExecutionError, match="Unsupported language"):
            await tool.execute(_bind(tool, language="cobol", code=""))


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitTools:
    """Tests for the read-only git tools."""

    @pytest.fixture
    def repo(self, tmp_path: Path) -> Path:
        def git(*args: str) -> None:
            subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)

        git("init", "-q")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        (tmp_path / "a.txt").write_text("one\n")
        git("add", "a.txt")
        git("commit", "-q", "-m", "first commit")
        return tmp_path

    async def test_status(self, repo: Path) -> None:
        (repo / "new.txt").write_text("x")
        tool = GitStatusTool(str(repo))

        data = await tool.execute(_bind(tool))

        assert data["clean"] is False
        assert {"status": "??", "path": "new.txt"} in data["files"]

    async def test_log(self, repo: Path) -> None:
        tool = GitLogTool(str(repo))

        data = await tool.execute(_bind(tool))

        assert len(data["commits"]) == 1
        assert data["commits"][0]["message"] == "first commit"
        assert data["commits"][0]["author"] == "Dev"

    async def test_not_a_repo(self, tmp_path: Path) -> None:
        (tmp_path / "plain").mkdir()
        tool = GitStatusTool(str(tmp_path / "plain"))

        with pytest.raises(ToolExecutionError):
            await tool.execute(_bind(tool))

    async def test_diff(self, repo: Path) -> None:
        (repo / "a.txt").write_text("two\n")
        tool = GitDiffTool(str(repo))

        data = await tool.execute(_bind(tool, file="a.txt"))

        assert "-one" in data["diff"]
        assert "+two" in data["diff"]
        assert data["staged"] is False

    async def test_log_empty_repo(self, tmp_path: Path) -> None:
        """Should report no commits for a freshly initialised repository."""
        subprocess.run(["git", "init", "-q"], cwd=tmp_path, check=True)
        tool = GitLogTool(str(tmp_path))

        assert await tool.execute(_bind(tool)) == {"commits": []}


PY_SOURCE = '''\
import os
from .models import Item as I, Other

class Greeter:
    def greet(self):
        return os.getcwd()

async def fetch():
    return Greeter().greet()
'''

TS_SOURCE = """\
import { readFile, writeFile } from 'fs/promises';
import path from 'path';
import * as utils from './utils';

export interface Options { verbose: boolean }
export class Runner {}
export function run(opts: Options) { return path.join('a', 'b'); }
"""


class TestAnalysisTools:
    """Tests for analyze_code, find_symbol and get_imports."""

    async def test_analyze_python(self, tmp_path: Path) -> None:
        (tmp_path / "mod.py").write_text(PY_SOURCE)
        tool = AnalyzeCodeTool(str(tmp_path))

        data = await tool.execute(_bind(tool, file_path="mod.py"))

        assert data["extension"] == ".py"
        assert data["lines"] == PY_SOURCE.count("\n") + 1
        assert sorted(data["functions"]) == ["fetch", "greet"]
        assert data["classes"] == ["Greeter"]
        assert data["imports"] == 2

    async def test_analyze_typescript(self, tmp_path: Path) -> None:
        (tmp_path / "run.ts").write_text(TS_SOURCE)
        tool = AnalyzeCodeTool(str(tmp_path))

        data = await tool.execute(_bind(tool, file_path="run.ts"))

        assert data["functions"] == ["run"]
        assert data["classes"] == ["Runner"]
        assert data["interfaces"] == ["Options"]
        assert data["exports"] == ["Options", "Runner", "run"]
        assert data["imports"] == 3

    async def test_analyze_other_extension(self, project_dir: Path) -> None:
        """Should report only size information for unknown languages."""
        tool = AnalyzeCodeTool(str(project_dir))

        data = await tool.execute(_bind(tool, file_path="a.txt"))

        assert data == {"file": "a.txt", "extension": ".txt", "lines": 2, "size": 6}

    async def test_analyze_syntax_error(self, tmp_path: Path) -> None:
        (tmp_path / "bad.py").write_text("def broken(:\n")
        tool = AnalyzeCodeTool(str(tmp_path))

        with pytest.raises(ToolExecutionError, match="Cannot parse bad.py"):
            await tool.execute(_bind(tool, file_path="bad.py"))

    async def test_analyze_missing_file(self, tmp_path: Path) -> None:
        tool = AnalyzeCodeTool(str(tmp_path))

        with pytest.raises(ToolExecutionError, match="File not found"):
            await tool.execute(_bind(tool, file_path="nope.py"))

    async def test_find_symbol(self, tmp_path: Path) -> None:
        """Should separate definitions from usages across source files."""
        (tmp_path / "mod.py").write_text(PY_SOURCE)
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "node_modules" / "dep.js").write_text("function Greeter() {}\n")
        (tmp_path / "notes.txt").write_text("Greeter\n")
        tool = FindSymbolTool(str(tmp_path))

        data = await tool.execute(_bind(tool, symbol="Greeter"))

        assert data["results"] == [
            {"file": "mod.py", "line": 4, "content": "class Greeter:", "type": "definition"},
            {"file": "mod.py", "line": 9, "content": "return Greeter().greet()", "type": "usage"},
        ]
        assert data["definitions"] == 1
        assert data["usages"] == 1
        assert data["truncated"] is False

    async def test_find_symbol_whole_word(self, tmp_path: Path) -> None:
        (tmp_path / "a.js").write_text("const runner = 1;\nrun();\n")
        tool = FindSymbolTool(str(tmp_path))

        data = await tool.execute(_bind(tool, symbol="run"))

        assert [r["line"] for r in data["results"]] == [2]

    async def test_get_imports_python(self, tmp_path: Path) -> None:
        (tmp_path / "mod.py").write_text(PY_SOURCE)
        tool = GetImportsTool(str(tmp_path))

        data = await tool.execute(_bind(tool, file_path="mod.py"))

        assert data["imports"] == [
            {"source": "os", "imports": ["os"], "line": 1},
            {"source": ".models", "imports": ["I", "Other"], "line": 2},
        ]
        assert data["total"] == 2

    async def test_get_imports_typescript(self, tmp_path: Path) -> None:
        (tmp_path / "run.ts").write_text(TS_SOURCE)
        tool = GetImportsTool(str(tmp_path))

        data = await tool.execute(_bind(tool, file_path="run.ts"))

        assert data["imports"] == [
            {"source": "fs/promises", "imports": ["readFile", "writeFile"], "line": 1},
            {"source": "path", "imports": ["path"], "line": 2},
            {"source": "./utils", "imports": ["* as utils"], "line": 3},
        ]

    def test_read_only_flags(self) -> None:
        """Should register the analysis tools as safe, snapshot-free tools."""
        catalog = create_default_catalog("/tmp")

        for name in ("analyze_code", "find_symbol", "get_imports"):
            definition = catalog.get(name)
            assert definition is not None
            assert not definition.dangerous
            assert not definition.needs_snapshot
