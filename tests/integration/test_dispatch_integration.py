"""Integration tests running tool calls end to end through ToolDispatcher.

These use the real process runner, so Bash spawns a shell and Grep spawns
ripgrep (skipped when rg is not installed).
"""

import json
import sys

import pytest

from tests.fixtures.settings import requires_rg
from tests.helpers import set_mtime
from toolhost.config.constants import NO_MATCHES_FOUND
from toolhost.dispatcher import ToolCall, ToolDispatcher

# Module-level marker for all tests in this file
pytestmark = [
    pytest.mark.integration,
    pytest.mark.tools,
    pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell required"),
]


@pytest.fixture
def dispatcher(host_settings):
    return ToolDispatcher(host_settings)


async def call(dispatcher: ToolDispatcher, name: str, **arguments):
    return await dispatcher.dispatch(ToolCall(name=name, arguments=arguments))


@pytest.mark.asyncio
async def test_bash_sees_files_written_by_write(dispatcher):
    await call(dispatcher, "Write", file_path="src/app.py", content="print('hi')\n")

    result = await call(dispatcher, "Bash", command="cat src/app.py", description="show")

    assert result.is_error is False
    assert result.text == "[show] print('hi')\n"


@pytest.mark.asyncio
async def test_bash_failure_is_error_envelope(dispatcher):
    result = await call(dispatcher, "Bash", command="ls does-not-exist")

    assert result.is_error is True
    assert "does-not-exist" in result.text


@pytest.mark.asyncio
async def test_bash_dangerous_command_never_runs(dispatcher, workspace):
    (workspace / "keep.txt").write_text("x")

    result = await call(dispatcher, "Bash", command="sudo rm keep.txt")

    assert result.is_error is True
    assert result.text == "Error: Dangerous command detected"
    assert (workspace / "keep.txt").exists()


@pytest.mark.asyncio
async def test_glob_after_edit_puts_file_first(dispatcher, workspace):
    for name, mtime in [("a.md", 1_000), ("b.md", 2_000)]:
        (workspace / name).write_text(f"# {name}\n")
        set_mtime(workspace / name, mtime)

    before = await call(dispatcher, "Glob", pattern="*.md", as_array=True)
    await call(dispatcher, "Edit", file_path="a.md", old_string="# a.md", new_string="# A")
    after = await call(dispatcher, "Glob", pattern="*.md", as_array=True)

    assert json.loads(before.text) == ["b.md", "a.md"]
    assert json.loads(after.text) == ["a.md", "b.md"]


@pytest.mark.asyncio
async def test_ls_recursive_after_writes(dispatcher):
    await call(dispatcher, "Write", file_path="pkg/__init__.py", content="")
    await call(dispatcher, "Write", file_path="pkg/core.py", content="x = 1\n")

    result = await call(dispatcher, "LS", recursive=True)

    assert result.text == "pkg/\n  __init__.py (0 bytes)\n  core.py (6 bytes)"


@requires_rg
@pytest.mark.asyncio
async def test_grep_finds_written_content(dispatcher, workspace):
    await call(dispatcher, "Write", file_path="notes/todo.txt", content="fix the parser\n")
    await call(dispatcher, "Write", file_path="notes/done.txt", content="shipped\n")

    found = await call(dispatcher, "Grep", pattern="parser")
    missing = await call(dispatcher, "Grep", pattern="nonexistent_token_xyz")

    assert found.is_error is False
    assert found.text == str(workspace / "notes" / "todo.txt")
    assert missing.is_error is False
    assert missing.text == NO_MATCHES_FOUND


@requires_rg
@pytest.mark.asyncio
async def test_grep_content_mode_with_line_numbers(dispatcher, workspace):
    await call(dispatcher, "Write", file_path="a.txt", content="one\ntwo\nthree\n")

    result = await call(
        dispatcher,
        "Grep",
        pattern="t",
        path="a.txt",
        options={"output_mode": "content", "-n": True},
    )

    assert result.text == "2:two\n3:three"
