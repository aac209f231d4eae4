"""Unit tests for toolhost.tools.filesystem module.

Test suite covering:
1. Path resolution against the configured working directory
2. Read (numbering, offset/limit windows, long lines, empty files)
3. Write (create, overwrite, idempotent identical writes)
4. Edit (literal first-occurrence and replace-all semantics)
5. LS (text and array modes, hidden entries, recursion, plain files)
"""

import json

import pytest

from tests.helpers import (
    assert_error_response,
    assert_success_response,
    build_test_settings,
    set_mtime,
)
from toolhost.catalogue import ToolName
from toolhost.config.constants import EMPTY_DIRECTORY, OUTPUT_LIMIT
from toolhost.tools.filesystem import FileSystemTools


@pytest.fixture
def fs_tools(host_settings):
    """Create FileSystemTools rooted at the temporary workspace."""
    return FileSystemTools(host_settings)


# ============================================================================
# Path resolution
# ============================================================================


@pytest.mark.unit
@pytest.mark.tools
class TestPathResolution:
    """Tests for resolving path arguments against the working directory."""

    def test_relative_path_joins_working_directory(self, fs_tools, workspace):
        assert fs_tools._resolve_path("a/b.txt") == workspace / "a" / "b.txt"

    def test_absolute_path_is_kept(self, fs_tools, tmp_path):
        target = tmp_path / "elsewhere.txt"
        assert fs_tools._resolve_path(str(target)) == target

    def test_empty_path_means_working_directory(self, fs_tools, workspace):
        assert fs_tools._resolve_path("") == workspace
        assert fs_tools._resolve_path(None) == workspace

    def test_dot_dot_is_collapsed(self, fs_tools, workspace):
        assert fs_tools._resolve_path("sub/../x.txt") == workspace / "x.txt"

    def test_get_tools_maps_names_to_handlers(self, fs_tools):
        tools = fs_tools.get_tools()

        assert list(tools) == [ToolName.READ, ToolName.WRITE, ToolName.EDIT, ToolName.LS]
        assert tools[ToolName.LS] == fs_tools.list_directory


# ============================================================================
# Read
# ============================================================================


@pytest.mark.unit
@pytest.mark.tools
class TestReadFile:
    """Tests for read_file."""

    @pytest.mark.asyncio
    async def test_read_numbers_lines(self, fs_tools, workspace):
        (workspace / "a.txt").write_text("alpha\nbeta")

        result = await fs_tools.read_file("a.txt")

        assert_success_response(result)
        assert result["result"] == "    1→alpha\n    2→beta"

    @pytest.mark.asyncio
    async def test_read_trailing_newline_yields_empty_last_line(self, fs_tools, sample_files):
        result = await fs_tools.read_file("file1.txt")

        assert_success_response(result)
        assert result["result"].split("\n") == [
            "    1→Hello World",
            "    2→Line 2",
            "    3→Line 3",
            "    4→",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offset,limit", [(0, 3), (2, 5), (8, 10), (9, 1), (10, 4)])
    async def test_offset_limit_window(self, fs_tools, workspace, offset, limit):
        lines = [f"line {i}" for i in range(10)]
        (workspace / "ten.txt").write_text("\n".join(lines))

        result = await fs_tools.read_file("ten.txt", offset=offset, limit=limit)

        assert_success_response(result)
        expected_count = max(min(limit, 10 - offset), 0)
        output = result["result"].split("\n") if result["result"] else []
        assert len(output) == expected_count
        for i, line in enumerate(output):
            assert line == f"{offset + i + 1:>5}→line {offset + i}"

    @pytest.mark.asyncio
    async def test_default_limit_is_2000_lines(self, fs_tools, workspace):
        (workspace / "big.txt").write_text("\n".join("x" for _ in range(2500)))

        result = await fs_tools.read_file("big.txt")

        output = result["result"].split("\n")
        assert len(output) == 2000
        assert output[-1] == " 2000→x"

    @pytest.mark.asyncio
    async def test_default_limit_applies_from_offset(self, fs_tools, workspace):
        (workspace / "big.txt").write_text("\n".join("x" for _ in range(2500)))

        result = await fs_tools.read_file("big.txt", offset=1000)

        output = result["result"].split("\n")
        assert len(output) == 1500
        assert output[0] == " 1001→x"

    @pytest.mark.asyncio
    async def test_long_line_cut_before_numbering(self, fs_tools, workspace):
        (workspace / "wide.txt").write_text("y" * 2500)

        result = await fs_tools.read_file("wide.txt")

        assert result["result"] == "    1→" + "y" * 2000

    @pytest.mark.asyncio
    async def test_output_capped_at_limit(self, fs_tools, workspace):
        (workspace / "many.txt").write_text("\n".join("z" * 1000 for _ in range(100)))

        result = await fs_tools.read_file("many.txt")

        assert len(result["result"]) == OUTPUT_LIMIT

    @pytest.mark.asyncio
    async def test_empty_file_marker(self, fs_tools, sample_files):
        result = await fs_tools.read_file("empty.txt")

        assert_success_response(result)
        assert result["result"] != ""
        assert "empty contents" in result["result"]
        assert str(sample_files / "empty.txt") in result["result"]

    @pytest.mark.asyncio
    async def test_missing_file(self, fs_tools, workspace):
        result = await fs_tools.read_file("nope.txt")

        assert_error_response(result, "not_found")
        assert str(workspace / "nope.txt") in result["message"]

    @pytest.mark.asyncio
    async def test_directory_is_not_a_file(self, fs_tools, sample_files):
        result = await fs_tools.read_file("subdir")

        assert_error_response(result, "not_a_file")

    @pytest.mark.asyncio
    async def test_reads_absolute_path_outside_working_directory(self, fs_tools, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("out")

        result = await fs_tools.read_file(str(outside))

        assert result["result"] == "    1→out"

    @pytest.mark.asyncio
    async def test_null_offset_reads_from_start(self, fs_tools, workspace):
        (workspace / "n.txt").write_text("a\nb")

        result = await fs_tools.read_file("n.txt", offset=None)

        assert result["result"] == "    1→a\n    2→b"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_non_positive_limit_rejected(self, fs_tools, workspace, limit):
        (workspace / "n.txt").write_text("a\nb\nc")

        result = await fs_tools.read_file("n.txt", limit=limit)

        assert_error_response(result, "invalid_arguments")


# ============================================================================
# Write
# ============================================================================


@pytest.mark.unit
@pytest.mark.tools
class TestWriteFile:
    """Tests for write_file."""

    @pytest.mark.asyncio
    async def test_creates_file_and_parents(self, fs_tools, workspace):
        result = await fs_tools.write_file("deep/er/new.txt", "content")

        assert_success_response(result)
        target = workspace / "deep" / "er" / "new.txt"
        assert result["result"] == f"Successfully created file: {target}"
        assert target.read_text() == "content"

    @pytest.mark.asyncio
    async def test_overwrites_existing_file(self, fs_tools, sample_files):
        result = await fs_tools.write_file("file1.txt", "replaced")

        assert_success_response(result)
        assert result["result"].startswith("Successfully overwrote file:")
        assert (sample_files / "file1.txt").read_text() == "replaced"

    @pytest.mark.asyncio
    async def test_identical_content_is_noop(self, fs_tools, workspace):
        target = workspace / "same.txt"
        await fs_tools.write_file("same.txt", "stable")
        set_mtime(target, 1_000_000)

        result = await fs_tools.write_file("same.txt", "stable")

        assert_success_response(result)
        assert "unchanged" in result["result"]
        assert target.stat().st_mtime == 1_000_000
        assert target.read_text() == "stable"

    @pytest.mark.asyncio
    async def test_undecodable_bytes_are_not_identical_to_replacement_text(
        self, fs_tools, workspace
    ):
        target = workspace / "bin.dat"
        target.write_bytes(b"abc\xff")

        result = await fs_tools.write_file("bin.dat", "abc�")

        assert_success_response(result)
        assert result["result"].startswith("Successfully overwrote file:")
        assert target.read_bytes() == "abc�".encode()

    @pytest.mark.asyncio
    async def test_unencodable_content_rejected(self, fs_tools, workspace):
        result = await fs_tools.write_file("bad.txt", "half \ud800 surrogate")

        assert_error_response(result, "invalid_arguments")
        assert not (workspace / "bad.txt").exists()

    @pytest.mark.asyncio
    async def test_write_then_read_round_trip(self, fs_tools):
        await fs_tools.write_file("notes.txt", "first\nsecond")

        result = await fs_tools.read_file("notes.txt")

        assert result["result"] == "    1→first\n    2→second"

    @pytest.mark.asyncio
    async def test_preserves_crlf(self, fs_tools, workspace):
        await fs_tools.write_file("crlf.txt", "a\r\nb\r\n")

        assert (workspace / "crlf.txt").read_bytes() == b"a\r\nb\r\n"

    @pytest.mark.asyncio
    async def test_writing_to_directory_fails(self, fs_tools, sample_files):
        result = await fs_tools.write_file("subdir", "x")

        assert_error_response(result)
        assert result["error"] in ("not_a_file", "os_error", "permission_denied")


# ============================================================================
# Edit
# ============================================================================


@pytest.mark.unit
@pytest.mark.tools
class TestEditFile:
    """Tests for edit_file."""

    @pytest.mark.asyncio
    async def test_replaces_first_occurrence_only(self, fs_tools, workspace):
        (workspace / "a.txt").write_text("aaa")

        result = await fs_tools.edit_file("a.txt", "a", "b")

        assert_success_response(result)
        assert (workspace / "a.txt").read_text() == "baa"

    @pytest.mark.asyncio
    async def test_replace_all(self, fs_tools, workspace):
        (workspace / "a.txt").write_text("aaa")

        result = await fs_tools.edit_file("a.txt", "a", "b", replace_all=True)

        assert_success_response(result)
        assert "replaced all occurrences" in result["result"]
        assert (workspace / "a.txt").read_text() == "bbb"

    @pytest.mark.asyncio
    async def test_old_string_is_literal_not_regex(self, fs_tools, workspace):
        (workspace / "re.txt").write_text("value = a.b*c\nvalue = axbbc\n")

        result = await fs_tools.edit_file("re.txt", "a.b*c", "X", replace_all=True)

        assert_success_response(result)
        assert (workspace / "re.txt").read_text() == "value = X\nvalue = axbbc\n"

    @pytest.mark.asyncio
    async def test_pattern_not_found_leaves_file_untouched(self, fs_tools, workspace):
        target = workspace / "a.txt"
        target.write_text("hello world")
        set_mtime(target, 1_000_000)

        result = await fs_tools.edit_file("a.txt", "missing", "x")

        assert_error_response(result, "pattern_not_found")
        assert "missing" in result["message"]
        assert target.read_text() == "hello world"
        assert target.stat().st_mtime == 1_000_000

    @pytest.mark.asyncio
    async def test_identical_strings_are_noop_even_for_missing_file(self, fs_tools):
        result = await fs_tools.edit_file("does-not-exist.txt", "same", "same")

        assert_success_response(result)
        assert "No changes made" in result["result"]

    @pytest.mark.asyncio
    async def test_missing_file(self, fs_tools):
        result = await fs_tools.edit_file("nope.txt", "a", "b")

        assert_error_response(result, "not_found")

    @pytest.mark.asyncio
    async def test_empty_old_string_rejected(self, fs_tools, sample_files):
        result = await fs_tools.edit_file("file1.txt", "", "x")

        assert_error_response(result, "invalid_arguments")

    @pytest.mark.asyncio
    async def test_delete_text_with_empty_new_string(self, fs_tools, workspace):
        (workspace / "a.txt").write_text("keep DROP keep")

        await fs_tools.edit_file("a.txt", " DROP", "")

        assert (workspace / "a.txt").read_text() == "keep keep"

    @pytest.mark.asyncio
    async def test_multiline_edit(self, fs_tools, workspace):
        (workspace / "code.py").write_text("def f():\n    return 1\n")

        await fs_tools.edit_file("code.py", "    return 1\n", "    return 2\n")

        assert (workspace / "code.py").read_text() == "def f():\n    return 2\n"


# ============================================================================
# LS
# ============================================================================


@pytest.mark.unit
@pytest.mark.tools
class TestListDirectory:
    """Tests for list_directory."""

    @pytest.mark.asyncio
    async def test_lists_sorted_entries_without_hidden(self, fs_tools, sample_files):
        result = await fs_tools.list_directory()

        assert_success_response(result)
        assert result["result"].split("\n") == [
            "empty.txt (0 bytes)",
            "file1.txt (26 bytes)",
            "file2.py (29 bytes)",
            "subdir/",
        ]

    @pytest.mark.asyncio
    async def test_show_hidden(self, fs_tools, sample_files):
        result = await fs_tools.list_directory(show_hidden=True)

        assert result["result"].split("\n")[0] == ".hidden (6 bytes)"

    @pytest.mark.asyncio
    async def test_recursive_indents_children_after_parent(self, fs_tools, sample_files):
        result = await fs_tools.list_directory("subdir", recursive=True)

        assert result["result"].split("\n") == [
            "file3.txt (18 bytes)",
            "nested/",
            "  file4.py (14 bytes)",
        ]

    @pytest.mark.asyncio
    async def test_as_array_returns_bare_names(self, fs_tools, sample_files):
        result = await fs_tools.list_directory(as_array=True, recursive=True)

        names = json.loads(result["result"])
        assert names == [
            "empty.txt",
            "file1.txt",
            "file2.py",
            "subdir",
            "file3.txt",
            "nested",
            "file4.py",
        ]

    @pytest.mark.asyncio
    async def test_as_array_capped_at_1000(self, fs_tools, workspace):
        for i in range(1005):
            (workspace / f"f{i:04d}").touch()

        result = await fs_tools.list_directory(as_array=True)

        names = json.loads(result["result"])
        assert len(names) == 1000
        assert names[0] == "f0000"

    @pytest.mark.asyncio
    async def test_plain_file_returns_size_line(self, fs_tools, sample_files):
        result = await fs_tools.list_directory("file1.txt")

        assert_success_response(result)
        assert result["result"] == "file1.txt (26 bytes)"

    @pytest.mark.asyncio
    async def test_empty_directory_sentinel(self, fs_tools, workspace):
        (workspace / "void").mkdir()

        result = await fs_tools.list_directory("void")

        assert result["result"] == EMPTY_DIRECTORY

    @pytest.mark.asyncio
    async def test_only_hidden_entries_is_empty(self, fs_tools, workspace):
        (workspace / ".git").mkdir()

        result = await fs_tools.list_directory()

        assert result["result"] == EMPTY_DIRECTORY

    @pytest.mark.asyncio
    async def test_missing_path(self, fs_tools, workspace):
        result = await fs_tools.list_directory("ghost")

        assert_error_response(result, "not_found")
        assert str(workspace / "ghost") in result["message"]


@pytest.mark.unit
@pytest.mark.tools
@pytest.mark.asyncio
async def test_separate_working_directories_do_not_interfere(tmp_path):
    """Two toolsets with different working directories resolve independently."""
    left, right = tmp_path / "left", tmp_path / "right"
    left.mkdir()
    right.mkdir()
    (left / "only-left.txt").write_text("L")

    left_tools = FileSystemTools(build_test_settings(left))
    right_tools = FileSystemTools(build_test_settings(right))

    assert (await left_tools.read_file("only-left.txt"))["success"] is True
    assert (await right_tools.read_file("only-left.txt"))["error"] == "not_found"
