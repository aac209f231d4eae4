"""Filesystem tools: Read, Write, Edit and LS.

All paths are resolved against the configured working directory before any
filesystem access. Results are plain text capped at OUTPUT_LIMIT characters;
failures are returned as error responses with the offending path or literal
in the message so the calling agent can correct itself.
"""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

from pydantic import Field

from toolhost.catalogue import ToolName
from toolhost.config.constants import (
    DEFAULT_READ_LIMIT,
    EMPTY_DIRECTORY,
    LINE_NUMBER_WIDTH,
    LINE_SEPARATOR,
    MAX_LINE_LENGTH,
)
from toolhost.policy import cap_entries, truncate_output
from toolhost.tools.toolset import HostToolset

logger = logging.getLogger(__name__)


class FileSystemTools(HostToolset):
    """Filesystem tools operating relative to the working directory.

    Example:
        >>> settings = HostSettings(working_directory=Path("/home/user/project"))
        >>> tools = FileSystemTools(settings)
        >>> await tools.write_file("notes.txt", "hello")
        {'success': True, 'result': 'Successfully created file: /home/user/project/notes.txt', ...}
        >>> (await tools.read_file("notes.txt"))["result"]
        '    1→hello'
    """

    def get_tools(self) -> dict[ToolName, Callable]:
        """Get filesystem tools keyed by tool name.

        Returns:
            Mapping of tool name to handler
        """
        return {
            ToolName.READ: self.read_file,
            ToolName.WRITE: self.write_file,
            ToolName.EDIT: self.edit_file,
            ToolName.LS: self.list_directory,
        }

    async def read_file(
        self,
        file_path: Annotated[str, Field(description="File path (relative to working directory)")],
        offset: Annotated[int | None, Field(description="Zero-based line to start from")] = 0,
        limit: Annotated[int | None, Field(description="Number of lines to read", ge=1)] = None,
    ) -> dict:
        """Read a text file as numbered lines.

        Each selected line is cut to 2000 characters and prefixed with its
        1-based line number right-justified to width 5 and a separator glyph:
        ``"    1→first line"``. Without a limit at most 2000 lines are returned.

        Args:
            file_path: File path relative to the working directory (or absolute)
            offset: Zero-based index of the first line to return
            limit: Number of lines to return (default: up to 2000)

        Returns:
            Success response whose result is the numbered text, or a
            distinguishable marker for empty files. Error response if the file
            is missing or unreadable.
        """
        if limit is not None and limit < 1:
            return self._create_error_response(
                error="invalid_arguments", message=f"limit must be at least 1, got {limit}"
            )

        resolved = self._resolve_path(file_path)

        if not resolved.exists():
            return self._create_error_response(
                error="not_found", message=f"File not found: {resolved}"
            )

        if resolved.is_dir():
            return self._create_error_response(
                error="not_a_file", message=f"Path is a directory, not a file: {resolved}"
            )

        try:
            content = _read_text(resolved)
        except PermissionError:
            return self._create_error_response(
                error="permission_denied", message=f"Permission denied reading file: {resolved}"
            )
        except OSError as e:
            return self._create_error_response(
                error="os_error", message=f"Error reading file {resolved}: {e}"
            )

        if content == "":
            return self._create_success_response(
                result=(
                    "<system-reminder>File exists but has empty contents: "
                    f"{resolved}</system-reminder>"
                ),
                message=f"Read empty file {resolved}",
            )

        lines = content.split("\n")
        start = max(offset or 0, 0)
        if limit is not None:
            end = start + limit
        else:
            end = min(start + DEFAULT_READ_LIMIT, len(lines))
        selected = lines[start:end]

        numbered = [
            f"{start + index + 1:>{LINE_NUMBER_WIDTH}}{LINE_SEPARATOR}{line[:MAX_LINE_LENGTH]}"
            for index, line in enumerate(selected)
        ]

        return self._create_success_response(
            result=truncate_output("\n".join(numbered)),
            message=f"Read {len(selected)} lines from {resolved}",
        )

    async def write_file(
        self,
        file_path: Annotated[str, Field(description="File path (relative to working directory)")],
        content: Annotated[str, Field(description="Full content to write")],
    ) -> dict:
        """Write a file, creating parent directories as needed.

        If the file already holds exactly this content nothing is written and an
        "unchanged" confirmation is returned instead.

        Args:
            file_path: File path relative to the working directory (or absolute)
            content: Full new file content

        Returns:
            Success response naming the action ("created" or "overwrote"), or an
            error response on filesystem failures.
        """
        resolved = self._resolve_path(file_path)
        existed_before = resolved.exists()

        try:
            data = content.encode("utf-8")
        except UnicodeEncodeError as e:
            return self._create_error_response(
                error="invalid_arguments", message=f"Content is not valid UTF-8 text: {e}"
            )

        try:
            if existed_before and resolved.is_file() and resolved.read_bytes() == data:
                return self._create_success_response(
                    result=f"File unchanged: {resolved} (content is identical)",
                    message="No write needed",
                )

            resolved.parent.mkdir(parents=True, exist_ok=True)
            resolved.write_bytes(data)

        except IsADirectoryError:
            return self._create_error_response(
                error="not_a_file", message=f"Path is a directory, not a file: {resolved}"
            )
        except PermissionError:
            return self._create_error_response(
                error="permission_denied", message=f"Permission denied writing to: {resolved}"
            )
        except OSError as e:
            return self._create_error_response(
                error="os_error", message=f"Error writing to {resolved}: {e}"
            )

        action = "overwrote" if existed_before else "created"
        logger.debug(f"Wrote {len(content)} characters to {resolved} ({action})")
        return self._create_success_response(
            result=f"Successfully {action} file: {resolved}",
            message=f"Wrote {len(content)} characters",
        )

    async def edit_file(
        self,
        file_path: Annotated[str, Field(description="File path (relative to working directory)")],
        old_string: Annotated[str, Field(description="Exact text to replace")],
        new_string: Annotated[str, Field(description="Replacement text")],
        replace_all: Annotated[bool | None, Field(description="Replace every occurrence")] = False,
    ) -> dict:
        """Replace literal text in a file.

        old_string is matched as an exact substring, never as a pattern. Without
        replace_all only the first occurrence (lowest offset) is replaced; with it
        every non-overlapping occurrence is. The file is written back only when
        its content actually changes.

        Args:
            file_path: File path relative to the working directory (or absolute)
            old_string: Exact text to find
            new_string: Replacement text (may be empty to delete)
            replace_all: Replace all occurrences instead of the first

        Returns:
            Success response, a no-op success when old_string equals new_string,
            or an error response when the file or the literal is missing.
        """
        if old_string == new_string:
            return self._create_success_response(
                result="No changes made: old_string and new_string are identical",
                message="No-op edit",
            )

        resolved = self._resolve_path(file_path)

        if not resolved.exists():
            return self._create_error_response(
                error="not_found", message=f"File not found: {resolved}"
            )

        if not resolved.is_file():
            return self._create_error_response(
                error="not_a_file", message=f"Path is not a file: {resolved}"
            )

        try:
            original_content = _read_text(resolved)
        except PermissionError:
            return self._create_error_response(
                error="permission_denied", message=f"Permission denied reading file: {resolved}"
            )
        except OSError as e:
            return self._create_error_response(
                error="os_error", message=f"Error reading file {resolved}: {e}"
            )

        if not old_string:
            return self._create_error_response(
                error="invalid_arguments",
                message="old_string cannot be empty. Provide the exact text to replace.",
            )

        index = original_content.find(old_string)
        if index == -1:
            return self._create_error_response(
                error="pattern_not_found", message=f"String not found in file: {old_string}"
            )

        if replace_all:
            new_content = new_string.join(original_content.split(old_string))
            replacements = original_content.count(old_string)
        else:
            new_content = (
                original_content[:index] + new_string + original_content[index + len(old_string) :]
            )
            replacements = 1

        if new_content != original_content:
            try:
                _write_text(resolved, new_content)
            except PermissionError:
                return self._create_error_response(
                    error="permission_denied",
                    message=f"Permission denied writing to: {resolved}",
                )
            except OSError as e:
                return self._create_error_response(
                    error="os_error", message=f"Error writing to {resolved}: {e}"
                )

        action = "replaced all occurrences" if replace_all else "replaced"
        return self._create_success_response(
            result=f"Successfully {action} in file: {resolved}",
            message=f"Applied {replacements} replacement(s)",
        )

    async def list_directory(
        self,
        path: Annotated[
            str | None, Field(description="Directory path (relative to working directory)")
        ] = ".",
        show_hidden: Annotated[bool | None, Field(description="Include dotfiles")] = False,
        recursive: Annotated[bool | None, Field(description="Descend into subdirectories")] = False,
        as_array: Annotated[bool | None, Field(description="Return a JSON array of names")] = False,
    ) -> dict:
        """List directory contents.

        Directories are shown as ``name/``, files as ``name (N bytes)``. In
        recursive mode children follow their parent, indented two spaces per
        level. Entries are listed in name order. A plain file path yields a
        single ``name (N bytes)`` line.

        Args:
            path: Directory path relative to the working directory (default ".")
            show_hidden: Include entries starting with "."
            recursive: Walk subdirectories
            as_array: Return a JSON array of bare names (max 1000) instead of text

        Returns:
            Success response with the listing, or error response if path is missing.
        """
        resolved = self._resolve_path(path)

        if not resolved.exists():
            return self._create_error_response(
                error="not_found", message=f"Path not found: {resolved}"
            )

        try:
            if not resolved.is_dir():
                size = resolved.stat().st_size
                return self._create_success_response(
                    result=f"{resolved.name} ({size} bytes)",
                    message=f"Described file {resolved}",
                )

            entries = self._walk(resolved, show_hidden, recursive, depth=0)

        except PermissionError:
            return self._create_error_response(
                error="permission_denied", message=f"Permission denied reading directory: {resolved}"
            )
        except OSError as e:
            return self._create_error_response(
                error="os_error", message=f"OS error listing directory {resolved}: {e}"
            )

        if as_array:
            names = [name for _depth, name, _is_dir, _size in entries]
            return self._create_success_response(
                result=json.dumps(cap_entries(names)),
                message=f"Listed {len(names)} entries from {resolved}",
            )

        lines = []
        for depth, name, is_dir, size in entries:
            indent = "  " * depth
            if is_dir:
                lines.append(f"{indent}{name}/")
            elif size is None:
                lines.append(f"{indent}{name}")
            else:
                lines.append(f"{indent}{name} ({size} bytes)")

        text = "\n".join(lines) if lines else EMPTY_DIRECTORY
        return self._create_success_response(
            result=truncate_output(text),
            message=f"Listed {len(lines)} entries from {resolved}",
        )

    def _walk(
        self, directory: Path, show_hidden: bool, recursive: bool, depth: int
    ) -> list[tuple[int, str, bool, int | None]]:
        """Collect (depth, name, is_dir, size) tuples, parents before children."""
        entries: list[tuple[int, str, bool, int | None]] = []

        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)

        for child in children:
            if not show_hidden and child.name.startswith("."):
                continue

            try:
                is_dir = child.is_dir()
            except OSError:
                is_dir = False

            if is_dir:
                entries.append((depth, child.name, True, None))
                # Symlinked directories are shown but not descended into
                if recursive and not child.is_symlink():
                    entries.extend(
                        self._walk(Path(child.path), show_hidden, recursive, depth + 1)
                    )
                continue

            try:
                size: int | None = child.stat().st_size
            except OSError:
                # Broken symlink or vanished file
                size = None
            entries.append((depth, child.name, False, size))

        return entries


def _read_text(path: Path) -> str:
    """Read path as UTF-8 without newline translation."""
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def _write_text(path: Path, content: str) -> None:
    """Write content as UTF-8 without newline translation."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
