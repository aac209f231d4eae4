"""Search tools: Glob (path patterns) and Grep (ripgrep content search).

Glob expands brace alternatives, delegates matching to the standard library's
glob module and orders results most-recently-modified first. Grep builds a
ripgrep argument vector from the tool options and runs it through the
ProcessRunner.
"""

import glob as globlib
import itertools
import json
import logging
import os
import re
from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from toolhost.catalogue import ToolName
from toolhost.config.constants import NO_FILES_MATCHED, NO_MATCHES_FOUND
from toolhost.config.schema import HostSettings
from toolhost.exceptions import ProcessSpawnError, ProcessTimeoutError
from toolhost.policy import cap_entries, truncate_output
from toolhost.process import ProcessRunner
from toolhost.tools.toolset import HostToolset

logger = logging.getLogger(__name__)

_BRACE_GROUP = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand shell-style brace alternatives, e.g. "*.{py,txt}" -> ["*.py", "*.txt"].

    Groups without a comma are kept literally. Nested groups are not supported.
    """
    parts: list[list[str]] = []
    last_end = 0
    for match in _BRACE_GROUP.finditer(pattern):
        parts.append([pattern[last_end : match.start()]])
        parts.append(match.group(1).split(","))
        last_end = match.end()
    parts.append([pattern[last_end:]])
    return ["".join(combo) for combo in itertools.product(*parts)]


class GrepOptions(BaseModel):
    """Grep options as sent by the caller, keyed by their ripgrep-style names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    glob: str | None = None
    type: str | None = None
    ignore_case: bool = Field(default=False, alias="-i")
    line_number: bool = Field(default=False, alias="-n")
    after_context: int | None = Field(default=None, alias="-A", ge=0)
    before_context: int | None = Field(default=None, alias="-B", ge=0)
    context: int | None = Field(default=None, alias="-C", ge=0)
    multiline: bool = False
    output_mode: Literal["files_with_matches", "count", "content"] = "files_with_matches"
    head_limit: int | None = Field(default=None, ge=0)

    def to_rg_flags(self) -> list[str]:
        """Translate options into ripgrep command-line flags."""
        flags: list[str] = []
        if self.glob:
            flags += ["--glob", self.glob]
        if self.type:
            flags += ["--type", self.type]
        if self.ignore_case:
            flags.append("--ignore-case")
        if self.line_number:
            flags.append("--line-number")
        if self.multiline:
            flags.append("--multiline")
        if self.before_context:
            flags += ["--before-context", str(self.before_context)]
        if self.after_context:
            flags += ["--after-context", str(self.after_context)]
        if self.context:
            flags += ["--context", str(self.context)]

        if self.output_mode == "files_with_matches":
            flags.append("--files-with-matches")
        elif self.output_mode == "count":
            flags.append("--count")
        return flags


class SearchTools(HostToolset):
    """Glob and Grep tools.

    Example:
        >>> tools = SearchTools(settings, ProcessRunner())
        >>> (await tools.glob_files("**/*.py"))["result"]
        'src/app.py\\nsrc/util.py'
        >>> (await tools.grep("TODO", options={"-i": True}))["result"]
        '/project/src/app.py'
    """

    def __init__(self, settings: HostSettings, runner: ProcessRunner | None = None):
        """Initialize SearchTools.

        Args:
            settings: Host settings with working directory and rg_path
            runner: Process runner used for ripgrep (default: new ProcessRunner)
        """
        super().__init__(settings)
        self.runner = runner or ProcessRunner(settings.shell_path)

    def get_tools(self) -> dict[ToolName, Callable]:
        """Get search tools keyed by tool name."""
        return {ToolName.GLOB: self.glob_files, ToolName.GREP: self.grep}

    async def glob_files(
        self,
        pattern: Annotated[str, Field(description="Glob pattern, e.g. '**/*.py'")],
        path: Annotated[
            str | None, Field(description="Base directory (default: working directory)")
        ] = None,
        as_array: Annotated[
            bool | None, Field(description="Return a JSON array of paths")
        ] = False,
    ) -> dict:
        """Find files matching a glob pattern, most recently modified first.

        Dotfiles are included and directories are excluded. Paths are relative
        to the base directory.

        Args:
            pattern: Glob pattern ("**" matches across directories)
            path: Base directory relative to the working directory
            as_array: Return a JSON array (max 1000 entries) instead of text

        Returns:
            Success response with newline-separated paths, a JSON array, or the
            "No files matched" sentinel. Error response if the base is missing.
        """
        base = self._resolve_path(path) if path else self.working_directory

        if not base.is_dir():
            return self._create_error_response(
                error="not_found", message=f"Directory not found: {base}"
            )

        matches: set[str] = set()
        try:
            for expanded in expand_braces(pattern):
                matches.update(
                    globlib.glob(expanded, root_dir=base, recursive=True, include_hidden=True)
                )
        except OSError as e:
            return self._create_error_response(
                error="os_error", message=f"Error matching pattern {pattern} in {base}: {e}"
            )

        stamped: list[tuple[int, str]] = []
        for match in matches:
            full = os.path.join(base, match)
            try:
                st = os.stat(full)
            except OSError:
                # Vanished or dangling symlink
                continue
            if not os.path.isfile(full):
                continue
            stamped.append((st.st_mtime_ns, match))

        stamped.sort(key=lambda item: (-item[0], item[1]))
        files = [match for _mtime, match in stamped]
        logger.debug(f"Glob {pattern!r} in {base} matched {len(files)} files")

        if as_array:
            return self._create_success_response(
                result=json.dumps(cap_entries(files)),
                message=f"Matched {len(files)} files",
            )

        text = "\n".join(files) if files else NO_FILES_MATCHED
        return self._create_success_response(
            result=truncate_output(text), message=f"Matched {len(files)} files"
        )

    async def grep(
        self,
        pattern: Annotated[str, Field(description="Regular expression to search for")],
        path: Annotated[
            str | None, Field(description="File or directory to search (default: working directory)")
        ] = None,
        options: Annotated[
            dict[str, Any] | None,
            Field(description="glob, type, -i, -n, -A, -B, -C, multiline, output_mode, head_limit"),
        ] = None,
    ) -> dict:
        """Search file contents with ripgrep.

        By default only the names of matching files are returned. A search with
        no matches is a successful "No matches found" result, not an error.

        Args:
            pattern: Regular expression (ripgrep syntax)
            path: File or directory relative to the working directory
            options: Search options keyed by their ripgrep-style names

        Returns:
            Success response with ripgrep's output (head_limit lines, then capped),
            or error response if ripgrep fails or cannot be started.
        """
        try:
            opts = GrepOptions.model_validate(options or {})
        except ValidationError as e:
            return self._create_error_response(
                error="invalid_arguments", message=f"Invalid grep options: {e}"
            )

        search_path = self._resolve_path(path if isinstance(path, str) else None)
        argv = [self.settings.rg_path, *opts.to_rg_flags(), "--", pattern, str(search_path)]

        try:
            result = await self.runner.run_exec(
                argv,
                timeout_ms=self.settings.search_timeout_ms,
                cwd=self.working_directory,
            )
        except ProcessSpawnError as e:
            return self._create_error_response(
                error="process_spawn_failed",
                message=f"Could not start {self.settings.rg_path}: {e.original_error}",
            )
        except ProcessTimeoutError as e:
            message = f"Grep search timed out after {e.timeout_ms}ms"
            partial = e.stdout.strip() or e.stderr.strip()
            if partial:
                message += f"\n{truncate_output(partial)}"
            return self._create_error_response(error="timeout_exceeded", message=message)

        if result.exit_code != 0 and result.stderr and NO_MATCHES_FOUND not in result.stderr:
            return self._create_error_response(
                error="search_failed", message=f"Grep search error: {result.stderr}"
            )

        text = result.stdout.strip()
        if opts.head_limit:
            text = "\n".join(text.split("\n")[: opts.head_limit])
        text = truncate_output(text)

        if not text:
            return self._create_success_response(
                result=NO_MATCHES_FOUND, message="Search completed with no matches"
            )

        return self._create_success_response(
            result=text, message=f"Search exited with code {result.exit_code}"
        )
