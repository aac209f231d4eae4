"""Static tool catalogue advertised to the calling agent.

One ToolDescriptor per ToolName, built once at import time and never mutated.
The dispatcher consults a descriptor only for the presence of required
arguments; all other validation is done by the handlers.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from toolhost.config.constants import (
    ARRAY_LIMIT,
    DEFAULT_READ_LIMIT,
    DEFAULT_TIMEOUT_MS,
    MAX_TIMEOUT_MS,
    OUTPUT_LIMIT,
)


class ToolName(str, Enum):
    """Identifiers of every tool the host exposes."""

    READ = "Read"
    WRITE = "Write"
    EDIT = "Edit"
    GLOB = "Glob"
    GREP = "Grep"
    BASH = "Bash"
    LS = "LS"
    TODO_WRITE = "TodoWrite"
    WEB_FETCH = "WebFetch"


@dataclass(frozen=True)
class ToolDescriptor:
    """Catalogue entry: name, description and JSON Schema of the arguments."""

    name: ToolName
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


def _optional(json_type: str, **keywords: Any) -> dict[str, Any]:
    """Schema for an optional argument; an explicit null means the default."""
    return {"type": [json_type, "null"], **keywords}


_DESCRIPTORS = (
    ToolDescriptor(
        name=ToolName.READ,
        description=(
            "Read a text file. Returns lines prefixed with 1-based line numbers "
            f"(up to {DEFAULT_READ_LIMIT} lines by default, output capped at "
            f"{OUTPUT_LIMIT} characters)."
        ),
        input_schema=_schema(
            {
                "file_path": {"type": "string", "description": "Path to the file"},
                "offset": _optional(
                    "integer", description="Zero-based line to start from", default=0
                ),
                "limit": _optional("integer", description="Number of lines to read", minimum=1),
            },
            ["file_path"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.WRITE,
        description=(
            "Write a file, creating parent directories. Identical content is left untouched."
        ),
        input_schema=_schema(
            {
                "file_path": {"type": "string", "description": "Path to the file"},
                "content": {"type": "string", "description": "Full file content"},
            },
            ["file_path", "content"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.EDIT,
        description=(
            "Replace exact text in a file. old_string is a literal, not a pattern; "
            "only the first occurrence is replaced unless replace_all is true."
        ),
        input_schema=_schema(
            {
                "file_path": {"type": "string", "description": "Path to the file"},
                "old_string": {"type": "string", "description": "Exact text to replace"},
                "new_string": {"type": "string", "description": "Replacement text"},
                "replace_all": _optional(
                    "boolean", description="Replace every occurrence", default=False
                ),
            },
            ["file_path", "old_string", "new_string"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.GLOB,
        description=(
            "Find files by glob pattern (dotfiles included), most recently modified first."
        ),
        input_schema=_schema(
            {
                "pattern": {"type": "string", "description": "Glob pattern, e.g. '**/*.py'"},
                "path": _optional("string", description="Base directory"),
                "as_array": _optional(
                    "boolean",
                    description=f"Return a JSON array (max {ARRAY_LIMIT} entries)",
                    default=False,
                ),
            },
            ["pattern"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.GREP,
        description=(
            "Search file contents with ripgrep. Returns matching file names by default; "
            "'count' and 'content' output modes are available."
        ),
        input_schema=_schema(
            {
                "pattern": {"type": "string", "description": "Regular expression"},
                "path": _optional("string", description="File or directory to search"),
                "options": {
                    "type": ["object", "null"],
                    "description": "Search options",
                    "properties": {
                        "glob": {"type": "string"},
                        "type": {"type": "string"},
                        "-i": {"type": "boolean"},
                        "-n": {"type": "boolean"},
                        "-A": {"type": "integer"},
                        "-B": {"type": "integer"},
                        "-C": {"type": "integer"},
                        "multiline": {"type": "boolean"},
                        "output_mode": {
                            "type": "string",
                            "enum": ["files_with_matches", "count", "content"],
                        },
                        "head_limit": {"type": "integer"},
                    },
                },
            },
            ["pattern"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.BASH,
        description=(
            "Run a shell command in the working directory. Returns stdout (or stderr "
            f"if stdout is empty). Timeout defaults to {DEFAULT_TIMEOUT_MS}ms, "
            f"max {MAX_TIMEOUT_MS}ms."
        ),
        input_schema=_schema(
            {
                "command": {"type": "string", "description": "Full shell command line"},
                "description": _optional("string", description="Short label for the output"),
                "timeout": _optional(
                    "integer",
                    description=f"Timeout in milliseconds (max {MAX_TIMEOUT_MS})",
                    default=DEFAULT_TIMEOUT_MS,
                ),
            },
            ["command"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.LS,
        description="List a directory (sizes for files, trailing '/' for directories).",
        input_schema=_schema(
            {
                "path": _optional("string", description="Directory path", default="."),
                "show_hidden": _optional("boolean", default=False),
                "recursive": _optional("boolean", default=False),
                "as_array": _optional(
                    "boolean",
                    description=f"Return a JSON array of names (max {ARRAY_LIMIT})",
                    default=False,
                ),
            },
            [],
        ),
    ),
    ToolDescriptor(
        name=ToolName.TODO_WRITE,
        description="Record the current task list. Echoes the list back as text.",
        input_schema=_schema(
            {
                "todos": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "content": {"type": "string"},
                            "status": {
                                "type": "string",
                                "enum": ["pending", "in_progress", "completed"],
                            },
                            "activeForm": {"type": "string"},
                        },
                        "required": ["content", "status", "activeForm"],
                    },
                }
            },
            ["todos"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.WEB_FETCH,
        description="Fetch a web page and return its readable article text.",
        input_schema=_schema(
            {"url": {"type": "string", "description": "http(s) URL"}},
            ["url"],
        ),
    ),
)

CATALOGUE: MappingProxyType = MappingProxyType({d.name: d for d in _DESCRIPTORS})


def get_descriptors() -> list[ToolDescriptor]:
    """Return descriptors in catalogue order."""
    return list(_DESCRIPTORS)
