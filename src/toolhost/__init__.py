"""toolhost - tool execution server for coding agents."""

from importlib.metadata import PackageNotFoundError, version

# Read version from package metadata (pyproject.toml)
try:
    __version__ = version("toolhost")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "0.0.0.dev"

from toolhost.config import HostSettings
from toolhost.dispatcher import ToolCall, ToolDispatcher, ToolName, ToolResult

__all__ = [
    "HostSettings",
    "ToolCall",
    "ToolDispatcher",
    "ToolName",
    "ToolResult",
    "__version__",
]
