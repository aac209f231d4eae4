"""Base class for toolhost toolsets.

This module provides the abstract base class for creating toolsets. Toolsets
encapsulate related tool handlers with shared dependencies, avoiding global state
and enabling dependency injection for testing.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from toolhost.catalogue import ToolName
from toolhost.config.schema import HostSettings
from toolhost.utils.responses import create_error_response, create_success_response


class HostToolset(ABC):
    """Base class for toolhost toolsets.

    Each toolset receives a HostSettings instance carrying the working directory
    and other limits, making it easy to point at a temporary directory in tests.

    Example:
        >>> class MyTools(HostToolset):
        ...     def get_tools(self):
        ...         return {ToolName.READ: self.my_tool}
        ...
        ...     async def my_tool(self, arg: str) -> dict:
        ...         return self._create_success_response(
        ...             result=f"Processed: {arg}",
        ...             message="Tool executed successfully"
        ...         )
    """

    def __init__(self, settings: HostSettings):
        """Initialize toolset with settings.

        Args:
            settings: Host settings with working directory and limits
        """
        self.settings = settings

    @property
    def working_directory(self) -> Path:
        """Directory all relative path arguments are resolved against."""
        return self.settings.working_directory

    @abstractmethod
    def get_tools(self) -> dict[ToolName, Callable]:
        """Get the tool handlers this toolset provides.

        Returns:
            Mapping of tool name to async callable returning a response dict
        """
        pass

    def _resolve_path(self, path: str | None) -> Path:
        """Resolve a path argument against the working directory.

        Relative paths are joined onto the working directory; absolute paths are
        kept. The result is normalized (``..`` collapsed) without following
        symlinks, so error messages show the path the caller asked for.

        Args:
            path: Path argument from the tool call (None or "" means ".")

        Returns:
            Absolute Path
        """
        requested = Path(path) if path else Path(".")
        if not requested.is_absolute():
            requested = self.working_directory / requested
        return Path(os.path.normpath(requested))

    def _create_success_response(self, result: Any, message: str = "") -> dict:
        """Create standardized success response.

        Args:
            result: Handler result text
            message: Optional short summary for logging

        Returns:
            Structured response dict with success=True
        """
        return create_success_response(result, message)

    def _create_error_response(self, error: str, message: str) -> dict:
        """Create standardized error response.

        Args:
            error: Machine-readable error code (e.g., "not_found")
            message: Human-readable explanation shown to the calling agent

        Returns:
            Structured response dict with success=False
        """
        return create_error_response(error, message)
