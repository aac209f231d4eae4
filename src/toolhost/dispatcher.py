"""Tool dispatcher: route a named call with JSON arguments to its handler.

The dispatcher is the only place that turns handler response dicts into the
wire-level ToolResult. Handlers never raise for expected failures; anything
they do raise is logged and reported as an error result so one bad call
cannot take down the host.
"""

import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from toolhost.catalogue import CATALOGUE, ToolDescriptor, ToolName, get_descriptors
from toolhost.config.schema import HostSettings
from toolhost.exceptions import ConfigurationError
from toolhost.policy import truncate_output
from toolhost.process import ProcessRunner
from toolhost.tools import (
    FileSystemTools,
    HostToolset,
    SearchTools,
    ShellTools,
    TodoTools,
    WebTools,
)
from toolhost.utils.responses import is_success_response

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[dict]]

__all__ = ["ToolCall", "ToolDescriptor", "ToolDispatcher", "ToolName", "ToolResult"]


@dataclass(frozen=True)
class ToolCall:
    """A single tool invocation from the calling agent."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool invocation: display text plus an error flag."""

    text: str
    is_error: bool = False

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(text=truncate_output(f"Error: {message}"), is_error=True)


def _arguments_model(name: str, handler: Handler) -> type[BaseModel]:
    """Build a pydantic model from a handler's annotated signature.

    Parameters without a default become required fields. Unknown argument
    names are rejected.
    """
    fields: dict[str, Any] = {}
    for param in inspect.signature(handler).parameters.values():
        annotation = param.annotation if param.annotation is not inspect.Parameter.empty else Any
        default = param.default if param.default is not inspect.Parameter.empty else ...
        fields[param.name] = (annotation, default)
    return create_model(
        f"{name}Arguments",
        __config__=ConfigDict(extra="forbid"),
        **fields,
    )


class ToolDispatcher:
    """Routes tool calls to toolset handlers.

    Example:
        >>> dispatcher = ToolDispatcher(HostSettings(working_directory=tmp_path))
        >>> result = await dispatcher.dispatch(ToolCall("LS", {}))
        >>> result.is_error
        False
    """

    def __init__(
        self,
        settings: HostSettings,
        runner: ProcessRunner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the dispatcher and bind every tool to its handler.

        Args:
            settings: Host settings shared by all toolsets
            runner: Process runner for Bash and Grep (default: new ProcessRunner)
            transport: Optional httpx transport for WebFetch

        Raises:
            ConfigurationError: If a tool has no handler or no descriptor
        """
        self.settings = settings
        runner = runner or ProcessRunner(settings.shell_path)

        self.toolsets: list[HostToolset] = [
            FileSystemTools(settings),
            SearchTools(settings, runner=runner),
            ShellTools(settings, runner=runner),
            TodoTools(settings),
            WebTools(settings, transport=transport),
        ]

        self._handlers: dict[ToolName, Handler] = {}
        duplicates: list[str] = []
        for toolset in self.toolsets:
            for name, handler in toolset.get_tools().items():
                if name in self._handlers:
                    duplicates.append(name.value)
                self._handlers[name] = handler
        if duplicates:
            raise ConfigurationError(f"Tools registered more than once: {duplicates}")
        self._verify_registry()
        self._models = {
            name: _arguments_model(name.value, handler) for name, handler in self._handlers.items()
        }

    def _verify_registry(self) -> None:
        missing_handlers = [n.value for n in ToolName if n not in self._handlers]
        missing_descriptors = [n.value for n in ToolName if n not in CATALOGUE]
        if missing_handlers or missing_descriptors:
            raise ConfigurationError(
                "Tool registry is incomplete. "
                f"Missing handlers: {missing_handlers or 'none'}; "
                f"missing descriptors: {missing_descriptors or 'none'}"
            )

    def descriptors(self) -> list[ToolDescriptor]:
        """Return the static tool catalogue."""
        return get_descriptors()

    async def dispatch(self, call: ToolCall) -> ToolResult:
        """Execute one tool call.

        Args:
            call: Tool name and JSON-decoded arguments

        Returns:
            ToolResult; never raises for tool-level failures
        """
        start_time = time.perf_counter()
        result = await self._dispatch(call)
        duration_ms = (time.perf_counter() - start_time) * 1000
        status = "error" if result.is_error else "ok"
        logger.info(f"Tool {call.name} finished: {status} ({duration_ms:.0f}ms)")
        return result

    async def _dispatch(self, call: ToolCall) -> ToolResult:
        try:
            name = ToolName(call.name)
        except ValueError:
            return ToolResult.error(f"Unknown tool: {call.name}")

        arguments = call.arguments or {}
        missing = [arg for arg in CATALOGUE[name].required if arg not in arguments]
        if missing:
            return ToolResult.error(f"Missing required argument(s): {', '.join(missing)}")

        try:
            validated = self._models[name].model_validate(arguments)
        except ValidationError as e:
            return ToolResult.error(f"Invalid arguments for {name.value}: {e}")

        handler = self._handlers[name]
        try:
            response = await handler(**{key: getattr(validated, key) for key in arguments})
        except Exception as e:
            logger.exception(f"Tool {name.value} raised unexpectedly")
            return ToolResult.error(f"{type(e).__name__}: {e}")

        if is_success_response(response):
            return ToolResult(text=truncate_output(str(response.get("result", ""))))

        logger.debug(f"Tool {name.value} failed: {response.get('error')}")
        return ToolResult.error(response.get("message", "Unknown error"))
