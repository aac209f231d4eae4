"""MCP stdio server exposing the tool catalogue.

A thin adapter: tool listing comes from the static catalogue and every call
goes through ToolDispatcher. Error results are raised back into the MCP SDK,
which reports them with ``isError`` set and the error text as content.
"""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from toolhost import __version__
from toolhost.config.schema import HostSettings
from toolhost.dispatcher import ToolCall, ToolDescriptor, ToolDispatcher
from toolhost.exceptions import ToolHostError

logger = logging.getLogger(__name__)

SERVER_NAME = "toolhost"


class ToolCallError(ToolHostError):
    """Raised inside the MCP call handler to produce an isError result."""

    pass


def to_mcp_tool(descriptor: ToolDescriptor) -> Tool:
    """Convert a catalogue entry to an MCP Tool definition."""
    return Tool(
        name=descriptor.name.value,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


class ToolHostServer:
    """MCP server wrapping a ToolDispatcher."""

    def __init__(self, settings: HostSettings, dispatcher: ToolDispatcher | None = None):
        self.settings = settings
        self.dispatcher = dispatcher or ToolDispatcher(settings)
        self.server = Server(SERVER_NAME, version=__version__)
        self.tools = [to_mcp_tool(d) for d in self.dispatcher.descriptors()]
        self._register_handlers()
        logger.info(
            f"toolhost server initialized ({len(self.tools)} tools, "
            f"cwd={settings.working_directory})"
        )

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            logger.debug("list_tools called")
            return self.tools

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[TextContent]:
            return await self.handle_call(name, arguments)

    async def handle_call(self, name: str, arguments: dict | None) -> list[TextContent]:
        """Dispatch one call and shape the result for MCP.

        Raises:
            ToolCallError: If the tool reported an error; message is the error text
        """
        result = await self.dispatcher.dispatch(ToolCall(name=name, arguments=arguments or {}))
        if result.is_error:
            raise ToolCallError(result.text)
        return [TextContent(type="text", text=result.text)]

    async def run(self) -> None:
        """Run the server with stdio transport until stdin closes."""
        logger.info("Starting toolhost server (stdio transport)")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
