"""
Datadog MCP Server - Datadog monitoring APIs as MCP tools.

Serves metrics, logs, events, monitors and APM tools over stdio with the
low-level MCP server.
"""

from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .clients import DatadogAuth, create_clients
from .core.config import Config
from .core.logger import DatadogMcpLogger, setup_logger
from .core.registry import ToolRegistry, build_registry, dispatch
from .tools import register_all_tools


class ToolReplyError(Exception):
    """Carries the text of an error reply; the MCP server renders it with ``isError``."""


class DatadogMcpServer:
    """Datadog MCP Server with stdio transport."""

    def __init__(self, config: Optional[Config] = None, logger: Optional[DatadogMcpLogger] = None,
                 registry: Optional[ToolRegistry] = None):
        self.config = config or Config()
        self.logger = logger or setup_logger("datadog_mcp", self.config.log_level)
        self.auth: Optional[DatadogAuth] = None

        if registry is None:
            self.config.require_credentials()
            self.auth = DatadogAuth(self.config, self.logger)
            clients = create_clients(self.auth, self.logger)
            registry = build_registry(register_all_tools(clients, self.config, self.logger))
        self.registry = registry

        self.mcp_server = Server(self.config.server_name, version=self.config.server_version)
        self._register_handlers()

    def list_tools(self) -> List[Tool]:
        return [Tool(**tool.to_mcp_dict()) for tool in self.registry.values()]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """Dispatch one call; error replies are raised as ``ToolReplyError``."""
        reply = await dispatch(self.registry, name, arguments, self.logger,
                               self.config.slow_tool_threshold_ms)
        if reply.is_error:
            raise ToolReplyError(reply.text)
        return [TextContent(type="text", text=reply.text)]

    def _register_handlers(self):
        """Setup MCP server handlers."""

        @self.mcp_server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            return self.list_tools()

        @self.mcp_server.call_tool()
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            return await self.call_tool(name, arguments)

    async def run(self):
        """Run the server with stdio transport."""
        self.logger.startup_banner(self.config.to_dict())
        if not self.config.is_stdio_transport:
            self.logger.warning(f"MCP_TRANSPORT={self.config.mcp_transport} is not supported, using stdio")
        self.logger.info(f"🚀 Starting {self.config.server_name} with stdio transport "
                         f"({len(self.registry)} tools)")

        async with stdio_server() as (read_stream, write_stream):
            if self.auth is not None:
                async with self.auth.get_api_client():
                    await self._serve(read_stream, write_stream)
            else:
                await self._serve(read_stream, write_stream)

    async def _serve(self, read_stream, write_stream):
        await self.mcp_server.run(
            read_stream, write_stream,
            self.mcp_server.create_initialization_options()
        )
