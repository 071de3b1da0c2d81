"""MCP server wiring — exposes the tool registry over stdio."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from memory_box import __version__
from memory_box.config import Settings
from memory_box.errors import ConfigurationError
from memory_box.tools import ToolRegistry, create_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "memory-box-mcp"

TOKEN_MISSING = (
    "Memory Box token not configured. Please set the MEMORY_BOX_TOKEN environment variable."
)


def list_tool_definitions(registry: ToolRegistry) -> list[Tool]:
    """Convert registry schemas into MCP Tool definitions."""
    return [
        Tool(
            name=schema["name"],
            description=schema["description"],
            inputSchema=schema["input_schema"],
        )
        for schema in registry.get_schemas()
    ]


async def dispatch(
    registry: ToolRegistry,
    settings: Settings,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[TextContent]:
    """Run one tool call and return its text block.

    Raises:
        McpError: with the tool's error code when the call fails, or with
            INTERNAL_ERROR before anything else when no token is configured.
    """
    if not settings.token_configured:
        error = ConfigurationError(TOKEN_MISSING)
        raise McpError(ErrorData(code=error.code, message=error.message))

    result = await registry.execute(name, arguments)
    if not result.success:
        raise McpError(ErrorData(code=result.code or INTERNAL_ERROR, message=result.error or ""))
    return [TextContent(type="text", text=result.to_content())]


def build_server(settings: Settings, registry: ToolRegistry | None = None) -> Server:
    """Create the MCP server with list_tools and call_tool handlers."""
    if registry is None:
        registry = create_registry(settings)

    server: Server = Server(
        SERVER_NAME,
        version=__version__,
        instructions=settings.get_system_prompt(),
    )

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return list_tool_definitions(registry)

    async def call_tool(req: CallToolRequest) -> ServerResult:
        content = await dispatch(registry, settings, req.params.name, req.params.arguments)
        return ServerResult(CallToolResult(content=content, isError=False))

    # Installed without the call_tool() decorator: McpError raised by dispatch
    # must reach the host as a coded JSON-RPC error, not an isError result.
    # Arguments are validated by the registry's parameter models.
    server.request_handlers[CallToolRequest] = call_tool

    return server


async def run_stdio(settings: Settings) -> None:
    """Serve until the host closes stdin."""
    server = build_server(settings)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Memory Box MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
