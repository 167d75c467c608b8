"""Binds ``ToolDispatcher`` to the MCP Python SDK and serves it over stdio."""
from __future__ import annotations

import asyncio
from typing import Any

import mcp.types as types
from loguru import logger
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .config import ServerConfig
from .dispatcher import ToolDispatcher

SERVER_NAME = "mcp-deno"


class ToolCallFailed(Exception):
    """Raised inside the call_tool handler; the SDK reports it as an isError result."""


def build_server(config: ServerConfig, dispatcher: ToolDispatcher | None = None) -> Server:
    dispatcher = dispatcher or ToolDispatcher(config)
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in dispatcher.list_tools()
        ]

    # Argument checking lives in the dispatcher so its messages reach the client unchanged.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = await asyncio.to_thread(dispatcher.call_tool, name, arguments)
        if result.is_error:
            raise ToolCallFailed(result.text)
        return [types.TextContent(type="text", text=result.text)]

    return server


async def run_stdio(config: ServerConfig) -> None:
    server = build_server(config)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP Deno server running on stdio")
        if config.permission_flags:
            logger.info("Deno permissions: {}", " ".join(config.permission_flags))
        else:
            logger.info("Deno permissions: none (scripts run without extra capabilities)")
        await server.run(read_stream, write_stream, server.create_initialization_options())
