"""MCP stdio server entrypoint.

Exposes the CuraQ article tools over the official MCP Python SDK.

Run (stdio):
    CURAQ_MCP_TOKEN=... python -m curaq_mcp.mcp_server

Note: `curaq_mcp/main.py` remains as a development NDJSON protocol.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Any

import anyio
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .config import AppConfig, ConfigError, load_config
from .server import call_tool
from .tools import list_tools, to_mcp_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "curaq-mcp-server"


def list_mcp_tools() -> list[types.Tool]:
    return [to_mcp_tool(t) for t in list_tools()]


async def call_mcp_tool(
    name: str, arguments: dict[str, Any] | None, cfg: AppConfig
) -> list[types.TextContent]:
    """Run the blocking dispatcher off the event loop; always one text block."""
    result = await anyio.to_thread.run_sync(
        functools.partial(call_tool, name, arguments, cfg)
    )
    return [types.TextContent(type="text", text=result.text)]


def create_server(cfg: AppConfig) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return list_mcp_tools()

    # Arguments are validated per tool by the mapper, which is deliberately
    # more lenient than the advertised schema.
    @server.call_tool(validate_input=False)
    async def _call_tool(
        name: str, arguments: dict[str, Any]
    ) -> list[types.TextContent]:
        return await call_mcp_tool(name, arguments, cfg)

    return server


async def serve(cfg: AppConfig) -> None:
    server = create_server(cfg)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("CuraQ MCP server running on stdio")
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )


def main() -> None:
    # stdout belongs to the transport.
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        cfg = load_config()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    logging.getLogger().setLevel(cfg.logging.level.upper())
    anyio.run(serve, cfg)


if __name__ == "__main__":
    main()
