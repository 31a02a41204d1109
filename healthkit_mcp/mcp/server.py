"""
MCP Server for health metrics

Exposes steps, heart rate, sleep, active energy and a combined summary
as read-only tools over stdio.

To run: healthkit-mcp serve   (or: python -m healthkit_mcp serve)

For Claude Desktop, add to claude_desktop_config.json:
{
  "mcpServers": {
    "healthkit": {
      "command": "healthkit-mcp",
      "args": ["serve", "--db", "/path/to/health_data.db"]
    }
  }
}
"""
import asyncio
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from healthkit_mcp.core.logging_setup import get_logger
from healthkit_mcp.mcp.config import ServerConfig
from healthkit_mcp.mcp.dispatcher import DATE_RANGE_SCHEMA, TOOL_DESCRIPTIONS, ToolDispatcher
from healthkit_mcp.providers.base import READ_TYPES, HealthDataProvider
from healthkit_mcp.providers.sqlite_store import SQLiteHealthStore

logger = get_logger("mcp.server")


def list_tools() -> List[types.Tool]:
    """Tool descriptors advertised to clients"""
    return [
        types.Tool(name=name, description=description, inputSchema=DATE_RANGE_SCHEMA)
        for name, description in TOOL_DESCRIPTIONS.items()
    ]


async def call_tool(
    dispatcher: ToolDispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> types.CallToolResult:
    """Run a tool and wrap its text in the protocol envelope"""
    result = await dispatcher.dispatch(name, arguments)
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(dispatcher: ToolDispatcher, config: Optional[ServerConfig] = None) -> Server:
    """Build the MCP server with list/call handlers bound to the dispatcher"""
    config = config or ServerConfig()
    server = Server(config.name, version=config.version)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        logger.debug("MCP list_tools")
        return list_tools()

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await call_tool(dispatcher, req.params.name, req.params.arguments)
        return types.ServerResult(result)

    # Registered directly so the dispatcher's isError flag reaches the client as-is
    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server


async def authorize(provider: HealthDataProvider) -> bool:
    """Best-effort startup authorization; failures are only logged"""
    try:
        await provider.request_authorization(READ_TYPES)
        return True
    except Exception as e:
        logger.warning(f"Failed to authorize health data access: {e}")
        return False


async def run_server(config: ServerConfig) -> None:
    provider = SQLiteHealthStore(config.db_path, sleep_vocabulary=config.sleep_vocabulary)
    await authorize(provider)

    server = create_server(ToolDispatcher.from_provider(provider), config)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main(config: Optional[ServerConfig] = None) -> int:
    """Main entry point for MCP server"""
    config = config or ServerConfig.from_env()
    try:
        logger.info("=" * 60)
        logger.info("HealthKit MCP Server")
        logger.info("=" * 60)
        logger.info(f"Database: {config.db_path}")
        logger.info(f"Sleep vocabulary: {config.sleep_vocabulary.value}")
        logger.info("Starting MCP server via stdio...")

        asyncio.run(run_server(config))
        return 0

    except KeyboardInterrupt:
        logger.info("Server shutting down...")
        return 0
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
