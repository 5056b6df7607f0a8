"""MCP stdio server exposing the Anki tools."""

import logging

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .client import AnkiClient
from .config import Config
from .registry import UnknownToolError, call_tool, format_result, list_tools
from .schema import SchemaValidationError

logger = logging.getLogger(__name__)

SERVER_NAME = "anki-mcp-server"


def _error(code: int, exc: Exception) -> McpError:
    return McpError(types.ErrorData(code=code, message=str(exc)))


async def dispatch(anki: AnkiClient, config: Config, name: str, arguments: dict | None) -> list[types.TextContent]:
    """Run one tools/call request, mapping failures onto MCP error codes."""
    try:
        result = await call_tool(anki, name, arguments, config=config)
    except UnknownToolError as e:
        raise _error(types.METHOD_NOT_FOUND, e) from e
    except SchemaValidationError as e:
        raise _error(types.INVALID_PARAMS, e) from e
    except Exception as e:
        logger.debug("Tool %s failed", name, exc_info=True)
        raise _error(types.INTERNAL_ERROR, e) from e
    return [types.TextContent(type="text", text=format_result(result))]


def build_server(config: Config, *, anki: AnkiClient | None = None) -> Server:
    server = Server(SERVER_NAME, version=__version__)
    anki = anki or AnkiClient(config)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [types.Tool(**descriptor) for descriptor in list_tools()]

    # Arguments are checked against the tool's schema node; the advertised
    # descriptor is lossy and must not reject input the schema accepts.
    @server.call_tool(validate_input=False)
    async def handle_tool_call(name: str, arguments: dict | None) -> list[types.TextContent]:
        return await dispatch(anki, config, name, arguments)

    return server


async def run_stdio_server(config: Config) -> None:
    logger.info("Starting %s %s (AnkiConnect at %s)", SERVER_NAME, __version__, config.anki_connect_url)
    async with stdio_server() as (read_stream, write_stream):
        server = build_server(config)
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )
