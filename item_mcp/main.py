"""
Main entry point for the Item Search MCP server.

Transports:
- stdio: MCP over stdin/stdout, plus the HTTP JSON API on host:port when
  SERVE_HTTP_API is enabled
- http: streamable HTTP MCP at /mcp with the HTTP JSON API on the same server
"""

import asyncio
import contextlib
import sys

import uvicorn
from fastmcp import FastMCP

from item_mcp.api import setup_http_routes
from item_mcp.config import get_settings
from item_mcp.core import apply_log_settings, logger
from item_mcp.core.context import cleanup_global_context, initialize_global_context
from item_mcp.middleware import setup_middleware
from item_mcp.tools import register_tools

SERVER_NAME = "Item Search MCP Server"

settings = get_settings()
apply_log_settings(settings.log_level, settings.debug)

mcp = FastMCP(SERVER_NAME)
register_tools(mcp)
setup_http_routes(mcp)


def create_mcp_server() -> FastMCP:
    """
    Create and return a fully registered MCP server instance for testing purposes.
    """
    server = FastMCP(SERVER_NAME)
    register_tools(server)
    setup_http_routes(server)
    return server


async def serve_http_api(host: str, port: int) -> None:
    """Serve the HTTP app (JSON API and custom routes) with uvicorn."""
    app = mcp.http_app(middleware=setup_middleware(settings))
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_config=None,  # stdout belongs to the stdio transport
        access_log=False,
    )
    server = uvicorn.Server(config)
    logger.info("HTTP API listening on http://%s:%s", host, port)
    await server.serve()


async def run_stdio_with_http_api(host: str, port: int) -> None:
    """Run the stdio transport and the HTTP API until either one stops."""
    tasks = [
        asyncio.create_task(mcp.run_async(transport="stdio"), name="mcp-stdio"),
        asyncio.create_task(serve_http_api(host, port), name="http-api"),
    ]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            task.result()
    finally:
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


async def main() -> None:
    """
    Main async function to run the MCP server.
    """
    try:
        logger.info("Initializing global application context...")
        await initialize_global_context()
        logger.debug("Settings: %s", settings.to_dict())

        host = settings.host
        port = settings.port
        logger.info("Transport mode: %s", settings.transport)

        if settings.transport == "http":
            logger.info("Setting up streamable-http server on %s:%s...", host, port)
            await mcp.run_async(
                transport="streamable-http",
                host=host,
                port=port,
                middleware=setup_middleware(settings),
            )
        elif settings.serve_http_api:
            logger.info("Setting up stdio server with HTTP API on %s:%s...", host, port)
            await run_stdio_with_http_api(host, port)
        else:
            logger.info("Setting up stdio server...")
            await mcp.run_async(transport="stdio")

    except Exception:
        logger.exception("Error in main function")
        raise
    finally:
        logger.info("Shutting down - cleaning up global context...")
        await cleanup_global_context()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    run()
