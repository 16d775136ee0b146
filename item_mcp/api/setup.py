"""
HTTP API route registration for FastMCP server.

Registers the route handlers from item_mcp.api.routes as FastMCP custom
routes, through closure adapters that resolve the tool handlers from the
application context on every request.
"""

from typing import TYPE_CHECKING

from item_mcp.core import logger
from item_mcp.core.context import get_app_context

from . import routes

if TYPE_CHECKING:
    from fastmcp import FastMCP


def setup_http_routes(mcp: "FastMCP") -> None:
    """
    Register the HTTP JSON API with FastMCP server.

    Registers:
    - / (GET)
    - /health (GET)
    - /api/tools/search_items (POST)
    - /api/tools/save_item (POST)
    - /api/tools/get_items_by_category (POST)
    - /api/tools/generate_markdown_summary (POST)

    Args:
        mcp: FastMCP server instance
    """

    @mcp.custom_route("/", methods=["GET"])
    async def _index(request):
        """Endpoint index."""
        return await routes.index(request)

    @mcp.custom_route("/health", methods=["GET"])
    async def _health(request):
        """Health check."""
        return await routes.health(request)

    @mcp.custom_route("/api/tools/search_items", methods=["POST"])
    async def _search_items(request):
        app_ctx = get_app_context()
        if app_ctx is None:
            return routes.unavailable()
        return await routes.search_items(request, app_ctx.handlers)

    @mcp.custom_route("/api/tools/save_item", methods=["POST"])
    async def _save_item(request):
        app_ctx = get_app_context()
        if app_ctx is None:
            return routes.unavailable()
        return await routes.save_item(request, app_ctx.handlers)

    @mcp.custom_route("/api/tools/get_items_by_category", methods=["POST"])
    async def _get_items_by_category(request):
        app_ctx = get_app_context()
        if app_ctx is None:
            return routes.unavailable()
        return await routes.get_items_by_category(request, app_ctx.handlers)

    @mcp.custom_route("/api/tools/generate_markdown_summary", methods=["POST"])
    async def _generate_markdown_summary(request):
        app_ctx = get_app_context()
        if app_ctx is None:
            return routes.unavailable()
        return await routes.generate_markdown_summary(request, app_ctx.handlers)

    logger.info("HTTP API endpoints registered (6 routes)")
