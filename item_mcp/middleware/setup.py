"""
Middleware configuration for the HTTP side of the server.

CORS is always enabled (the JSON API is meant to be called from browsers);
bearer API key authentication is added when MCP_API_KEY is set.
"""

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from item_mcp.config import Settings, get_settings
from item_mcp.core import logger

from .auth import APIKeyMiddleware


def setup_middleware(settings: Settings | None = None) -> list[Middleware]:
    """
    Build the Starlette middleware list from settings.

    Args:
        settings: Application settings (defaults to the global instance)

    Returns:
        List of configured Middleware instances
    """
    settings = settings or get_settings()
    origins = settings.get_cors_origins_list()

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        ),
    ]
    logger.info("CORS enabled for origins: %s", ", ".join(origins) or "(none)")

    if settings.mcp_api_key:
        middleware.append(Middleware(APIKeyMiddleware))
        logger.info("API Key authentication enabled")
    else:
        logger.warning("No authentication middleware configured")

    return middleware
