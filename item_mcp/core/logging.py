"""Logging configuration for the Item Search MCP server."""

import logging
import os
import sys
from contextvars import ContextVar

# Context variable to store request_id across async calls
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

LOGGER_NAME = "item-search-mcp"


class RequestIdFilter(logging.Filter):
    """Logging filter that adds request_id to log records."""

    def filter(self, record):
        """Add request_id to the log record if available."""
        request_id = request_id_ctx.get()
        record.request_id = f"[{request_id}] " if request_id else ""
        return True


def configure_logging() -> logging.Logger:
    """Configure and return the logger for the application.

    Output goes to stderr: stdout carries the MCP stdio protocol.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] [%(name)s] %(request_id)s%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    logger = logging.getLogger(LOGGER_NAME)

    # Add request_id filter to all handlers
    request_filter = RequestIdFilter()
    for handler in logger.handlers:
        handler.addFilter(request_filter)

    # Also add to root logger handlers
    for handler in logging.root.handlers:
        handler.addFilter(request_filter)

    # Enable debug mode from environment
    if os.getenv("MCP_DEBUG", "").lower() in ("true", "1", "yes"):
        logger.setLevel(logging.DEBUG)
        logging.getLogger("item_mcp").setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    return logger


# Initialize logger
logger = configure_logging()


def apply_log_settings(log_level: str, debug: bool = False) -> None:
    """Apply the configured log level; debug mode forces DEBUG on the app loggers."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        logger.warning("Unknown log level %r, keeping the current level", log_level)
        return

    logging.root.setLevel(level)
    if debug:
        logger.setLevel(logging.DEBUG)
        logging.getLogger("item_mcp").setLevel(logging.DEBUG)
