"""
MCP Tools Package.

Each module provides a register_*_tools() function to register tools with FastMCP.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastmcp import FastMCP

from item_mcp.tools.items import register_item_tools

logger = logging.getLogger(__name__)


def register_tools(mcp: "FastMCP") -> None:
    """
    Register all MCP tools with the FastMCP instance.

    Args:
        mcp: FastMCP instance to register tools with
    """
    logger.info("Registering all MCP tools...")
    register_item_tools(mcp)
    logger.info("All MCP tools registered successfully")


__all__ = [
    "register_item_tools",
    "register_tools",
]
