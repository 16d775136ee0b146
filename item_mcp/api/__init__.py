"""HTTP JSON API served next to the MCP transport."""

from .setup import setup_http_routes

__all__ = ["setup_http_routes"]
