"""Starlette middleware for the HTTP transport."""

from .auth import APIKeyMiddleware
from .setup import setup_middleware

__all__ = ["APIKeyMiddleware", "setup_middleware"]
