"""Custom exceptions for the Item Search MCP server."""

from typing import Any


class MCPToolError(Exception):
    """Custom exception for MCP tool errors that should be returned as JSON-RPC errors."""

    def __init__(self, message: str, code: int = -32000):
        self.message = message
        self.code = code
        super().__init__(message)


# ========================================
# Base Exceptions
# ========================================


class ItemSearchError(Exception):
    """Base exception for all Item Search MCP errors."""


# ========================================
# Storage Exceptions
# ========================================


class StorageError(ItemSearchError):
    """Reading or writing an item file failed.

    A missing item is not a storage error; lookups return None instead.
    """


# ========================================
# Information Source Exceptions
# ========================================


class SourceError(ItemSearchError):
    """An information source failed or returned unusable output."""


class LLMError(SourceError):
    """LLM API call failed."""


# ========================================
# Validation Exceptions
# ========================================


class ValidationError(ItemSearchError):
    """External request data is malformed."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(message)

