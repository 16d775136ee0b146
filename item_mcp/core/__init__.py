"""Core functionality for the Item Search MCP server.

The application context lives in ``item_mcp.core.context`` and is imported
explicitly by its users, since it wires every service together.
"""

from .constants import (
    GENERATED_ID_PREFIX,
    MANUAL_ID_PREFIX,
    MANUAL_SOURCE_LABEL,
    NO_INFORMATION_TEMPLATE,
    WEB_ID_PREFIX,
)
from .decorators import track_request
from .exceptions import (
    ItemSearchError,
    LLMError,
    MCPToolError,
    SourceError,
    StorageError,
    ValidationError,
)
from .logging import apply_log_settings, configure_logging, logger

__all__ = [
    # Core
    "ItemSearchError",
    "LLMError",
    "MCPToolError",
    "SourceError",
    "StorageError",
    "ValidationError",
    "apply_log_settings",
    "configure_logging",
    "logger",
    "track_request",
    # Constants - most commonly used
    "GENERATED_ID_PREFIX",
    "MANUAL_ID_PREFIX",
    "MANUAL_SOURCE_LABEL",
    "NO_INFORMATION_TEMPLATE",
    "WEB_ID_PREFIX",
]
