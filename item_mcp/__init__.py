"""Item Search MCP server: LLM and website item search with a file-backed store."""

__version__ = "1.0.0"
