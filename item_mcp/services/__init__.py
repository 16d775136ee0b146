"""Services for the Item Search MCP server."""

from .admission import AdmissionGate
from .handlers import ItemToolHandlers, validation_failure
from .llm import LlmItemService
from .search_service import ItemSearchService
from .site_scraper import SitemcpScraper
from .sources import GenerativeSource, PageExtractor, SiteScraper
from .summary import SummaryGenerator

__all__ = [
    "AdmissionGate",
    "GenerativeSource",
    "ItemSearchService",
    "ItemToolHandlers",
    "LlmItemService",
    "PageExtractor",
    "SiteScraper",
    "SitemcpScraper",
    "SummaryGenerator",
    "validation_failure",
]
