"""Application context and lifecycle management for the Item Search MCP server."""

import asyncio
from dataclasses import dataclass
from typing import Optional

from item_mcp.config import Settings, get_settings
from item_mcp.database import FileItemRepository
from item_mcp.services.handlers import ItemToolHandlers
from item_mcp.services.llm import LlmItemService
from item_mcp.services.search_service import ItemSearchService
from item_mcp.services.site_scraper import SitemcpScraper
from item_mcp.services.summary import SummaryGenerator

from .logging import logger

# Global context storage
_app_context: Optional["ItemSearchContext"] = None
_context_lock: asyncio.Lock | None = None  # Created lazily inside the running loop


@dataclass
class ItemSearchContext:
    """Services shared by every tool call and HTTP request."""

    settings: Settings
    repository: FileItemRepository
    llm_service: LlmItemService
    scraper: SitemcpScraper
    search_service: ItemSearchService
    summary_generator: SummaryGenerator
    handlers: ItemToolHandlers


def set_app_context(context: ItemSearchContext | None) -> None:
    """Store the application context globally."""
    global _app_context
    _app_context = context


def get_app_context() -> ItemSearchContext | None:
    """Get the stored application context."""
    return _app_context


def build_context(settings: Settings) -> ItemSearchContext:
    """Wire every service from settings."""
    settings.setup_directories()

    repository = FileItemRepository(settings.db_dir)
    llm_service = LlmItemService(settings)
    scraper = SitemcpScraper(llm_service, settings)

    websites = settings.get_target_websites()
    logger.info(
        "Target websites: %d configured, %d enabled",
        len(websites),
        sum(1 for site in websites if site.enabled),
    )

    search_service = ItemSearchService(
        repository,
        llm_service,
        scraper,
        websites=websites,
        search_timeout=settings.search_timeout,
        web_search_timeout=settings.web_search_timeout,
        max_simultaneous_searches=settings.max_simultaneous_searches,
    )
    summary_generator = SummaryGenerator(repository, llm_service)
    handlers = ItemToolHandlers(search_service, repository, summary_generator)

    return ItemSearchContext(
        settings=settings,
        repository=repository,
        llm_service=llm_service,
        scraper=scraper,
        search_service=search_service,
        summary_generator=summary_generator,
        handlers=handlers,
    )


async def initialize_global_context() -> ItemSearchContext:
    """Initialize the global application context once.

    This should be called at application startup, not per-request.

    Returns:
        ItemSearchContext: The initialized context
    """
    global _app_context, _context_lock

    if _context_lock is None:
        _context_lock = asyncio.Lock()

    async with _context_lock:
        if _app_context is not None:
            logger.info("Using existing application context (singleton)")
            return _app_context

        logger.info("Initializing global application context...")
        _app_context = build_context(get_settings())
        logger.info("Global application context initialized")
        return _app_context


async def cleanup_global_context() -> None:
    """Clean up the global application context.

    This should be called at application shutdown.
    """
    global _app_context

    if _app_context is None:
        logger.info("No global context to clean up")
        return

    _app_context = None
    logger.info("Global application context cleanup completed")
