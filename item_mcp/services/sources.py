"""
Protocols for the external information sources used by the search orchestrator.

Implementations raise SourceError (or a subclass) on failure; the orchestrator
decides whether a failure degrades the answer or propagates.
"""

from typing import Protocol, runtime_checkable

from item_mcp.models import ItemInfo, PageData, WebsiteConfig


@runtime_checkable
class GenerativeSource(Protocol):
    """LLM-backed capability answering queries with items or summaries."""

    async def search_with_ai(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ItemInfo]:
        """Answer a query directly with items."""
        ...

    async def generate_web_items(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ItemInfo]:
        """Answer a query with items sourced from official websites."""
        ...

    async def generate_markdown_summary(
        self,
        title: str,
        items: list[ItemInfo],
        include_intro: bool = True,
        include_conclusion: bool = True,
    ) -> str:
        """Render items as a markdown article."""
        ...


@runtime_checkable
class PageExtractor(Protocol):
    """Turns one scraped page into an item."""

    async def extract_info_from_page(
        self,
        page: PageData,
        website: WebsiteConfig,
        url: str,
    ) -> ItemInfo | None:
        """Extract the main item described by a page, or None."""
        ...


@runtime_checkable
class SiteScraper(Protocol):
    """Gathers items from a configured website."""

    async def scrape(self, website: WebsiteConfig, query: str) -> list[ItemInfo]:
        """Collect items relevant to ``query`` from ``website``."""
        ...
