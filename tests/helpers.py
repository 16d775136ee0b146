"""Item builders and in-memory stand-ins for the information sources."""

import asyncio
from datetime import UTC, datetime
from typing import Any

from item_mcp.core.exceptions import LLMError
from item_mcp.models import ItemInfo, ItemInput, PageData


def make_item_input(**overrides: Any) -> ItemInput:
    """Build an ItemInput with sensible defaults."""
    data = {
        "name": "Grant A",
        "organization": "Org X",
        "description": "Support for small IT projects",
        "eligibility": "Small businesses",
        "amount": "Up to 1,000,000",
        "deadline": "2030-03-31",
        "application_process": "Apply online",
        "url": "https://example.org/grant-a",
        "category": "IT",
    }
    data.update(overrides)
    return ItemInput(**data)


def make_item(item_id: str = "item_1", **overrides: Any) -> ItemInfo:
    """Build an ItemInfo with sensible defaults."""
    source = overrides.pop("source", "Manual Save")
    created_at = overrides.pop("created_at", datetime(2024, 1, 1, tzinfo=UTC))
    base = make_item_input(**overrides)
    return ItemInfo(
        **base.model_dump(),
        id=item_id,
        source=source,
        created_at=created_at,
    )


class StubGenerative:
    """Generative source returning canned answers and recording its calls."""

    def __init__(
        self,
        search_results: list[ItemInfo] | None = None,
        web_results: list[ItemInfo] | None = None,
        summary: str = "# Summary",
        search_error: Exception | None = None,
        web_error: Exception | None = None,
        summary_error: Exception | None = None,
        search_delay: float = 0.0,
    ):
        self.search_results = search_results or []
        self.web_results = web_results or []
        self.summary = summary
        self.search_error = search_error
        self.web_error = web_error
        self.summary_error = summary_error
        self.search_delay = search_delay
        self.search_calls: list[tuple[str, str | None]] = []
        self.web_calls: list[tuple[str, str | None]] = []
        self.summary_calls: list[dict[str, Any]] = []

    async def search_with_ai(self, query, category=None):
        self.search_calls.append((query, category))
        if self.search_delay:
            await asyncio.sleep(self.search_delay)
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results)

    async def generate_web_items(self, query, category=None):
        self.web_calls.append((query, category))
        if self.web_error is not None:
            raise self.web_error
        return list(self.web_results)

    async def generate_markdown_summary(
        self,
        title,
        items,
        include_intro=True,
        include_conclusion=True,
    ):
        self.summary_calls.append(
            {
                "title": title,
                "items": items,
                "include_intro": include_intro,
                "include_conclusion": include_conclusion,
            },
        )
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary


class StubScraper:
    """Site scraper returning canned items per site name."""

    def __init__(
        self,
        results: dict[str, list[ItemInfo]] | None = None,
        errors: dict[str, Exception] | None = None,
        delays: dict[str, float] | None = None,
    ):
        self.results = results or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []

    async def scrape(self, website, query):
        self.calls.append((website.name, query))
        delay = self.delays.get(website.name)
        if delay:
            await asyncio.sleep(delay)
        if website.name in self.errors:
            raise self.errors[website.name]
        return list(self.results.get(website.name, []))


class StubExtractor:
    """Page extractor turning every page into an item named after its title."""

    def __init__(self, fail_on: set[str] | None = None, skip: set[str] | None = None):
        self.fail_on = fail_on or set()
        self.skip = skip or set()
        self.calls: list[tuple[PageData, str]] = []

    async def extract_info_from_page(self, page, website, url):
        self.calls.append((page, url))
        if page.title in self.fail_on:
            msg = f"extraction failed for {page.title}"
            raise LLMError(msg)
        if page.title in self.skip:
            return None
        return make_item(
            f"web_{website.name}_{len(self.calls)}",
            name=page.title,
            url=url,
            source=f"{website.name} (Web Extract)",
        )
