"""Search orchestration: generative answers, web gathering and merging into the store.

A full search runs the generative source, optionally gathers web items from
the LLM and every enabled target site, and merges the web items into the
store (duplicates are updated in place). The whole run is bounded by a single
deadline and by an admission gate limiting how many full searches run at once.
"""

import asyncio
import logging
import uuid

from item_mcp.core.constants import (
    DEFAULT_WEB_SOURCE,
    MANUAL_ID_PREFIX,
    MANUAL_SOURCE_LABEL,
    UPDATED_SOURCE_SUFFIX,
)
from item_mcp.database.base import ItemRepository
from item_mcp.models import ItemInfo, ItemInput, WebsiteConfig, utc_now

from .admission import AdmissionGate
from .sources import GenerativeSource, SiteScraper

logger = logging.getLogger(__name__)


class ItemSearchService:
    """Orchestrates item searches and manual saves."""

    def __init__(
        self,
        repository: ItemRepository,
        generative: GenerativeSource,
        scraper: SiteScraper,
        websites: list[WebsiteConfig] | None = None,
        search_timeout: float = 90.0,
        web_search_timeout: float = 45.0,
        max_simultaneous_searches: int = 2,
    ):
        """Initialize the search service.

        Args:
            repository: Item store used for deduplication, updates and saves
            generative: LLM-backed source
            scraper: Site scraper consulted for every enabled website
            websites: Target websites
            search_timeout: Overall deadline in seconds for a full search
            web_search_timeout: Deadline in seconds for a single website
            max_simultaneous_searches: Full searches allowed in flight
        """
        self.repository = repository
        self.generative = generative
        self.scraper = scraper
        self.websites = list(websites or [])
        self.search_timeout = search_timeout
        self.web_search_timeout = web_search_timeout
        self.gate = AdmissionGate(max_simultaneous_searches)

    async def search(
        self,
        query: str,
        category: str | None = None,
        use_web: bool = True,
    ) -> list[ItemInfo]:
        """Search items for a query.

        Never raises for source failures or timeouts: the answer degrades to
        partial results, the generative answer alone, or an empty list.

        Args:
            query: Search keyword
            category: Optional category; filters the merged results
            use_web: Whether to gather and merge web items

        Returns:
            Matching items
        """
        logger.info(
            "Searching items: query=%r category=%r use_web=%s",
            query,
            category,
            use_web,
        )

        with self.gate.slot() as admitted:
            if not admitted:
                logger.warning(
                    "Simultaneous search limit (%d) reached, running generative search only",
                    self.gate.limit,
                )
                return await self._generative_only(query, category)

            results: list[ItemInfo] = []
            try:
                await asyncio.wait_for(
                    self._run_search(query, category, use_web, results),
                    timeout=self.search_timeout,
                )
            except TimeoutError:
                logger.error(
                    "Search for %r exceeded %ss (%d partial results)",
                    query,
                    self.search_timeout,
                    len(results),
                )
                if results:
                    return list(results)
                return await self._generative_only(query, category)
            except Exception:
                logger.exception("Search for %r failed", query)
                return await self._generative_only(query, category)

        if category:
            results = [item for item in results if item.matches_category(category)]
        logger.info("Search for %r returned %d items", query, len(results))
        return results

    async def _run_search(
        self,
        query: str,
        category: str | None,
        use_web: bool,
        results: list[ItemInfo],
    ) -> None:
        """Fill ``results`` in place so a timed-out run still leaves partial results."""
        generated = await self.generative.search_with_ai(query, category)
        results.extend(generated)
        logger.info("Generative search returned %d items", len(generated))

        if not use_web:
            return

        web_items = await self.search_from_web(query, category)
        if web_items:
            await self._merge_web_items(web_items, results)

    async def _merge_web_items(
        self,
        web_items: list[ItemInfo],
        results: list[ItemInfo],
    ) -> None:
        new_count = 0
        updated_count = 0

        for web_item in web_items:
            duplicate_id = await self.repository.find_duplicate(web_item)
            if duplicate_id is None:
                results.append(web_item)
                new_count += 1
                continue

            source = f"{web_item.source or DEFAULT_WEB_SOURCE} {UPDATED_SOURCE_SUFFIX}"
            updated = await self.repository.update(
                duplicate_id,
                web_item.model_copy(update={"source": source}),
            )
            if updated is None:
                continue

            updated_count += 1
            for index, existing in enumerate(results):
                if existing.id == duplicate_id:
                    results[index] = updated
                    break
            else:
                results.append(updated)

        logger.info(
            "Merged %d web items (new: %d, updated: %d)",
            len(web_items),
            new_count,
            updated_count,
        )

    async def _generative_only(self, query: str, category: str | None) -> list[ItemInfo]:
        try:
            return await self.generative.search_with_ai(query, category)
        except Exception as e:
            logger.warning("Generative search for %r failed: %s", query, e)
            return []

    async def search_from_web(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ItemInfo]:
        """Gather web items from the LLM and every enabled target website.

        Each source failure or per-site timeout is logged and contributes no
        items.
        """
        logger.info("Gathering web items for %r", query)
        results: list[ItemInfo] = []

        try:
            generated = await self.generative.generate_web_items(query, category)
            results.extend(generated)
            logger.info("Generated %d web items", len(generated))
        except Exception as e:
            logger.warning("Web item generation failed: %s", e)

        sites = [site for site in self.websites if site.enabled]
        if sites:
            outcomes = await asyncio.gather(
                *(self._scrape_site(site, query) for site in sites),
                return_exceptions=True,
            )
            for site, outcome in zip(sites, outcomes, strict=True):
                if isinstance(outcome, TimeoutError):
                    logger.warning(
                        "Website %s timed out after %ss",
                        site.name,
                        self.web_search_timeout,
                    )
                elif isinstance(outcome, BaseException):
                    logger.warning("Website %s failed: %s", site.name, outcome)
                else:
                    results.extend(outcome)
                    logger.info("Gathered %d items from %s", len(outcome), site.name)

        logger.info("Web gathering returned %d items", len(results))
        return results

    async def _scrape_site(self, site: WebsiteConfig, query: str) -> list[ItemInfo]:
        return await asyncio.wait_for(
            self.scraper.scrape(site, query),
            timeout=self.web_search_timeout,
        )

    async def save_item(self, data: ItemInput) -> ItemInfo:
        """Persist a manually supplied item under a fresh ``item_`` id.

        No deduplication is performed.

        Raises:
            StorageError: If the item cannot be written
        """
        item = ItemInfo(
            **data.model_dump(),
            id=f"{MANUAL_ID_PREFIX}{uuid.uuid4()}",
            source=MANUAL_SOURCE_LABEL,
            created_at=utc_now(),
        )
        await self.repository.save(item)
        return item
