"""Site scraper backed by the ``sitemcp`` command line tool.

sitemcp crawls a website and leaves one JSON document per page in a cache
directory. This module finds (or produces) that cache, picks the pages that
mention the query and hands them to a page extractor.
"""

import asyncio
import contextlib
import json
import logging
import os
import re
import signal
import time
from pathlib import Path

from item_mcp.config import Settings, get_settings
from item_mcp.core.constants import (
    FALLBACK_CATEGORY,
    FALLBACK_SOURCE_SUFFIX,
    ITEM_FILE_SUFFIX,
    WEB_ID_PREFIX,
)
from item_mcp.core.exceptions import SourceError
from item_mcp.models import ItemInfo, PageData, WebsiteConfig, utc_now

from .sources import PageExtractor

logger = logging.getLogger(__name__)

SEE_WEBSITE = "See the website for details"


def site_host_path(url: str) -> str:
    """URL without its http(s) scheme, as sitemcp names its cache entries."""
    return re.sub(r"^https?://", "", url)


class SitemcpScraper:
    """Gathers items from a website through the sitemcp page cache."""

    def __init__(
        self,
        extractor: PageExtractor,
        settings: Settings | None = None,
        home_dir: Path | None = None,
    ):
        """Initialize the scraper.

        Args:
            extractor: Turns matching pages into items
            settings: Application settings (defaults to the global instance)
            home_dir: Base of the default sitemcp cache (defaults to the user's home)
        """
        self.extractor = extractor
        self.settings = settings or get_settings()
        self.home_dir = home_dir or Path.home()

        for directory in (self.settings.tmp_dir, self.settings.alternative_cache_dir):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created directory: %s", directory)

    async def scrape(self, website: WebsiteConfig, query: str) -> list[ItemInfo]:
        """Collect items relevant to ``query`` from ``website``.

        Never raises for scraping problems: a site without usable cache data
        yields the fallback item (or nothing when fallbacks are disabled).
        Cancellation is propagated after the sitemcp process is killed.
        """
        logger.info("Gathering items from %s (%s) for %r", website.name, website.url, query)

        try:
            alt_cache_dir = self._prepare_directories(website)
            candidates = self._cache_candidates(website, alt_cache_dir)

            cache_dir = self._find_cache_dir(candidates)
            if cache_dir is None:
                await self._run_sitemcp(website, alt_cache_dir)
                cache_dir = self._find_cache_dir(candidates)

            if cache_dir is None:
                logger.warning("No sitemcp cache found for %s", website.name)
                return self._fallback(website, query)

            logger.info("Using sitemcp cache directory: %s", cache_dir)
            return await self._process_cache(cache_dir, website, query)
        except Exception as e:
            logger.error("Failed to gather items from %s: %s", website.name, e)
            return self._fallback(website, query)

    # ========================================
    # Cache discovery
    # ========================================

    def _prepare_directories(self, website: WebsiteConfig) -> Path:
        (self.settings.tmp_dir / website.name).mkdir(parents=True, exist_ok=True)
        alt_cache_dir = self.settings.alternative_cache_dir / website.name
        alt_cache_dir.mkdir(parents=True, exist_ok=True)
        return alt_cache_dir

    def _cache_candidates(self, website: WebsiteConfig, alt_cache_dir: Path) -> list[Path]:
        host_path = site_host_path(website.url)
        base = self.home_dir / ".cache" / "sitemcp"
        return [
            base / host_path.replace("/", "_"),
            base / host_path,
            alt_cache_dir,
        ]

    @staticmethod
    def _find_cache_dir(candidates: list[Path]) -> Path | None:
        """First candidate directory holding at least one cached page."""
        for candidate in candidates:
            if candidate.is_dir() and any(candidate.glob(f"*{ITEM_FILE_SUFFIX}")):
                return candidate
        return None

    # ========================================
    # sitemcp process
    # ========================================

    def _build_command(self, website: WebsiteConfig, alt_cache_dir: Path) -> list[str]:
        return [
            self.settings.sitemcp_command,
            "sitemcp",
            website.url,
            "--concurrency",
            str(self.settings.sitemcp_concurrency),
            "--max-length",
            str(self.settings.sitemcp_max_length),
            "--limit",
            str(self.settings.sitemcp_page_limit),
            "--no-recursive",
            f"--cache-dir={alt_cache_dir}",
        ]

    async def _run_sitemcp(self, website: WebsiteConfig, alt_cache_dir: Path) -> None:
        """Run sitemcp for one site, killing its process group on timeout or cancellation.

        Launch failures and non-zero exits are logged only; the caller looks
        for a cache afterwards either way.
        """
        cmd = self._build_command(website, alt_cache_dir)
        logger.debug("Executing sitemcp: %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("Failed to start sitemcp for %s: %s", website.name, e)
            return

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.settings.sitemcp_timeout,
            )
        except TimeoutError:
            logger.warning(
                "sitemcp timed out for %s after %ss, killing process",
                website.name,
                self.settings.sitemcp_timeout,
            )
            await self._kill(process)
            return
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        if process.returncode != 0:
            error_output = stderr.decode("utf-8", errors="replace") if stderr else ""
            logger.warning(
                "sitemcp for %s exited with code %s: %s",
                website.name,
                process.returncode,
                error_output[:200],
            )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return
        except OSError as e:
            logger.error("Failed to kill sitemcp process %s: %s", process.pid, e)
            process.kill()
        with contextlib.suppress(ProcessLookupError):
            await process.wait()

    # ========================================
    # Page processing
    # ========================================

    @staticmethod
    def _read_page(path: Path) -> PageData:
        return PageData.model_validate(json.loads(path.read_text(encoding="utf-8")))

    async def _process_cache(
        self,
        cache_dir: Path,
        website: WebsiteConfig,
        query: str,
    ) -> list[ItemInfo]:
        files = sorted(cache_dir.glob(f"*{ITEM_FILE_SUFFIX}"))
        logger.info("Processing %d cached pages of %s", len(files), website.name)

        loop = asyncio.get_running_loop()
        needle = query.lower()
        items: list[ItemInfo] = []

        for file_path in files:
            try:
                page = await loop.run_in_executor(None, self._read_page, file_path)
            except (OSError, ValueError) as e:
                logger.error("Failed to read cached page %s: %s", file_path, e)
                continue

            if not page.title or not page.content:
                continue
            if needle not in f"{page.title} {page.content}".lower():
                continue

            try:
                item = await self.extractor.extract_info_from_page(
                    page,
                    website,
                    page.url or website.url,
                )
            except SourceError as e:
                logger.error("Failed to extract item from %s: %s", file_path, e)
                continue

            if item is None:
                continue
            items.append(item)
            if len(items) >= self.settings.max_items_per_site:
                logger.info("Collected enough items from %s (%d)", website.name, len(items))
                break

        logger.info("Gathered %d items from %s", len(items), website.name)
        return items

    def _fallback(self, website: WebsiteConfig, query: str) -> list[ItemInfo]:
        if not self.settings.use_fallback_for_failed_sites:
            return []

        logger.info("Generating fallback item for %s", website.name)
        return [
            ItemInfo(
                id=f"{WEB_ID_PREFIX}{website.name}_fallback_{int(time.time() * 1000)}",
                name=f"Information from {website.name} ({query})",
                organization=website.description or website.name,
                description=(
                    f'Information related to "{query}". '
                    f"See the website ({website.url}) for details."
                ),
                eligibility=SEE_WEBSITE,
                amount=SEE_WEBSITE,
                deadline="Check the website for the latest dates",
                application_process="See the website for the application steps",
                url=website.url,
                category=FALLBACK_CATEGORY,
                source=f"{website.name} {FALLBACK_SOURCE_SUFFIX}",
                created_at=utc_now(),
            ),
        ]
