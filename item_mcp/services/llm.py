"""LLM-backed generative source.

This module handles:
- Direct item search (items answered by the model)
- Web-oriented item generation (items with official website URLs)
- Item extraction from a single scraped page
- Markdown summaries of saved items

All calls go through Pydantic AI agents with structured output types. Every
failure surfaces as LLMError so callers can decide between degrading and
propagating.
"""

import logging
import re
import uuid
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models.openai import OpenAIModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from item_mcp.config import Settings, get_settings
from item_mcp.core.constants import (
    DEFAULT_WEB_SOURCE,
    EXTRACTED_CATEGORY_DEFAULT,
    GENERATED_ID_PREFIX,
    GENERATED_SOURCE_LABEL,
    MAX_RETRIES_DEFAULT,
    NOT_AVAILABLE,
    ORGANIZATION_SLUG_LENGTH,
    WEB_EXTRACT_SOURCE_SUFFIX,
    WEB_ID_PREFIX,
    WEB_SEARCH_SOURCE_SUFFIX,
)
from item_mcp.core.exceptions import LLMError
from item_mcp.models import (
    ItemDraft,
    ItemDraftList,
    ItemInfo,
    PageData,
    PageExtraction,
    WebsiteConfig,
    utc_now,
)

from .prompts import (
    build_page_extraction_prompt,
    build_search_prompt,
    build_web_items_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_NAMES = {"", "not available", "n/a", "none", "null"}


def organization_slug(organization: str) -> str:
    """Short alphanumeric slug of an organization name used in web item ids."""
    slug = re.sub(r"[^a-zA-Z0-9]", "", organization).lower()
    return slug[:ORGANIZATION_SLUG_LENGTH] or "unk"


class LlmItemService:
    """Generative source and page extractor backed by Pydantic AI agents.

    Agents are created on first use so the server can start (and serve stored
    items) without LLM credentials.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the service from settings.

        Args:
            settings: Application settings (defaults to the global instance)
        """
        self.settings = settings or get_settings()
        self.model_name = self.settings.model_choice
        self.model_settings = ModelSettings(
            temperature=self.settings.llm_temperature,
            timeout=self.settings.llm_timeout,
        )
        self._model: OpenAIModel | None = None
        self._agents: dict[str, Agent[Any, Any]] = {}

        logger.info("Initialized LLM item service with model=%s", self.model_name)

    # ========================================
    # Agent plumbing
    # ========================================

    def _get_model(self) -> OpenAIModel:
        if self._model is None:
            if self.settings.openai_api_key:
                provider = OpenAIProvider(api_key=self.settings.openai_api_key)
                self._model = OpenAIModel(self.model_name, provider=provider)
            else:
                self._model = OpenAIModel(self.model_name)
        return self._model

    def _get_agent(self, kind: str, output_type: Any) -> Agent[Any, Any]:
        agent = self._agents.get(kind)
        if agent is None:
            agent = Agent(
                model=self._get_model(),
                output_type=output_type,
                output_retries=MAX_RETRIES_DEFAULT,
                model_settings=self.model_settings,
            )
            self._agents[kind] = agent
        return agent

    async def _run(self, kind: str, output_type: Any, prompt: str) -> Any:
        """Run one structured LLM call.

        Raises:
            LLMError: When the agent cannot be created, the call fails, or
                output validation retries are exhausted
        """
        try:
            agent = self._get_agent(kind, output_type)
            result = await agent.run(prompt)
        except UnexpectedModelBehavior as e:
            logger.error("LLM %s failed after retries: %s", kind, e)
            msg = f"LLM {kind} failed after retries"
            raise LLMError(msg) from e
        except Exception as e:
            logger.error("LLM %s failed: %s", kind, e)
            msg = f"LLM {kind} failed: {e!s}"
            raise LLMError(msg) from e
        return result.output

    @staticmethod
    def _current_date() -> str:
        return utc_now().date().isoformat()

    # ========================================
    # Generative source API
    # ========================================

    async def search_with_ai(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ItemInfo]:
        """Ask the model directly for items matching the query.

        Args:
            query: Search keyword
            category: Optional category hint

        Returns:
            Items with ``ai_`` ids and the LLM search source label

        Raises:
            LLMError: If the model call fails
        """
        prompt = build_search_prompt(query, category, self._current_date())
        output: ItemDraftList = await self._run("search", ItemDraftList, prompt)

        now = utc_now()
        items = [
            ItemInfo(
                **draft.model_dump(),
                id=f"{GENERATED_ID_PREFIX}{uuid.uuid4()}",
                source=GENERATED_SOURCE_LABEL,
                created_at=now,
            )
            for draft in output.items
            if draft.name.strip()
        ]
        logger.info("LLM search returned %d items for %r", len(items), query)
        return items

    async def generate_web_items(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ItemInfo]:
        """Ask the model for items found on real websites.

        Returns:
            Items with ``web_<organization>_`` ids, labelled as web search results

        Raises:
            LLMError: If the model call fails
        """
        prompt = build_web_items_prompt(query, category)
        output: ItemDraftList = await self._run("web_items", ItemDraftList, prompt)

        now = utc_now()
        items = []
        for draft in output.items:
            if not draft.name.strip():
                continue
            organization = draft.organization or DEFAULT_WEB_SOURCE
            items.append(
                ItemInfo(
                    **draft.model_dump(),
                    id=f"{WEB_ID_PREFIX}{organization_slug(draft.organization)}_{uuid.uuid4()}",
                    source=f"{organization} {WEB_SEARCH_SOURCE_SUFFIX}",
                    created_at=now,
                ),
            )
        logger.info("LLM web generation returned %d items for %r", len(items), query)
        return items

    async def generate_markdown_summary(
        self,
        title: str,
        items: list[ItemInfo],
        include_intro: bool = True,
        include_conclusion: bool = True,
    ) -> str:
        """Render items as a markdown article.

        Raises:
            LLMError: If the model call fails
        """
        prompt = build_summary_prompt(
            title,
            items,
            include_intro,
            include_conclusion,
            self._current_date(),
        )
        return await self._run("summary", str, prompt)

    # ========================================
    # Page extractor API
    # ========================================

    async def extract_info_from_page(
        self,
        page: PageData,
        website: WebsiteConfig,
        url: str,
    ) -> ItemInfo | None:
        """Extract the main item described by a scraped page.

        Returns:
            The item, or None when the page has no content or no usable item

        Raises:
            LLMError: If the model call fails
        """
        if not page.content:
            return None

        prompt = build_page_extraction_prompt(
            page.title or "Unknown title",
            page.content,
            website,
            url,
        )
        output: PageExtraction = await self._run("extract", PageExtraction, prompt)

        draft = output.item
        if not output.found or draft is None or draft.name.strip().lower() in _PLACEHOLDER_NAMES:
            logger.debug("No item extracted from %s", url)
            return None

        return self._item_from_page_draft(draft, website, url)

    @staticmethod
    def _item_from_page_draft(
        draft: ItemDraft,
        website: WebsiteConfig,
        url: str,
    ) -> ItemInfo:
        return ItemInfo(
            id=f"{WEB_ID_PREFIX}{website.name}_{uuid.uuid4()}",
            name=draft.name,
            organization=draft.organization or website.name,
            description=draft.description or NOT_AVAILABLE,
            eligibility=draft.eligibility or NOT_AVAILABLE,
            amount=draft.amount or NOT_AVAILABLE,
            deadline=draft.deadline or NOT_AVAILABLE,
            application_process=draft.application_process or NOT_AVAILABLE,
            url=url,
            category=draft.category or EXTRACTED_CATEGORY_DEFAULT,
            requirement_details=draft.requirement_details,
            exclusions=draft.exclusions,
            contact_info=draft.contact_info,
            source=f"{website.name} {WEB_EXTRACT_SOURCE_SUFFIX}",
            created_at=utc_now(),
        )
