"""Markdown summaries of saved items."""

import logging

from item_mcp.core.constants import NO_INFORMATION_TEMPLATE
from item_mcp.database.base import ItemRepository

from .sources import GenerativeSource

logger = logging.getLogger(__name__)


class SummaryGenerator:
    """Renders stored items as a markdown article through the generative source."""

    def __init__(self, repository: ItemRepository, generative: GenerativeSource):
        self.repository = repository
        self.generative = generative

    async def generate(
        self,
        title: str,
        category: str | None = None,
        include_intro: bool = True,
        include_conclusion: bool = True,
    ) -> str:
        """Generate a markdown summary of the stored items.

        Args:
            title: Article title
            category: Restrict to items of this category (all items when empty)
            include_intro: Ask for an introduction
            include_conclusion: Ask for a conclusion

        Returns:
            Markdown text; a fixed "no information" document when no item matches

        Raises:
            SourceError: If the generative source fails
            StorageError: If the store cannot be listed
        """
        if category:
            items = await self.repository.list_by_category(category)
        else:
            items = await self.repository.list_all()

        if not items:
            logger.info("No items to summarize for %r", title)
            return NO_INFORMATION_TEMPLATE.format(title=title)

        logger.info("Summarizing %d items as %r", len(items), title)
        return await self.generative.generate_markdown_summary(
            title,
            items,
            include_intro=include_intro,
            include_conclusion=include_conclusion,
        )
