"""Operation handlers shared by the MCP tools and the HTTP API.

Each handler takes a validated request, calls the services and wraps the
outcome in a ToolResponse envelope. Handlers never raise: failures are logged
and returned as error envelopes.
"""

import logging

from item_mcp.core.exceptions import ValidationError
from item_mcp.database.base import ItemRepository
from item_mcp.models import (
    CategoryRequest,
    ItemInput,
    SearchRequest,
    SummaryRequest,
    ToolResponse,
)

from .search_service import ItemSearchService
from .summary import SummaryGenerator

logger = logging.getLogger(__name__)


def validation_failure(error: ValidationError) -> ToolResponse:
    """Envelope for a request that failed validation."""
    return ToolResponse.failure(
        "Please check the request data.",
        error=error.message,
        details=error.details,
    )


class ItemToolHandlers:
    """Envelope-producing entry points for the four operations."""

    def __init__(
        self,
        search_service: ItemSearchService,
        repository: ItemRepository,
        summary_generator: SummaryGenerator,
    ):
        self.search_service = search_service
        self.repository = repository
        self.summary_generator = summary_generator

    async def handle_search_items(self, request: SearchRequest) -> ToolResponse:
        try:
            items = await self.search_service.search(
                request.query,
                category=request.category,
                use_web=request.use_web,
            )
        except Exception as e:
            logger.exception("search_items failed")
            return ToolResponse.failure(f"Error while searching items: {e!s}", error=str(e))

        return ToolResponse.success(
            f'Found {len(items)} item(s) for "{request.query}".',
            data=[item.to_json_dict() for item in items],
        )

    async def handle_save_item(self, request: ItemInput) -> ToolResponse:
        try:
            item = await self.search_service.save_item(request)
        except Exception as e:
            logger.exception("save_item failed")
            return ToolResponse.failure(f"Error while saving item: {e!s}", error=str(e))

        return ToolResponse.success(
            f'Saved item "{item.name}" (ID: {item.id}).',
            data=item.to_json_dict(),
        )

    async def handle_get_items_by_category(self, request: CategoryRequest) -> ToolResponse:
        try:
            items = await self.repository.list_by_category(request.category)
        except Exception as e:
            logger.exception("get_items_by_category failed")
            return ToolResponse.failure(
                f"Error while listing items by category: {e!s}",
                error=str(e),
            )

        if request.category:
            text = f'Found {len(items)} item(s) in category "{request.category}".'
        else:
            text = f"Found {len(items)} saved item(s)."
        return ToolResponse.success(text, data=[item.to_json_dict() for item in items])

    async def handle_generate_markdown_summary(self, request: SummaryRequest) -> ToolResponse:
        try:
            markdown = await self.summary_generator.generate(
                request.title,
                category=request.category,
                include_intro=request.include_intro,
                include_conclusion=request.include_conclusion,
            )
        except Exception as e:
            logger.exception("generate_markdown_summary failed")
            return ToolResponse.failure(
                f"Error while generating markdown summary: {e!s}",
                error=str(e),
            )

        return ToolResponse.success(markdown, data=markdown)
