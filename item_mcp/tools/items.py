"""
Item tools for MCP server.

This module contains the item MCP tools:
- search_items: Search items with the LLM and the target websites
- save_item: Save an item to the store
- get_items_by_category: List saved items by category
- generate_markdown_summary: Render saved items as a markdown article

Every tool returns the response envelope serialized as JSON text. Invalid
arguments produce an error envelope rather than a protocol error.
"""

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastmcp import FastMCP

from item_mcp.core import MCPToolError, track_request
from item_mcp.core.context import get_app_context
from item_mcp.core.exceptions import ValidationError
from item_mcp.models import (
    CategoryRequest,
    ItemInput,
    SearchRequest,
    SummaryRequest,
    ToolResponse,
    parse_request,
)
from item_mcp.services.handlers import ItemToolHandlers, validation_failure

logger = logging.getLogger(__name__)


def _get_handlers() -> ItemToolHandlers:
    app_ctx = get_app_context()
    if app_ctx is None:
        msg = "Application context not available"
        raise MCPToolError(msg)
    return app_ctx.handlers


def _to_json(response: ToolResponse) -> str:
    return json.dumps(response.to_json_dict(), ensure_ascii=False, indent=2)


def _drop_unset(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


def register_item_tools(mcp: "FastMCP") -> None:
    """
    Register item MCP tools.

    Args:
        mcp: FastMCP instance to register tools with
    """

    @mcp.tool()
    @track_request("search_items")
    async def search_items(
        query: str,
        category: str | None = None,
        useWeb: bool = True,  # noqa: N803
    ) -> str:
        """
        Search items related to a keyword.

        Asks the LLM for matching items and, when useWeb is true, also gathers
        items from the configured websites. Web items matching saved items
        update them in place.

        Args:
            query: Search keyword
            category: Optional category to filter results by
            useWeb: Gather items from the web as well (default: true)

        Returns:
            JSON envelope with the found items in "data"
        """
        handlers = _get_handlers()
        try:
            request = parse_request(
                SearchRequest,
                _drop_unset(query=query, category=category, useWeb=useWeb),
            )
        except ValidationError as e:
            return _to_json(validation_failure(e))
        return _to_json(await handlers.handle_search_items(request))

    @mcp.tool()
    @track_request("save_item")
    async def save_item(
        name: str,
        organization: str,
        description: str,
        eligibility: str,
        amount: str,
        deadline: str,
        applicationProcess: str,  # noqa: N803
        url: str,
        category: str,
        requirementDetails: str | None = None,  # noqa: N803
        exclusions: str | None = None,
        contactInfo: str | None = None,  # noqa: N803
    ) -> str:
        """
        Save a searched or generated item to the store.

        Args:
            name: Official name of the item
            organization: Providing organization
            description: Summary of the item
            eligibility: Eligibility conditions
            amount: Amount, quantity or scale
            deadline: Deadline or relevant dates
            applicationProcess: Steps to apply or use the item
            url: Reference URL
            category: Category
            requirementDetails: Detailed requirements (optional)
            exclusions: Exclusion conditions (optional)
            contactInfo: Contact information (optional)

        Returns:
            JSON envelope with the saved item (including its id) in "data"
        """
        handlers = _get_handlers()
        try:
            request = parse_request(
                ItemInput,
                _drop_unset(
                    name=name,
                    organization=organization,
                    description=description,
                    eligibility=eligibility,
                    amount=amount,
                    deadline=deadline,
                    applicationProcess=applicationProcess,
                    url=url,
                    category=category,
                    requirementDetails=requirementDetails,
                    exclusions=exclusions,
                    contactInfo=contactInfo,
                ),
            )
        except ValidationError as e:
            return _to_json(validation_failure(e))
        return _to_json(await handlers.handle_save_item(request))

    @mcp.tool()
    @track_request("get_items_by_category")
    async def get_items_by_category(category: str = "") -> str:
        """
        List saved items of a category.

        Matching is a case-insensitive substring match; an empty category
        lists every saved item.

        Args:
            category: Category to match

        Returns:
            JSON envelope with the items in "data"
        """
        handlers = _get_handlers()
        try:
            request = parse_request(CategoryRequest, {"category": category})
        except ValidationError as e:
            return _to_json(validation_failure(e))
        return _to_json(await handlers.handle_get_items_by_category(request))

    @mcp.tool()
    @track_request("generate_markdown_summary")
    async def generate_markdown_summary(
        title: str,
        category: str | None = None,
        includeIntro: bool = True,  # noqa: N803
        includeConclusion: bool = True,  # noqa: N803
    ) -> str:
        """
        Generate a markdown article summarizing saved items.

        Args:
            title: Article title
            category: Restrict the article to one category (optional)
            includeIntro: Include an introduction (default: true)
            includeConclusion: Include a conclusion (default: true)

        Returns:
            JSON envelope with the markdown text in "data" and "content"
        """
        handlers = _get_handlers()
        try:
            request = parse_request(
                SummaryRequest,
                _drop_unset(
                    title=title,
                    category=category,
                    includeIntro=includeIntro,
                    includeConclusion=includeConclusion,
                ),
            )
        except ValidationError as e:
            return _to_json(validation_failure(e))
        return _to_json(await handlers.handle_generate_markdown_summary(request))

    logger.info("Item tools registered")
