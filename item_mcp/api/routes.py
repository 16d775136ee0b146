"""
HTTP JSON API endpoints using Starlette.

Implements:
- GET / (endpoint index)
- GET /health
- POST /api/tools/search_items
- POST /api/tools/save_item
- POST /api/tools/get_items_by_category
- POST /api/tools/generate_markdown_summary

Tool endpoints answer with the response envelope: 200 on success, 400 when
the request body is invalid and 500 when the operation failed.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse

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

INDEX_HTML = """<html>
  <head><title>Item Search Server (HTTP)</title></head>
  <body>
    <h1>Item Search Server (HTTP Interface)</h1>
    <p>The API is running. The following endpoints are available:</p>
    <ul>
      <li><a href="/health">Health check</a></li>
      <li>POST /api/tools/search_items - Search items</li>
      <li>POST /api/tools/save_item - Save an item</li>
      <li>POST /api/tools/get_items_by_category - List items by category</li>
      <li>POST /api/tools/generate_markdown_summary - Generate a markdown summary</li>
    </ul>
  </body>
</html>
"""


def envelope_response(response: ToolResponse, status_code: int | None = None) -> JSONResponse:
    """Serialize an envelope, deriving the status from its error flag."""
    if status_code is None:
        status_code = 500 if response.is_error else 200
    return JSONResponse(response.to_json_dict(), status_code=status_code)


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = "Request body is not valid JSON"
        raise ValidationError(msg, details=[{"msg": str(e), "type": "json_invalid"}]) from e


async def _parse(request: Request, model: type[BaseModel]) -> Any:
    return parse_request(model, await _read_body(request))


async def index(request: Request) -> HTMLResponse:
    """Plain HTML list of the available endpoints."""
    return HTMLResponse(INDEX_HTML)


async def health(request: Request) -> PlainTextResponse:
    return PlainTextResponse("OK")


async def search_items(request: Request, handlers: ItemToolHandlers) -> JSONResponse:
    try:
        search_request = await _parse(request, SearchRequest)
    except ValidationError as e:
        logger.warning("Invalid search_items request: %s", e.message)
        return envelope_response(validation_failure(e), status_code=400)
    return envelope_response(await handlers.handle_search_items(search_request))


async def save_item(request: Request, handlers: ItemToolHandlers) -> JSONResponse:
    try:
        item_input = await _parse(request, ItemInput)
    except ValidationError as e:
        logger.warning("Invalid save_item request: %s", e.message)
        return envelope_response(validation_failure(e), status_code=400)
    return envelope_response(await handlers.handle_save_item(item_input))


async def get_items_by_category(request: Request, handlers: ItemToolHandlers) -> JSONResponse:
    try:
        category_request = await _parse(request, CategoryRequest)
    except ValidationError as e:
        logger.warning("Invalid get_items_by_category request: %s", e.message)
        return envelope_response(validation_failure(e), status_code=400)
    return envelope_response(await handlers.handle_get_items_by_category(category_request))


async def generate_markdown_summary(request: Request, handlers: ItemToolHandlers) -> JSONResponse:
    try:
        summary_request = await _parse(request, SummaryRequest)
    except ValidationError as e:
        logger.warning("Invalid generate_markdown_summary request: %s", e.message)
        return envelope_response(validation_failure(e), status_code=400)
    return envelope_response(await handlers.handle_generate_markdown_summary(summary_request))


def unavailable() -> JSONResponse:
    """Envelope returned when the application context is not initialized."""
    return envelope_response(
        ToolResponse.failure(
            "An internal server error occurred.",
            error="Application context not available",
        ),
    )
