"""
Tests for the HTTP JSON API.

Routes are registered through setup_http_routes() on a mock FastMCP, then
mounted on a plain Starlette app and exercised with the test client.
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from starlette.applications import Starlette
from starlette.routing import Route
from starlette.testclient import TestClient

from item_mcp.api import setup_http_routes
from item_mcp.core.context import set_app_context
from item_mcp.core.exceptions import LLMError
from item_mcp.services.handlers import ItemToolHandlers
from item_mcp.services.search_service import ItemSearchService
from item_mcp.services.summary import SummaryGenerator
from tests.helpers import StubGenerative, StubScraper, make_item

SAVE_BODY = {
    "name": "Grant A",
    "organization": "Org X",
    "description": "d",
    "eligibility": "e",
    "amount": "a",
    "deadline": "2030-01-01",
    "applicationProcess": "Apply online",
    "url": "https://example.org",
    "category": "IT",
}


def capture_routes():
    mcp = Mock()
    registered = []

    def capture_route(path, methods):
        def decorator(func):
            registered.append(Route(path, func, methods=methods))
            return func

        return decorator

    mcp.custom_route = Mock(side_effect=capture_route)
    setup_http_routes(mcp)
    return mcp, registered


@pytest.fixture
def generative():
    return StubGenerative(
        search_results=[make_item("ai_1", name="AI Grant")],
        summary="# Grants\n\nbody",
    )


@pytest.fixture
def client(repository, generative):
    search_service = ItemSearchService(repository, generative, StubScraper(), websites=[])
    handlers = ItemToolHandlers(
        search_service,
        repository,
        SummaryGenerator(repository, generative),
    )
    set_app_context(SimpleNamespace(handlers=handlers))
    _, routes = capture_routes()
    return TestClient(Starlette(routes=routes))


class TestSetupHttpRoutes:
    """Test HTTP route registration."""

    def test_registers_all_six_routes(self):
        mcp, _ = capture_routes()

        registered = [
            (call_args.args[0], tuple(call_args.kwargs["methods"]))
            for call_args in mcp.custom_route.call_args_list
        ]
        assert registered == [
            ("/", ("GET",)),
            ("/health", ("GET",)),
            ("/api/tools/search_items", ("POST",)),
            ("/api/tools/save_item", ("POST",)),
            ("/api/tools/get_items_by_category", ("POST",)),
            ("/api/tools/generate_markdown_summary", ("POST",)),
        ]


class TestPlainRoutes:
    """Tests for / and /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"

    def test_index_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "/api/tools/search_items" in response.text
        assert "/api/tools/generate_markdown_summary" in response.text


class TestToolRoutes:
    """Tests for the /api/tools/* endpoints."""

    def test_search_items(self, client):
        response = client.post("/api/tools/search_items", json={"query": "grant", "useWeb": False})

        assert response.status_code == 200
        body = response.json()
        assert body["isError"] is False
        assert body["content"][0]["text"] == 'Found 1 item(s) for "grant".'
        assert body["data"][0]["id"] == "ai_1"

    def test_search_items_without_query_is_rejected(self, client, generative):
        response = client.post("/api/tools/search_items", json={"category": "IT"})

        assert response.status_code == 400
        body = response.json()
        assert body["isError"] is True
        assert body["details"]
        assert generative.search_calls == []

    def test_invalid_json_is_rejected(self, client):
        response = client.post(
            "/api/tools/search_items",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["isError"] is True

    def test_save_item(self, client, repository):
        response = client.post("/api/tools/save_item", json=SAVE_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["id"].startswith("item_")
        assert body["data"]["source"] == "Manual Save"
        assert body["content"][0]["text"] == f'Saved item "Grant A" (ID: {body["data"]["id"]}).'

    def test_save_item_missing_field_is_rejected(self, client, repository, db_dir):
        body = {key: value for key, value in SAVE_BODY.items() if key != "applicationProcess"}

        response = client.post("/api/tools/save_item", json=body)

        assert response.status_code == 400
        assert any(
            detail["loc"] == ["applicationProcess"] for detail in response.json()["details"]
        )
        assert list(db_dir.glob("*.json")) == []

    def test_get_items_by_category_without_body(self, client):
        client.post("/api/tools/save_item", json=SAVE_BODY)

        response = client.post("/api/tools/get_items_by_category")

        assert response.status_code == 200
        assert response.json()["content"][0]["text"] == "Found 1 saved item(s)."

    def test_generate_markdown_summary(self, client):
        client.post("/api/tools/save_item", json=SAVE_BODY)

        response = client.post(
            "/api/tools/generate_markdown_summary",
            json={"title": "Grants", "includeConclusion": False},
        )

        assert response.status_code == 200
        assert response.json()["data"] == "# Grants\n\nbody"

    def test_summary_failure_returns_500(self, client, generative):
        client.post("/api/tools/save_item", json=SAVE_BODY)
        generative.summary_error = LLMError("down")

        response = client.post("/api/tools/generate_markdown_summary", json={"title": "Grants"})

        assert response.status_code == 500
        assert response.json()["error"] == "down"

    def test_missing_context_returns_500(self):
        _, routes = capture_routes()
        client = TestClient(Starlette(routes=routes))

        response = client.post("/api/tools/search_items", json={"query": "grant"})

        assert response.status_code == 500
        assert response.json()["isError"] is True
