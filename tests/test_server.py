"""Tests for bookstack_mcp.server module."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from mcp import types
from pydantic import AnyUrl

from bookstack_mcp.server import BookStackServer, build_registry


def bookstack_api(request):
    if request.url.path == "/api/books/1":
        return httpx.Response(200, json={"id": 1, "name": "Handbook"})
    if request.url.path == "/api/books":
        return httpx.Response(200, json={"data": [], "total": 0})
    return httpx.Response(404, json={"error": {"message": "Not found"}})


@pytest.fixture
def app(settings):
    return BookStackServer(settings, transport=httpx.MockTransport(bookstack_api))


def test_build_registry_populates_every_factory(settings, fake_client, validator):
    registry = build_registry(settings, fake_client, validator)

    names = [t.name for t in registry.list_tools()]
    assert registry.tool_count == 53
    assert len(set(names)) == len(names)
    assert names[0] == "bookstack_books_list"
    assert names[-2:] == ["bookstack_server_info", "bookstack_tool_help"]
    assert registry.resource_count == 12
    assert registry.list_resources()[0].uri == "bookstack://books"


def test_build_registry_is_pure(settings, fake_client, validator):
    build_registry(settings, fake_client, validator)
    assert fake_client.mock_calls == []


async def test_server_info_reports_full_catalog(app):
    result = await app.dispatcher.call_tool("bookstack_server_info")
    info = json.loads(result["content"][0]["text"])
    assert info["tool_count"] == 53
    assert info["resource_count"] == 12


async def test_get_health(app):
    report = await app.get_health()
    assert report["status"] == "healthy"
    await app.shutdown()


async def test_get_health_unhealthy_when_api_down(settings):
    def down(request):
        raise httpx.ConnectError("refused", request=request)

    app = BookStackServer(settings, transport=httpx.MockTransport(down))
    report = await app.get_health()
    assert report["status"] == "unhealthy"
    await app.shutdown()


async def test_shutdown_never_raises(app):
    app.client.aclose = AsyncMock(side_effect=RuntimeError("already closed"))
    await app.shutdown()
    app.client.aclose.assert_awaited_once()


async def test_mcp_list_tools(app):
    handler = app.server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))
    tools = result.root.tools
    assert len(tools) == 53
    assert tools[0].name == "bookstack_books_list"
    assert tools[0].inputSchema["type"] == "object"


async def test_mcp_call_tool(app):
    handler = app.server.request_handlers[types.CallToolRequest]
    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="bookstack_books_read", arguments={"id": 1}),
        )
    )
    assert not result.root.isError
    assert json.loads(result.root.content[0].text) == {"id": 1, "name": "Handbook"}


async def test_mcp_call_unknown_tool_is_an_error_result(app):
    handler = app.server.request_handlers[types.CallToolRequest]
    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="bookstack_nope", arguments={}),
        )
    )
    assert result.root.isError
    assert "Unknown tool: bookstack_nope" in result.root.content[0].text


async def test_mcp_resources_split_exact_and_templates(app):
    resources = await app.server.request_handlers[types.ListResourcesRequest](
        types.ListResourcesRequest(method="resources/list")
    )
    templates = await app.server.request_handlers[types.ListResourceTemplatesRequest](
        types.ListResourceTemplatesRequest(method="resources/templates/list")
    )
    exact = [str(r.uri) for r in resources.root.resources]
    templated = [t.uriTemplate for t in templates.root.resourceTemplates]

    assert "bookstack://books" in exact
    assert all("{" not in uri for uri in exact)
    assert "bookstack://books/{id}" in templated
    assert len(exact) + len(templated) == 12


async def test_mcp_read_resource(app):
    handler = app.server.request_handlers[types.ReadResourceRequest]
    result = await handler(
        types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri=AnyUrl("bookstack://books/1")),
        )
    )
    content = result.root.contents[0]
    assert content.mimeType == "application/json"
    assert json.loads(content.text) == {"id": 1, "name": "Handbook"}
