"""Tests for bookstack_mcp.dispatcher module."""

import json
import logging
from unittest.mock import AsyncMock

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS

from bookstack_mcp.dispatcher import Dispatcher
from bookstack_mcp.errors import NOT_FOUND, NotFoundError, UnknownResourceError, UnknownToolError, ValidationError
from bookstack_mcp.registry import CatalogResource, CatalogTool, Registry


def build(tools=(), resources=()):
    registry = Registry()
    for tool in tools:
        registry.add_tool(tool)
    for resource in resources:
        registry.add_resource(resource)
    return registry, Dispatcher(registry)


def tool(name, handler, **kwargs):
    return CatalogTool(
        name=name,
        description=f"{name} tool",
        input_schema={"type": "object", "properties": {}},
        handler=handler,
        **kwargs,
    )


def resource(uri, handler, mime_type="application/json"):
    return CatalogResource(uri=uri, name=uri, description="test", handler=handler, mime_type=mime_type)


def test_list_tools_exposes_only_protocol_fields():
    _, dispatcher = build(
        tools=[tool("a", AsyncMock(), category="books", examples=[{"input": {}}]), tool("b", AsyncMock())]
    )
    result = dispatcher.list_tools()
    assert result == {
        "tools": [
            {"name": "a", "description": "a tool", "inputSchema": {"type": "object", "properties": {}}},
            {"name": "b", "description": "b tool", "inputSchema": {"type": "object", "properties": {}}},
        ]
    }


async def test_call_tool_wraps_result_as_indented_json():
    handler = AsyncMock(return_value={"id": 1, "name": "Guide"})
    _, dispatcher = build(tools=[tool("read", handler)])

    result = await dispatcher.call_tool("read", {"id": 1})

    handler.assert_awaited_once_with({"id": 1})
    text = result["content"][0]["text"]
    assert result["content"][0]["type"] == "text"
    assert text == '{\n  "id": 1,\n  "name": "Guide"\n}'
    assert json.loads(text) == {"id": 1, "name": "Guide"}


async def test_call_tool_serializes_string_results_as_json():
    _, dispatcher = build(tools=[tool("export", AsyncMock(return_value="# Title"))])
    result = await dispatcher.call_tool("export", {})
    assert result["content"][0]["text"] == '"# Title"'


async def test_call_tool_defaults_arguments_to_empty_dict():
    handler = AsyncMock(return_value=[])
    _, dispatcher = build(tools=[tool("list", handler)])
    await dispatcher.call_tool("list")
    handler.assert_awaited_once_with({})


async def test_unknown_tool_raises_without_invoking_anything():
    handler = AsyncMock()
    _, dispatcher = build(tools=[tool("known", handler)])
    with pytest.raises(UnknownToolError):
        await dispatcher.call_tool("nope", {})
    handler.assert_not_awaited()


async def test_handler_error_is_logged_and_translated(caplog):
    handler = AsyncMock(side_effect=ValidationError("'id' must be a positive integer"))
    _, dispatcher = build(tools=[tool("bad", handler)])

    with caplog.at_level(logging.ERROR, logger="bookstack_mcp.dispatcher"):
        with pytest.raises(McpError) as exc_info:
            await dispatcher.call_tool("bad", {"id": -1})

    assert exc_info.value.error.code == INVALID_PARAMS
    assert "positive integer" in exc_info.value.error.message
    assert any(r.exc_info for r in caplog.records)


async def test_unexpected_error_becomes_internal_error():
    _, dispatcher = build(tools=[tool("boom", AsyncMock(side_effect=RuntimeError("kaput")))])
    with pytest.raises(McpError) as exc_info:
        await dispatcher.call_tool("boom")
    assert exc_info.value.error.code == INTERNAL_ERROR
    assert "kaput" in exc_info.value.error.message


async def test_dispatcher_keeps_serving_after_failure():
    failing = AsyncMock(side_effect=RuntimeError("first call fails"))
    working = AsyncMock(return_value={"ok": True})
    registry, dispatcher = build(tools=[tool("fail", failing), tool("work", working)])

    with pytest.raises(McpError):
        await dispatcher.call_tool("fail")

    result = await dispatcher.call_tool("work")
    assert json.loads(result["content"][0]["text"]) == {"ok": True}
    assert registry.tool_count == 2


def test_list_resources_reports_every_pattern():
    _, dispatcher = build(
        resources=[
            resource("bookstack://books", AsyncMock()),
            resource("bookstack://books/{id}", AsyncMock()),
        ]
    )
    result = dispatcher.list_resources()
    assert [r["uri"] for r in result["resources"]] == ["bookstack://books", "bookstack://books/{id}"]
    assert result["resources"][0]["mimeType"] == "application/json"


def test_list_resource_templates_only_includes_templates():
    _, dispatcher = build(
        resources=[
            resource("bookstack://books", AsyncMock()),
            resource("bookstack://books/{id}", AsyncMock()),
        ]
    )
    templates = dispatcher.list_resource_templates()["resourceTemplates"]
    assert [t["uriTemplate"] for t in templates] == ["bookstack://books/{id}"]


async def test_read_resource_passes_strings_through():
    _, dispatcher = build(resources=[resource("bookstack://hello", AsyncMock(return_value="hello"), "text/plain")])
    result = await dispatcher.read_resource("bookstack://hello")
    assert result == {"contents": [{"uri": "bookstack://hello", "mimeType": "text/plain", "text": "hello"}]}


async def test_read_resource_indents_objects():
    _, dispatcher = build(resources=[resource("bookstack://x", AsyncMock(return_value={"x": 1}))])
    result = await dispatcher.read_resource("bookstack://x")
    assert result["contents"][0]["text"] == '{\n  "x": 1\n}'


async def test_read_resource_hands_concrete_uri_to_handler():
    handler = AsyncMock(return_value={})
    _, dispatcher = build(resources=[resource("bookstack://books/{id}", handler)])
    result = await dispatcher.read_resource("bookstack://books/12")
    handler.assert_awaited_once_with("bookstack://books/12")
    assert result["contents"][0]["uri"] == "bookstack://books/12"


async def test_read_resource_uses_first_registered_match():
    template = AsyncMock(return_value="template")
    exact = AsyncMock(return_value="exact")
    _, dispatcher = build(
        resources=[resource("bookstack://books/{id}", template), resource("bookstack://books/5", exact)]
    )
    result = await dispatcher.read_resource("bookstack://books/5")
    assert result["contents"][0]["text"] == "template"
    exact.assert_not_awaited()


async def test_read_unknown_resource_raises():
    _, dispatcher = build(resources=[resource("bookstack://books", AsyncMock())])
    with pytest.raises(UnknownResourceError):
        await dispatcher.read_resource("bookstack://nothing")


async def test_resource_handler_error_is_translated():
    handler = AsyncMock(side_effect=NotFoundError("Book not found", status_code=404))
    _, dispatcher = build(resources=[resource("bookstack://books/{id}", handler)])
    with pytest.raises(McpError) as exc_info:
        await dispatcher.read_resource("bookstack://books/99")
    assert exc_info.value.error.code == NOT_FOUND
    assert exc_info.value.error.data == {"type": "NOT_FOUND", "status_code": 404}
