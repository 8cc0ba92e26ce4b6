"""Tests for bookstack_mcp.registry module."""

import pytest

from bookstack_mcp.errors import UnknownResourceError, UnknownToolError
from bookstack_mcp.registry import CatalogResource, CatalogTool, Registry


async def _noop(_):
    return None


def make_tool(name, description="tool"):
    return CatalogTool(name=name, description=description, input_schema={"type": "object"}, handler=_noop)


def make_resource(uri, name="resource"):
    return CatalogResource(uri=uri, name=name, description=name, handler=_noop)


def test_add_and_get_tool():
    registry = Registry()
    tool = make_tool("a")
    registry.add_tool(tool)
    assert registry.get_tool("a") is tool
    assert registry.tool_count == 1


def test_later_tool_registration_wins():
    registry = Registry()
    registry.add_tool(make_tool("x", "first"))
    registry.add_tool(make_tool("y"))
    registry.add_tool(make_tool("x", "second"))

    assert registry.tool_count == 2
    assert registry.get_tool("x").description == "second"
    # Overwriting keeps the original position.
    assert [t.name for t in registry.list_tools()] == ["x", "y"]


def test_unknown_tool_raises():
    registry = Registry()
    with pytest.raises(UnknownToolError) as exc_info:
        registry.get_tool("missing")
    assert exc_info.value.name == "missing"
    assert str(exc_info.value) == "Unknown tool: missing"


def test_list_tools_is_a_snapshot():
    registry = Registry()
    registry.add_tool(make_tool("a"))
    snapshot = registry.list_tools()
    registry.add_tool(make_tool("b"))
    assert len(snapshot) == 1


def test_resources_keyed_by_raw_pattern():
    registry = Registry()
    registry.add_resource(make_resource("bookstack://books/{id}"))
    registry.add_resource(make_resource("bookstack://books/{book_id}"))
    assert registry.resource_count == 2

    registry.add_resource(make_resource("bookstack://books/{id}", name="replaced"))
    assert registry.resource_count == 2
    assert registry.list_resources()[0].name == "replaced"


def test_first_registered_pattern_wins():
    registry = Registry()
    registry.add_resource(make_resource("bookstack://books/{id}", name="template"))
    registry.add_resource(make_resource("bookstack://books/5", name="exact"))

    assert registry.match_resource("bookstack://books/5").name == "template"


def test_exact_pattern_registered_first_wins():
    registry = Registry()
    registry.add_resource(make_resource("bookstack://books/5", name="exact"))
    registry.add_resource(make_resource("bookstack://books/{id}", name="template"))

    assert registry.match_resource("bookstack://books/5").name == "exact"
    assert registry.match_resource("bookstack://books/6").name == "template"


def test_unknown_resource_raises():
    registry = Registry()
    registry.add_resource(make_resource("bookstack://books/{id}"))
    with pytest.raises(UnknownResourceError) as exc_info:
        registry.match_resource("bookstack://books/1/2")
    assert exc_info.value.uri == "bookstack://books/1/2"


def test_catalog_resource_compiles_pattern():
    resource = make_resource("bookstack://search/{query}")
    assert resource.is_template
    assert resource.pattern.matches("bookstack://search/api")
    assert not make_resource("bookstack://books").is_template
