"""
Meta tools describing this server's own catalog.

These read the registry at call time, so the counts they report include
every tool registered after them as well as themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..errors import UnknownToolError, ValidationError
from ..registry import CatalogTool, Registry
from . import add_all

logger = logging.getLogger(__name__)


def server_info_tools(registry: Registry, settings: Settings) -> List[CatalogTool]:
    async def server_info(arguments: Dict[str, Any]) -> Any:
        categories: Dict[str, List[str]] = {}
        for tool in registry.list_tools():
            categories.setdefault(tool.category or "other", []).append(tool.name)
        return {
            "name": settings.server_name,
            "version": settings.server_version,
            "bookstack_url": settings.base_url,
            "tool_count": registry.tool_count,
            "resource_count": registry.resource_count,
            "tools_by_category": categories,
            "resources": [resource.uri for resource in registry.list_resources()],
        }

    async def tool_help(arguments: Dict[str, Any]) -> Any:
        name: Optional[str] = arguments.get("name")
        if not name:
            raise ValidationError("'name' is required")
        try:
            tool = registry.get_tool(name)
        except UnknownToolError:
            raise ValidationError(f"Unknown tool name '{name}'") from None
        return {
            "name": tool.name,
            "description": tool.description,
            "category": tool.category,
            "input_schema": tool.input_schema,
            "examples": tool.examples,
            "usage_patterns": tool.usage_patterns,
            "related_tools": tool.related_tools,
            "error_codes": tool.error_codes,
        }

    return [
        CatalogTool(
            name="bookstack_server_info",
            description="Describe this MCP server: version, configured BookStack URL and available tools.",
            category="meta",
            input_schema={"type": "object", "properties": {}},
            handler=server_info,
            usage_patterns=["Call first to discover what this server can do"],
            related_tools=["bookstack_tool_help"],
        ),
        CatalogTool(
            name="bookstack_tool_help",
            description="Get examples, usage patterns, related tools and error codes for one tool.",
            category="meta",
            input_schema={
                "type": "object",
                "required": ["name"],
                "properties": {"name": {"type": "string", "description": "Tool name, e.g. bookstack_pages_create."}},
            },
            handler=tool_help,
            examples=[{"description": "Help for page creation", "input": {"name": "bookstack_pages_create"}}],
            related_tools=["bookstack_server_info"],
        ),
    ]


def register_tools(registry: Registry, settings: Settings) -> None:
    add_all(registry, server_info_tools(registry, settings))
