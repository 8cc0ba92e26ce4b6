"""
Tool registration utilities.

Each module in this package exposes a `register_tools(registry, ...)` function
that adds its catalog entries to the central registry used by the MCP server.
"""

from __future__ import annotations

from typing import Iterable

from ..registry import CatalogTool, Registry


def add_all(registry: Registry, tools: Iterable[CatalogTool]) -> None:
    for tool in tools:
        registry.add_tool(tool)
