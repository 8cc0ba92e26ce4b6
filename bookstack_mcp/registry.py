"""
Tool and resource catalog shared by the dispatcher.

Domain modules under `tools/` and `resources/` produce catalog entries and add
them here; the registry is filled once per server instance and only read
afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .errors import UnknownResourceError, UnknownToolError
from .uri import UriPattern

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]
ResourceHandler = Callable[[str], Awaitable[Any]]


@dataclass
class CatalogTool:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler
    # Discovery metadata only; never consulted during dispatch.
    category: Optional[str] = None
    examples: List[Dict[str, Any]] = field(default_factory=list)
    usage_patterns: List[str] = field(default_factory=list)
    related_tools: List[str] = field(default_factory=list)
    error_codes: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class CatalogResource:
    uri: str
    name: str
    description: str
    handler: ResourceHandler
    mime_type: str = "application/json"
    pattern: UriPattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.pattern = UriPattern(self.uri)

    @property
    def is_template(self) -> bool:
        return self.pattern.is_template


class Registry:
    """
    In-memory mapping of tool names and resource URI patterns to catalog entries.

    Registering an existing key replaces the entry; iteration follows first
    insertion order.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger
        self._tools: Dict[str, CatalogTool] = {}
        self._resources: Dict[str, CatalogResource] = {}

    def add_tool(self, tool: CatalogTool) -> None:
        if tool.name in self._tools:
            self._logger.debug("Tool '%s' re-registered, replacing previous entry", tool.name)
        self._tools[tool.name] = tool

    def add_resource(self, resource: CatalogResource) -> None:
        if resource.uri in self._resources:
            self._logger.debug("Resource '%s' re-registered, replacing previous entry", resource.uri)
        self._resources[resource.uri] = resource

    def list_tools(self) -> List[CatalogTool]:
        return list(self._tools.values())

    def list_resources(self) -> List[CatalogResource]:
        return list(self._resources.values())

    def get_tool(self, name: str) -> CatalogTool:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool

    def match_resource(self, uri: str) -> CatalogResource:
        """
        Return the first registered resource whose pattern matches `uri`.

        Exact and templated patterns are scanned together in registration
        order, so a template registered earlier shadows a later exact URI.
        """
        for resource in self._resources.values():
            if resource.pattern.matches(uri):
                return resource
        raise UnknownResourceError(uri)

    @property
    def tool_count(self) -> int:
        return len(self._tools)

    @property
    def resource_count(self) -> int:
        return len(self._resources)
