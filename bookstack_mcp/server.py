from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx
from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from .client import BookStackClient
from .config import Settings
from .dispatcher import Dispatcher
from .errors import BookStackMCPError, ErrorHandler
from .health import HealthAggregator
from .registry import Registry
from .resources import books, chapters, pages, search, shelves, users
from .tools import (
    attachment_tools,
    audit_tools,
    book_tools,
    chapter_tools,
    image_tools,
    page_tools,
    permission_tools,
    recyclebin_tools,
    role_tools,
    search_tools,
    server_info_tools,
    shelf_tools,
    system_tools,
    user_tools,
)
from .validation import ValidationHandler

logger = logging.getLogger(__name__)


def build_registry(
    settings: Settings,
    client: BookStackClient,
    validator: ValidationHandler,
    log: Optional[logging.Logger] = None,
) -> Registry:
    """
    Populate a registry from every tool and resource factory.

    Factories run in a fixed order; on a name or URI collision the later
    entry wins.
    """
    registry = Registry(log)

    # Register tool groups
    book_tools.register_tools(registry, client, validator)
    page_tools.register_tools(registry, client, validator)
    chapter_tools.register_tools(registry, client, validator)
    shelf_tools.register_tools(registry, client, validator)
    user_tools.register_tools(registry, client, validator)
    role_tools.register_tools(registry, client, validator)
    attachment_tools.register_tools(registry, client, validator)
    image_tools.register_tools(registry, client, validator)
    search_tools.register_tools(registry, client, validator)
    recyclebin_tools.register_tools(registry, client, validator)
    permission_tools.register_tools(registry, client, validator)
    audit_tools.register_tools(registry, client, validator)
    system_tools.register_tools(registry, client, validator)
    server_info_tools.register_tools(registry, settings)

    # Register resource groups
    books.register_resources(registry, client)
    pages.register_resources(registry, client)
    chapters.register_resources(registry, client)
    shelves.register_resources(registry, client)
    users.register_resources(registry, client)
    search.register_resources(registry, client)

    return registry


class BookStackServer:
    """
    One fully wired server instance.

    Holds the API client, validator, registry, dispatcher and health
    aggregator, plus the low-level MCP `Server` whose handlers delegate to the
    dispatcher. Stdio mode builds one per process; HTTP mode builds one per
    request and calls `shutdown()` afterwards.
    """

    def __init__(
        self,
        settings: Settings,
        log: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._logger = log or logger

        self.error_handler = ErrorHandler(log)
        self.validator = ValidationHandler(
            enabled=settings.validation_enabled,
            strict=settings.validation_strict,
        )
        self.client = BookStackClient(settings, log=log, transport=transport)
        self.registry = build_registry(settings, self.client, self.validator, log)
        self.dispatcher = Dispatcher(self.registry, self.error_handler, log)
        self.health = HealthAggregator(self.client.health_check, self.registry, log)
        self.server = self._create_mcp_server()

        self._logger.info(
            "BookStack MCP server initialized (%d tools, %d resources, base_url=%s)",
            self.registry.tool_count,
            self.registry.resource_count,
            settings.base_url,
        )

    def _create_mcp_server(self) -> Server:
        server = Server(self.settings.server_name, version=self.settings.server_version)
        dispatcher = self.dispatcher
        error_handler = self.error_handler

        @server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return [types.Tool(**tool) for tool in dispatcher.list_tools()["tools"]]

        # Arguments are checked by ValidationHandler inside each tool.
        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
            try:
                result = await dispatcher.call_tool(name, arguments)
            except BookStackMCPError as e:
                raise error_handler.handle_error(e) from e
            return [types.TextContent(type="text", text=c["text"]) for c in result["content"]]

        # AnyUrl cannot hold `{...}`, so templated patterns are only listed
        # as resource templates.
        @server.list_resources()
        async def list_resources() -> List[types.Resource]:
            return [
                types.Resource(
                    uri=AnyUrl(r["uri"]),
                    name=r["name"],
                    description=r["description"],
                    mimeType=r["mimeType"],
                )
                for r in dispatcher.list_resources()["resources"]
                if "{" not in r["uri"]
            ]

        @server.list_resource_templates()
        async def list_resource_templates() -> List[types.ResourceTemplate]:
            return [
                types.ResourceTemplate(**t)
                for t in dispatcher.list_resource_templates()["resourceTemplates"]
            ]

        @server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            try:
                result = await dispatcher.read_resource(str(uri))
            except BookStackMCPError as e:
                raise error_handler.handle_error(e) from e
            return [
                ReadResourceContents(content=c["text"], mime_type=c["mimeType"])
                for c in result["contents"]
            ]

        return server

    async def get_health(self) -> Dict[str, Any]:
        return await self.health.check()

    async def shutdown(self) -> None:
        """Release the HTTP client. Never raises."""
        try:
            await self.client.aclose()
        except Exception:
            self._logger.warning("Error while closing BookStack client", exc_info=True)
