from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from .errors import ErrorHandler
from .registry import Registry

logger = logging.getLogger(__name__)


def _to_text(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


class Dispatcher:
    """
    Protocol-facing operations over a populated `Registry`.

    Results use the MCP envelope shapes as plain dicts so every transport can
    reuse them. Handler failures are logged and re-raised as `McpError`;
    unknown names and URIs raise `UnknownToolError` / `UnknownResourceError`.
    """

    def __init__(
        self,
        registry: Registry,
        error_handler: Optional[ErrorHandler] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._registry = registry
        self._logger = log or logger
        self._error_handler = error_handler or ErrorHandler(self._logger)

    def list_tools(self) -> Dict[str, Any]:
        tools = [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema,
            }
            for tool in self._registry.list_tools()
        ]
        self._logger.debug("Listed %d tools", len(tools))
        return {"tools": tools}

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self._logger.info("Tool called: %s", name, extra={"arguments": arguments})
        tool = self._registry.get_tool(name)

        try:
            result = await tool.handler(arguments or {})
        except Exception as e:
            self._logger.error("Tool %s failed: %s", name, e, exc_info=True)
            raise self._error_handler.handle_error(e) from e

        self._logger.info("Tool %s completed successfully", name)
        return {"content": [{"type": "text", "text": _to_text(result)}]}

    def list_resources(self) -> Dict[str, Any]:
        resources = [
            {
                "uri": resource.uri,
                "name": resource.name,
                "description": resource.description,
                "mimeType": resource.mime_type,
            }
            for resource in self._registry.list_resources()
        ]
        self._logger.debug("Listed %d resources", len(resources))
        return {"resources": resources}

    def list_resource_templates(self) -> Dict[str, Any]:
        templates = [
            {
                "uriTemplate": resource.uri,
                "name": resource.name,
                "description": resource.description,
                "mimeType": resource.mime_type,
            }
            for resource in self._registry.list_resources()
            if resource.is_template
        ]
        return {"resourceTemplates": templates}

    async def read_resource(self, uri: str) -> Dict[str, Any]:
        self._logger.info("Resource requested: %s", uri)
        resource = self._registry.match_resource(uri)

        try:
            result = await resource.handler(uri)
        except Exception as e:
            self._logger.error("Resource %s failed: %s", uri, e, exc_info=True)
            raise self._error_handler.handle_error(e) from e

        self._logger.info("Resource %s read successfully", uri)
        text = result if isinstance(result, str) else _to_text(result)
        return {"contents": [{"uri": uri, "mimeType": resource.mime_type, "text": text}]}
