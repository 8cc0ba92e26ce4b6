from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all

logger = logging.getLogger(__name__)


def search_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def search(arguments: Dict[str, Any]) -> Any:
        logger.info(
            "Searching content: %r (page=%s, count=%s)",
            arguments.get("query"),
            arguments.get("page"),
            arguments.get("count"),
        )
        params = validator.validate_params(arguments, "search")
        return await client.search(params)

    return [
        CatalogTool(
            name="bookstack_search",
            description=(
                "Search across all BookStack content. Supports advanced query syntax. Page results "
                "only contain snippets; use bookstack_pages_read with a result ID for the full content."
            ),
            category="search",
            input_schema={
                "type": "object",
                "required": ["query"],
                "properties": {
                    "query": {
                        "type": "string",
                        "minLength": 1,
                        "description": (
                            "Search query. Supports \"exact phrase\", {type:page|book|chapter|shelf}, "
                            "{tag:name=value} and {created_by:me}."
                        ),
                    },
                    "page": {"type": "integer", "minimum": 1, "default": 1, "description": "Results page."},
                    "count": {
                        "type": "integer",
                        "minimum": 1,
                        "maximum": 100,
                        "default": 20,
                        "description": "Results per page.",
                    },
                },
            },
            handler=search,
            examples=[
                {"description": "Search pages for \"API\"", "input": {"query": "API {type:page}"}},
                {"description": "Search by tag", "input": {"query": "{tag:status=active}"}},
            ],
            usage_patterns=[
                "Search for pages with the desired info, then read the page",
                "Use {type:book} to search titles only; this skips page content",
            ],
            related_tools=["bookstack_pages_read", "bookstack_books_list"],
            error_codes=[
                {
                    "code": "VALIDATION_ERROR",
                    "description": "Empty query",
                    "recovery_suggestion": "Provide a search term",
                }
            ],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, search_tools(client, validator))
