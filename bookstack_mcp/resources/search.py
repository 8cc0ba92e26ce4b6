from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_path_parameter

logger = logging.getLogger(__name__)


def search_resources(client: BookStackClient) -> List[CatalogResource]:
    async def search(uri: str) -> Any:
        query = extract_path_parameter(uri, ["search"], "query")
        logger.debug("Search resource query %r", query)
        return await client.search({"query": query, "page": 1, "count": 20})

    return [
        CatalogResource(
            uri="bookstack://search/{query}",
            name="Search Results",
            description="First page of results for a URL-encoded search query",
            handler=search,
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, search_resources(client))
