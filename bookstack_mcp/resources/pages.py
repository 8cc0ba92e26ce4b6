from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_id

logger = logging.getLogger(__name__)


def page_resources(client: BookStackClient) -> List[CatalogResource]:
    """
    Page resources. The markdown variant returns the export text as-is so
    clients get a plain document rather than a JSON string.
    """

    async def all_pages(uri: str) -> Any:
        logger.debug("Reading resource %s", uri)
        return await client.list_pages({"count": 500})

    async def page(uri: str) -> Any:
        return await client.get_page(extract_id(uri, "pages"))

    async def page_markdown(uri: str) -> Any:
        return await client.export_page(extract_id(uri, "pages"), "markdown")

    return [
        CatalogResource(
            uri="bookstack://pages",
            name="All Pages",
            description="Every page visible to the configured token",
            handler=all_pages,
        ),
        CatalogResource(
            uri="bookstack://pages/{id}",
            name="Page",
            description="A single page including HTML and Markdown content",
            handler=page,
        ),
        CatalogResource(
            uri="bookstack://pages/{id}/markdown",
            name="Page Markdown",
            description="A single page exported as Markdown",
            handler=page_markdown,
            mime_type="text/markdown",
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, page_resources(client))
