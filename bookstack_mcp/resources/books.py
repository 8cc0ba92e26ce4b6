from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_id

logger = logging.getLogger(__name__)


def book_resources(client: BookStackClient) -> List[CatalogResource]:
    async def all_books(uri: str) -> Any:
        logger.debug("Reading resource %s", uri)
        return await client.list_books({"count": 500})

    async def book(uri: str) -> Any:
        return await client.get_book(extract_id(uri, "books"))

    return [
        CatalogResource(
            uri="bookstack://books",
            name="All Books",
            description="Every book visible to the configured token",
            handler=all_books,
        ),
        CatalogResource(
            uri="bookstack://books/{id}",
            name="Book",
            description="A single book with its chapters and pages",
            handler=book,
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, book_resources(client))
