from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_id

logger = logging.getLogger(__name__)


def chapter_resources(client: BookStackClient) -> List[CatalogResource]:
    async def all_chapters(uri: str) -> Any:
        logger.debug("Reading resource %s", uri)
        return await client.list_chapters({"count": 500})

    async def chapter(uri: str) -> Any:
        return await client.get_chapter(extract_id(uri, "chapters"))

    return [
        CatalogResource(
            uri="bookstack://chapters",
            name="All Chapters",
            description="Every chapter visible to the configured token",
            handler=all_chapters,
        ),
        CatalogResource(
            uri="bookstack://chapters/{id}",
            name="Chapter",
            description="A single chapter with its pages",
            handler=chapter,
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, chapter_resources(client))
