from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_id

logger = logging.getLogger(__name__)


def shelf_resources(client: BookStackClient) -> List[CatalogResource]:
    async def all_shelves(uri: str) -> Any:
        logger.debug("Reading resource %s", uri)
        return await client.list_shelves({"count": 500})

    async def shelf(uri: str) -> Any:
        return await client.get_shelf(extract_id(uri, "shelves"))

    return [
        CatalogResource(
            uri="bookstack://shelves",
            name="All Shelves",
            description="Every shelf visible to the configured token",
            handler=all_shelves,
        ),
        CatalogResource(
            uri="bookstack://shelves/{id}",
            name="Shelf",
            description="A single shelf with its books",
            handler=shelf,
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, shelf_resources(client))
