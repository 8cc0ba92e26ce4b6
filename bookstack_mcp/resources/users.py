from __future__ import annotations

import logging
from typing import Any, List

from ..client import BookStackClient
from ..registry import CatalogResource, Registry
from . import add_all
from .uri_utils import extract_id

logger = logging.getLogger(__name__)


def user_resources(client: BookStackClient) -> List[CatalogResource]:
    async def all_users(uri: str) -> Any:
        logger.debug("Reading resource %s", uri)
        return await client.list_users({"count": 500})

    async def user(uri: str) -> Any:
        return await client.get_user(extract_id(uri, "users"))

    return [
        CatalogResource(
            uri="bookstack://users",
            name="All Users",
            description="Every user account (requires user management permission)",
            handler=all_users,
        ),
        CatalogResource(
            uri="bookstack://users/{id}",
            name="User",
            description="A single user with assigned roles",
            handler=user,
        ),
    ]


def register_resources(registry: Registry, client: BookStackClient) -> None:
    add_all(registry, user_resources(client))
