from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import CONTENT_TYPES, not_found_error

logger = logging.getLogger(__name__)


def permission_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    """
    Content-level permission overrides for books, chapters, pages and shelves.
    """

    def target(arguments: Dict[str, Any]) -> Tuple[str, int]:
        content_type = validator.validate_choice(arguments.get("content_type"), CONTENT_TYPES, "content_type")
        content_id = validator.validate_id(arguments.get("content_id"), "content_id")
        return content_type, content_id

    async def read_permissions(arguments: Dict[str, Any]) -> Any:
        content_type, content_id = target(arguments)
        logger.debug("Reading permissions for %s %d", content_type, content_id)
        return await client.get_content_permissions(content_type, content_id)

    async def update_permissions(arguments: Dict[str, Any]) -> Any:
        content_type, content_id = target(arguments)
        fields = {k: v for k, v in arguments.items() if k not in ("content_type", "content_id")}
        logger.info("Updating permissions for %s %d", content_type, content_id)
        params = validator.validate_params(fields, "contentPermissionsUpdate")
        return await client.update_content_permissions(content_type, content_id, params)

    target_fields: Dict[str, Any] = {
        "content_type": {"type": "string", "enum": CONTENT_TYPES, "description": "Type of the content item."},
        "content_id": {"type": "integer", "minimum": 1, "description": "ID of the content item."},
    }
    flag = {"type": "boolean"}
    update_fields = dict(target_fields)
    update_fields.update(
        {
            "owner_id": {"type": "integer", "description": "Transfer ownership to this user ID."},
            "fallback_permissions": {
                "type": "object",
                "properties": {"inheriting": flag, "restricted": flag},
                "description": "Permissions applied to everyone not listed explicitly.",
            },
            "permissions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "role_id": {"type": "integer"},
                        "user_id": {"type": "integer"},
                        "view": flag,
                        "create": flag,
                        "update": flag,
                        "delete": flag,
                    },
                },
                "description": "Per-role permission overrides. Replaces the existing list.",
            },
        }
    )

    return [
        CatalogTool(
            name="bookstack_permissions_read",
            description="Read the permission overrides set on a book, chapter, page or shelf.",
            category="permissions",
            input_schema={
                "type": "object",
                "required": ["content_type", "content_id"],
                "properties": target_fields,
            },
            handler=read_permissions,
            examples=[{"description": "Permissions of book 5", "input": {"content_type": "book", "content_id": 5}}],
            related_tools=["bookstack_permissions_update", "bookstack_roles_list"],
            error_codes=[not_found_error("content item")],
        ),
        CatalogTool(
            name="bookstack_permissions_update",
            description="Set owner, fallback and per-role permissions on a content item.",
            category="permissions",
            input_schema={
                "type": "object",
                "required": ["content_type", "content_id"],
                "properties": update_fields,
            },
            handler=update_permissions,
            examples=[
                {
                    "description": "Make a page read-only for role 3",
                    "input": {
                        "content_type": "page",
                        "content_id": 12,
                        "permissions": [{"role_id": 3, "view": True, "update": False}],
                    },
                }
            ],
            usage_patterns=["Read the current permissions first; the list you send replaces it"],
            related_tools=["bookstack_permissions_read"],
            error_codes=[not_found_error("content item")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, permission_tools(client, validator))
