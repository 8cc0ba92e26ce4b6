from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, list_schema, not_found_error

logger = logging.getLogger(__name__)


def recyclebin_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_deleted(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing recycle bin: %s", arguments)
        params = validator.validate_params(arguments, "recycleBinList")
        return await client.list_recycle_bin(params)

    async def restore(arguments: Dict[str, Any]) -> Any:
        deletion_id = validator.validate_id(arguments.get("id"))
        logger.info("Restoring deletion %d", deletion_id)
        result = await client.restore_from_recycle_bin(deletion_id)
        return {
            "success": True,
            "message": f"Item {deletion_id} restored successfully",
            "result": result,
        }

    async def delete_permanently(arguments: Dict[str, Any]) -> Any:
        deletion_id = validator.validate_id(arguments.get("id"))
        logger.warning("Permanently deleting %d", deletion_id)
        result = await client.permanently_delete(deletion_id)
        return {
            "success": True,
            "message": f"Item {deletion_id} permanently deleted",
            "result": result,
        }

    deletion_schema: Dict[str, Any] = {
        "type": "object",
        "required": ["id"],
        "properties": {
            "id": {
                "type": "integer",
                "minimum": 1,
                "description": "The deletion_id from bookstack_recyclebin_list, not the entity ID.",
            }
        },
    }

    return [
        CatalogTool(
            name="bookstack_recyclebin_list",
            description="List deleted items waiting in the recycle bin.",
            category="recyclebin",
            input_schema=list_schema("deletions", ["created_at"], "created_at"),
            handler=list_deleted,
            related_tools=["bookstack_recyclebin_restore", "bookstack_recyclebin_delete_permanently"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_recyclebin_restore",
            description="Restore a deleted item, and its children, from the recycle bin.",
            category="recyclebin",
            input_schema=deletion_schema,
            handler=restore,
            examples=[{"description": "Restore a deleted book", "input": {"id": 3}}],
            usage_patterns=["Find the deletion_id with bookstack_recyclebin_list first"],
            related_tools=["bookstack_recyclebin_list"],
            error_codes=[not_found_error("deletion")],
        ),
        CatalogTool(
            name="bookstack_recyclebin_delete_permanently",
            description="Permanently delete an item from the recycle bin. This cannot be undone.",
            category="recyclebin",
            input_schema=deletion_schema,
            handler=delete_permanently,
            related_tools=["bookstack_recyclebin_list"],
            error_codes=[not_found_error("deletion")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, recyclebin_tools(client, validator))
