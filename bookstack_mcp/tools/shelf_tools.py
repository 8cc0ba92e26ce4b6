from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import TAGS_SCHEMA, UNAUTHORIZED_ERROR, id_schema, list_schema, not_found_error

logger = logging.getLogger(__name__)


def shelf_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_shelves(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing shelves: %s", arguments)
        params = validator.validate_params(arguments, "shelvesList")
        return await client.list_shelves(params)

    async def create_shelf(arguments: Dict[str, Any]) -> Any:
        logger.info("Creating shelf %r", arguments.get("name"))
        params = validator.validate_params(arguments, "shelfCreate")
        return await client.create_shelf(params)

    async def read_shelf(arguments: Dict[str, Any]) -> Any:
        shelf_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading shelf %d", shelf_id)
        return await client.get_shelf(shelf_id)

    async def update_shelf(arguments: Dict[str, Any]) -> Any:
        shelf_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating shelf %d (fields: %s)", shelf_id, sorted(fields))
        params = validator.validate_params(fields, "shelfUpdate")
        return await client.update_shelf(shelf_id, params)

    async def delete_shelf(arguments: Dict[str, Any]) -> Any:
        shelf_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting shelf %d", shelf_id)
        await client.delete_shelf(shelf_id)
        return {"success": True, "message": f"Shelf {shelf_id} deleted successfully"}

    shelf_fields: Dict[str, Any] = {
        "name": {"type": "string", "maxLength": 255, "description": "Shelf name."},
        "description": {"type": "string", "maxLength": 1900, "description": "Plain-text description."},
        "description_html": {"type": "string", "maxLength": 2000, "description": "HTML description."},
        "tags": TAGS_SCHEMA,
        "books": {
            "type": "array",
            "items": {"type": "integer"},
            "description": "IDs of the books on this shelf, in display order. Replaces the current set.",
        },
    }

    return [
        CatalogTool(
            name="bookstack_shelves_list",
            description="List shelves. Shelves group related books together.",
            category="shelves",
            input_schema=list_schema(
                "shelves",
                ["name", "created_at", "updated_at"],
                "name",
                {
                    "name": {"type": "string", "description": "Filter by shelf name (partial match)."},
                    "created_by": {"type": "integer", "description": "Filter by creator user ID."},
                },
            ),
            handler=list_shelves,
            related_tools=["bookstack_shelves_read"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_shelves_create",
            description="Create a shelf, optionally placing existing books on it.",
            category="shelves",
            input_schema={"type": "object", "required": ["name"], "properties": shelf_fields},
            handler=create_shelf,
            examples=[{"description": "Create a shelf", "input": {"name": "Engineering", "books": [1, 2]}}],
            related_tools=["bookstack_books_list"],
        ),
        CatalogTool(
            name="bookstack_shelves_read",
            description="Get a shelf and the books it holds.",
            category="shelves",
            input_schema=id_schema("shelf"),
            handler=read_shelf,
            error_codes=[not_found_error("shelf")],
        ),
        CatalogTool(
            name="bookstack_shelves_update",
            description="Update a shelf's details or the books on it.",
            category="shelves",
            input_schema=id_schema("shelf", **shelf_fields),
            handler=update_shelf,
            usage_patterns=["Passing books replaces the whole list; read the shelf first to append"],
            error_codes=[not_found_error("shelf")],
        ),
        CatalogTool(
            name="bookstack_shelves_delete",
            description="Delete a shelf. The books on it are not deleted.",
            category="shelves",
            input_schema=id_schema("shelf"),
            handler=delete_shelf,
            error_codes=[not_found_error("shelf")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, shelf_tools(client, validator))
