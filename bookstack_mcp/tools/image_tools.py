from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, id_schema, list_schema, not_found_error

logger = logging.getLogger(__name__)

IMAGE_TYPES = ["gallery", "drawio"]


def image_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_images(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing images: %s", arguments)
        params = validator.validate_params(arguments, "imagesList")
        return await client.list_images(params)

    async def create_image(arguments: Dict[str, Any]) -> Any:
        logger.info("Uploading image %r", arguments.get("name"))
        params = validator.validate_params(arguments, "imageCreate")
        return await client.create_image(params)

    async def read_image(arguments: Dict[str, Any]) -> Any:
        image_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading image %d", image_id)
        return await client.get_image(image_id)

    async def update_image(arguments: Dict[str, Any]) -> Any:
        image_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating image %d (fields: %s)", image_id, sorted(fields))
        params = validator.validate_params(fields, "imageUpdate")
        return await client.update_image(image_id, params)

    async def delete_image(arguments: Dict[str, Any]) -> Any:
        image_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting image %d", image_id)
        await client.delete_image(image_id)
        return {"success": True, "message": f"Image {image_id} deleted successfully"}

    image_fields: Dict[str, Any] = {
        "name": {"type": "string", "maxLength": 255, "description": "Image name."},
        "image": {"type": "string", "description": "Base64-encoded image data."},
        "uploaded_to": {"type": "integer", "description": "ID of the page the image belongs to."},
    }
    create_fields = dict(image_fields)
    create_fields["type"] = {
        "type": "string",
        "enum": IMAGE_TYPES,
        "default": "gallery",
        "description": "Gallery image or draw.io diagram.",
    }

    return [
        CatalogTool(
            name="bookstack_images_list",
            description="List images in the image gallery.",
            category="images",
            input_schema=list_schema(
                "images",
                ["name", "created_at", "updated_at"],
                "created_at",
                {
                    "name": {"type": "string", "description": "Filter by image name."},
                    "type": {"type": "string", "enum": IMAGE_TYPES, "description": "Filter by image type."},
                    "uploaded_to": {"type": "integer", "description": "Only images on this page."},
                },
            ),
            handler=list_images,
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_images_create",
            description="Upload an image to the gallery.",
            category="images",
            input_schema={"type": "object", "required": ["name", "image"], "properties": create_fields},
            handler=create_image,
            usage_patterns=["Reference the returned URL from page HTML or Markdown"],
            related_tools=["bookstack_pages_update"],
        ),
        CatalogTool(
            name="bookstack_images_read",
            description="Get image details including its URL and thumbnails.",
            category="images",
            input_schema=id_schema("image"),
            handler=read_image,
            error_codes=[not_found_error("image")],
        ),
        CatalogTool(
            name="bookstack_images_update",
            description="Rename an image or replace its data.",
            category="images",
            input_schema=id_schema("image", **image_fields),
            handler=update_image,
            error_codes=[not_found_error("image")],
        ),
        CatalogTool(
            name="bookstack_images_delete",
            description="Delete an image from the gallery.",
            category="images",
            input_schema=id_schema("image"),
            handler=delete_image,
            usage_patterns=["Pages still referencing the image will show a broken link"],
            error_codes=[not_found_error("image")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, image_tools(client, validator))
