from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, id_schema, list_schema, not_found_error

logger = logging.getLogger(__name__)


def attachment_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    """
    Factory for page attachment tools.

    Attachments are either uploaded files (passed base64-encoded in `file`)
    or external links.
    """

    async def list_attachments(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing attachments: %s", arguments)
        params = validator.validate_params(arguments, "attachmentsList")
        return await client.list_attachments(params)

    async def create_attachment(arguments: Dict[str, Any]) -> Any:
        logger.info(
            "Creating %s attachment %r on page %s",
            "file" if arguments.get("file") else "link",
            arguments.get("name"),
            arguments.get("uploaded_to"),
        )
        params = validator.validate_params(arguments, "attachmentCreate")
        return await client.create_attachment(params)

    async def read_attachment(arguments: Dict[str, Any]) -> Any:
        attachment_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading attachment %d", attachment_id)
        return await client.get_attachment(attachment_id)

    async def update_attachment(arguments: Dict[str, Any]) -> Any:
        attachment_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating attachment %d (fields: %s)", attachment_id, sorted(fields))
        params = validator.validate_params(fields, "attachmentUpdate")
        return await client.update_attachment(attachment_id, params)

    async def delete_attachment(arguments: Dict[str, Any]) -> Any:
        attachment_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting attachment %d", attachment_id)
        await client.delete_attachment(attachment_id)
        return {"success": True, "message": f"Attachment {attachment_id} deleted successfully"}

    attachment_fields: Dict[str, Any] = {
        "uploaded_to": {"type": "integer", "minimum": 1, "description": "ID of the page to attach to."},
        "name": {"type": "string", "maxLength": 255, "description": "Attachment name."},
        "file": {"type": "string", "description": "Base64-encoded file content. Use this OR link."},
        "link": {"type": "string", "format": "uri", "description": "External URL. Use this OR file."},
    }

    return [
        CatalogTool(
            name="bookstack_attachments_list",
            description="List attachments across all pages with pagination and filtering.",
            category="attachments",
            input_schema=list_schema(
                "attachments",
                ["name", "created_at", "updated_at"],
                "name",
                {
                    "name": {"type": "string", "description": "Filter by attachment name."},
                    "uploaded_to": {"type": "integer", "description": "Only attachments on this page."},
                    "extension": {"type": "string", "description": "Filter by file extension."},
                },
            ),
            handler=list_attachments,
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_attachments_create",
            description="Attach a file or an external link to a page.",
            category="attachments",
            input_schema={
                "type": "object",
                "required": ["uploaded_to", "name"],
                "properties": attachment_fields,
            },
            handler=create_attachment,
            examples=[
                {
                    "description": "Link to a design doc",
                    "input": {"uploaded_to": 12, "name": "Design", "link": "https://example.com/design"},
                }
            ],
            related_tools=["bookstack_pages_read"],
            error_codes=[
                {
                    "code": "VALIDATION_ERROR",
                    "description": "Neither file nor link provided, or file is not valid base64",
                    "recovery_suggestion": "Provide exactly one of file or link",
                }
            ],
        ),
        CatalogTool(
            name="bookstack_attachments_read",
            description="Get an attachment, including file content (base64) or link target.",
            category="attachments",
            input_schema=id_schema("attachment"),
            handler=read_attachment,
            error_codes=[not_found_error("attachment")],
        ),
        CatalogTool(
            name="bookstack_attachments_update",
            description="Rename an attachment, replace its file or link, or move it to another page.",
            category="attachments",
            input_schema=id_schema("attachment", **attachment_fields),
            handler=update_attachment,
            error_codes=[not_found_error("attachment")],
        ),
        CatalogTool(
            name="bookstack_attachments_delete",
            description="Delete an attachment.",
            category="attachments",
            input_schema=id_schema("attachment"),
            handler=delete_attachment,
            error_codes=[not_found_error("attachment")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, attachment_tools(client, validator))
