from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import (
    EXPORT_FORMATS,
    TAGS_SCHEMA,
    UNAUTHORIZED_ERROR,
    export_schema,
    id_schema,
    list_schema,
    not_found_error,
)

logger = logging.getLogger(__name__)


def page_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_pages(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing pages: %s", arguments)
        params = validator.validate_params(arguments, "pagesList")
        return await client.list_pages(params)

    async def create_page(arguments: Dict[str, Any]) -> Any:
        logger.info(
            "Creating page %r (book_id=%s, chapter_id=%s)",
            arguments.get("name"),
            arguments.get("book_id"),
            arguments.get("chapter_id"),
        )
        params = validator.validate_params(arguments, "pageCreate")
        return await client.create_page(params)

    async def read_page(arguments: Dict[str, Any]) -> Any:
        page_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading page %d", page_id)
        return await client.get_page(page_id)

    async def update_page(arguments: Dict[str, Any]) -> Any:
        page_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating page %d (fields: %s)", page_id, sorted(fields))
        params = validator.validate_params(fields, "pageUpdate")
        return await client.update_page(page_id, params)

    async def delete_page(arguments: Dict[str, Any]) -> Any:
        page_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting page %d", page_id)
        await client.delete_page(page_id)
        return {"success": True, "message": f"Page {page_id} deleted successfully"}

    async def export_page(arguments: Dict[str, Any]) -> Any:
        page_id = validator.validate_id(arguments.get("id"))
        export_format = validator.validate_choice(arguments.get("format"), EXPORT_FORMATS, "format")
        logger.info("Exporting page %d as %s", page_id, export_format)
        return await client.export_page(page_id, export_format)

    page_fields: Dict[str, Any] = {
        "book_id": {
            "type": "integer",
            "description": "ID of the parent book (required if chapter_id is not provided).",
        },
        "chapter_id": {
            "type": "integer",
            "description": "ID of the parent chapter (required if book_id is not provided).",
        },
        "name": {"type": "string", "maxLength": 255, "description": "Title of the page."},
        "html": {
            "type": "string",
            "description": "Page content in HTML. Use this OR markdown, not both.",
        },
        "markdown": {
            "type": "string",
            "description": "Page content in Markdown. Use this OR html, not both.",
        },
        "tags": TAGS_SCHEMA,
        "priority": {
            "type": "integer",
            "description": "Sort position relative to sibling pages.",
        },
    }

    return [
        CatalogTool(
            name="bookstack_pages_list",
            description="List pages with pagination and filtering. Pages hold the actual content.",
            category="pages",
            input_schema=list_schema(
                "pages",
                ["name", "created_at", "updated_at", "priority"],
                "name",
                {
                    "name": {"type": "string", "description": "Filter by page name (partial match)."},
                    "book_id": {"type": "integer", "description": "Only pages in this book."},
                    "chapter_id": {"type": "integer", "description": "Only pages in this chapter."},
                    "draft": {"type": "boolean", "description": "Filter by draft status."},
                    "template": {"type": "boolean", "description": "Filter by template status."},
                },
            ),
            handler=list_pages,
            examples=[{"description": "Pages in book 5", "input": {"filter": {"book_id": 5}}}],
            related_tools=["bookstack_pages_read", "bookstack_search"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_pages_create",
            description=(
                "Create a new page. Provide content as HTML or Markdown and a parent book or "
                "chapter."
            ),
            category="pages",
            input_schema={"type": "object", "required": ["name"], "properties": page_fields},
            handler=create_page,
            examples=[
                {
                    "description": "Create a markdown page in a book",
                    "input": {
                        "book_id": 5,
                        "name": "Installation Guide",
                        "markdown": "# Installation\n\nRun `make install` to get started.",
                    },
                }
            ],
            usage_patterns=[
                "Prefer Markdown for generated content",
                "Make sure the parent book or chapter exists before calling",
            ],
            related_tools=["bookstack_books_read", "bookstack_chapters_read", "bookstack_pages_update"],
            error_codes=[
                {
                    "code": "VALIDATION_ERROR",
                    "description": "Missing content or parent ID",
                    "recovery_suggestion": "Provide html/markdown AND book_id/chapter_id",
                }
            ],
        ),
        CatalogTool(
            name="bookstack_pages_read",
            description="Get a page including its full HTML and Markdown content.",
            category="pages",
            input_schema=id_schema("page"),
            handler=read_page,
            related_tools=["bookstack_pages_update", "bookstack_pages_export"],
            error_codes=[not_found_error("page")],
        ),
        CatalogTool(
            name="bookstack_pages_update",
            description="Update a page's content, name or tags, or move it to another book or chapter.",
            category="pages",
            input_schema=id_schema("page", **page_fields),
            handler=update_page,
            usage_patterns=["Read the page first if you only want to append content"],
            related_tools=["bookstack_pages_read"],
            error_codes=[not_found_error("page")],
        ),
        CatalogTool(
            name="bookstack_pages_delete",
            description="Delete a page. Deleted pages go to the recycle bin.",
            category="pages",
            input_schema=id_schema("page"),
            handler=delete_page,
            examples=[{"description": "Delete a page", "input": {"id": 12}}],
            usage_patterns=["Check the recycle bin to restore if needed"],
            related_tools=["bookstack_recyclebin_restore"],
            error_codes=[not_found_error("page")],
        ),
        CatalogTool(
            name="bookstack_pages_export",
            description="Export a page as HTML, PDF, plain text or Markdown.",
            category="pages",
            input_schema=export_schema("page"),
            handler=export_page,
            examples=[{"description": "Get markdown content", "input": {"id": 12, "format": "markdown"}}],
            usage_patterns=["Use plaintext or markdown for processing text in LLMs"],
            related_tools=["bookstack_books_export"],
            error_codes=[not_found_error("page")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, page_tools(client, validator))
