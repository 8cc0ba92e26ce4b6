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


def chapter_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_chapters(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing chapters: %s", arguments)
        params = validator.validate_params(arguments, "chaptersList")
        return await client.list_chapters(params)

    async def create_chapter(arguments: Dict[str, Any]) -> Any:
        logger.info("Creating chapter %r in book %s", arguments.get("name"), arguments.get("book_id"))
        params = validator.validate_params(arguments, "chapterCreate")
        return await client.create_chapter(params)

    async def read_chapter(arguments: Dict[str, Any]) -> Any:
        chapter_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading chapter %d", chapter_id)
        return await client.get_chapter(chapter_id)

    async def update_chapter(arguments: Dict[str, Any]) -> Any:
        chapter_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating chapter %d (fields: %s)", chapter_id, sorted(fields))
        params = validator.validate_params(fields, "chapterUpdate")
        return await client.update_chapter(chapter_id, params)

    async def delete_chapter(arguments: Dict[str, Any]) -> Any:
        chapter_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting chapter %d", chapter_id)
        await client.delete_chapter(chapter_id)
        return {"success": True, "message": f"Chapter {chapter_id} deleted successfully"}

    async def export_chapter(arguments: Dict[str, Any]) -> Any:
        chapter_id = validator.validate_id(arguments.get("id"))
        export_format = validator.validate_choice(arguments.get("format"), EXPORT_FORMATS, "format")
        logger.info("Exporting chapter %d as %s", chapter_id, export_format)
        return await client.export_chapter(chapter_id, export_format)

    chapter_fields: Dict[str, Any] = {
        "book_id": {"type": "integer", "minimum": 1, "description": "ID of the parent book."},
        "name": {"type": "string", "maxLength": 255, "description": "Chapter title."},
        "description": {"type": "string", "maxLength": 1900, "description": "Plain-text description."},
        "description_html": {"type": "string", "maxLength": 2000, "description": "HTML description."},
        "tags": TAGS_SCHEMA,
        "priority": {"type": "integer", "description": "Sort position within the book."},
    }

    return [
        CatalogTool(
            name="bookstack_chapters_list",
            description="List chapters with pagination and filtering. Chapters group pages inside a book.",
            category="chapters",
            input_schema=list_schema(
                "chapters",
                ["name", "created_at", "updated_at", "priority"],
                "name",
                {
                    "book_id": {"type": "integer", "description": "Only chapters in this book."},
                    "name": {"type": "string", "description": "Filter by chapter name (partial match)."},
                    "created_by": {"type": "integer", "description": "Filter by creator user ID."},
                },
            ),
            handler=list_chapters,
            related_tools=["bookstack_chapters_read"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_chapters_create",
            description="Create a chapter inside an existing book.",
            category="chapters",
            input_schema={"type": "object", "required": ["book_id", "name"], "properties": chapter_fields},
            handler=create_chapter,
            examples=[{"description": "Add a chapter", "input": {"book_id": 5, "name": "Getting Started"}}],
            related_tools=["bookstack_books_read", "bookstack_pages_create"],
            error_codes=[not_found_error("book")],
        ),
        CatalogTool(
            name="bookstack_chapters_read",
            description="Get a chapter and the list of pages it contains.",
            category="chapters",
            input_schema=id_schema("chapter"),
            handler=read_chapter,
            related_tools=["bookstack_pages_read"],
            error_codes=[not_found_error("chapter")],
        ),
        CatalogTool(
            name="bookstack_chapters_update",
            description="Update a chapter, or move it to another book by changing book_id.",
            category="chapters",
            input_schema=id_schema("chapter", **chapter_fields),
            handler=update_chapter,
            related_tools=["bookstack_chapters_read"],
            error_codes=[not_found_error("chapter")],
        ),
        CatalogTool(
            name="bookstack_chapters_delete",
            description="Delete a chapter and its pages. Deleted items go to the recycle bin.",
            category="chapters",
            input_schema=id_schema("chapter"),
            handler=delete_chapter,
            related_tools=["bookstack_recyclebin_restore"],
            error_codes=[not_found_error("chapter")],
        ),
        CatalogTool(
            name="bookstack_chapters_export",
            description="Export a chapter as HTML, PDF, plain text or Markdown.",
            category="chapters",
            input_schema=export_schema("chapter"),
            handler=export_chapter,
            related_tools=["bookstack_books_export", "bookstack_pages_export"],
            error_codes=[not_found_error("chapter")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, chapter_tools(client, validator))
