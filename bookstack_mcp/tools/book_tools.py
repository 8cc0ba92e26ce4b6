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


def book_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    """
    Factory to produce the book lifecycle tools with a bound client.
    """

    async def list_books(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing books: %s", arguments)
        params = validator.validate_params(arguments, "booksList")
        return await client.list_books(params)

    async def create_book(arguments: Dict[str, Any]) -> Any:
        logger.info("Creating book %r", arguments.get("name"))
        params = validator.validate_params(arguments, "bookCreate")
        return await client.create_book(params)

    async def read_book(arguments: Dict[str, Any]) -> Any:
        book_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading book %d", book_id)
        return await client.get_book(book_id)

    async def update_book(arguments: Dict[str, Any]) -> Any:
        book_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating book %d (fields: %s)", book_id, sorted(fields))
        params = validator.validate_params(fields, "bookUpdate")
        return await client.update_book(book_id, params)

    async def delete_book(arguments: Dict[str, Any]) -> Any:
        book_id = validator.validate_id(arguments.get("id"))
        logger.warning("Deleting book %d", book_id)
        await client.delete_book(book_id)
        return {"success": True, "message": f"Book {book_id} deleted successfully"}

    async def export_book(arguments: Dict[str, Any]) -> Any:
        book_id = validator.validate_id(arguments.get("id"))
        export_format = validator.validate_choice(arguments.get("format"), EXPORT_FORMATS, "format")
        logger.info("Exporting book %d as %s", book_id, export_format)
        return await client.export_book(book_id, export_format)

    book_fields: Dict[str, Any] = {
        "name": {"type": "string", "maxLength": 255, "description": "The name of the book."},
        "description": {
            "type": "string",
            "maxLength": 1900,
            "description": "A short plain-text description of the book's purpose or contents.",
        },
        "description_html": {
            "type": "string",
            "maxLength": 2000,
            "description": "HTML description. Overrides the plain text description if provided.",
        },
        "tags": TAGS_SCHEMA,
        "default_template_id": {
            "type": "integer",
            "description": "ID of a page to use as the default template for new pages in this book.",
        },
    }

    return [
        CatalogTool(
            name="bookstack_books_list",
            description=(
                "List all books visible to the authenticated user with pagination and filtering "
                "options. Books are the top-level containers in the BookStack hierarchy."
            ),
            category="books",
            input_schema=list_schema(
                "books",
                ["name", "created_at", "updated_at"],
                "name",
                {
                    "name": {"type": "string", "description": "Filter by book name (partial match)."},
                    "created_by": {"type": "integer", "description": "Filter by creator user ID."},
                },
            ),
            handler=list_books,
            examples=[
                {"description": "List first 10 books", "input": {"count": 10}},
                {"description": "Find API-related books", "input": {"filter": {"name": "api"}}},
            ],
            usage_patterns=[
                "Call first to understand the available documentation structure",
                "Combine with pagination for large book collections",
            ],
            related_tools=["bookstack_books_read", "bookstack_search"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_books_create",
            description=(
                "Create a new book. Books are the highest level of organization and contain "
                "chapters and pages. A book must exist before you can add content to it."
            ),
            category="books",
            input_schema={"type": "object", "required": ["name"], "properties": book_fields},
            handler=create_book,
            examples=[
                {
                    "description": "Create a developer documentation book",
                    "input": {
                        "name": "Developer Guides",
                        "description": "Technical documentation for the engineering team.",
                        "tags": [{"name": "Department", "value": "Engineering"}],
                    },
                }
            ],
            usage_patterns=["Use tags to make the book easier to find in searches"],
            related_tools=["bookstack_chapters_create", "bookstack_pages_create"],
            error_codes=[
                {
                    "code": "VALIDATION_ERROR",
                    "description": "Name is missing or too long",
                    "recovery_suggestion": "Provide a name under 255 characters",
                }
            ],
        ),
        CatalogTool(
            name="bookstack_books_read",
            description=(
                "Get details of a specific book including its content hierarchy "
                "(chapters and pages)."
            ),
            category="books",
            input_schema=id_schema("book"),
            handler=read_book,
            examples=[{"description": "Read book 5", "input": {"id": 5}}],
            related_tools=["bookstack_chapters_read", "bookstack_pages_read"],
            error_codes=[not_found_error("book")],
        ),
        CatalogTool(
            name="bookstack_books_update",
            description="Update a book's name, description, tags or default template.",
            category="books",
            input_schema=id_schema("book", **book_fields),
            handler=update_book,
            examples=[{"description": "Rename a book", "input": {"id": 5, "name": "Platform Guides"}}],
            usage_patterns=["Only the fields you pass are changed"],
            related_tools=["bookstack_books_read"],
            error_codes=[not_found_error("book")],
        ),
        CatalogTool(
            name="bookstack_books_delete",
            description="Delete a book and all of its contents. Deleted items go to the recycle bin.",
            category="books",
            input_schema=id_schema("book"),
            handler=delete_book,
            usage_patterns=["Check the recycle bin to restore if needed"],
            related_tools=["bookstack_recyclebin_restore"],
            error_codes=[not_found_error("book")],
        ),
        CatalogTool(
            name="bookstack_books_export",
            description="Export a whole book as HTML, PDF, plain text or Markdown.",
            category="books",
            input_schema=export_schema("book"),
            handler=export_book,
            examples=[{"description": "Get a book as Markdown", "input": {"id": 5, "format": "markdown"}}],
            usage_patterns=["Use plaintext or markdown when the content will be processed further"],
            related_tools=["bookstack_chapters_export", "bookstack_pages_export"],
            error_codes=[not_found_error("book")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, book_tools(client, validator))
