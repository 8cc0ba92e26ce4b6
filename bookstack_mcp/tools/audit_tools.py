from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, list_schema

logger = logging.getLogger(__name__)


def audit_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_audit_log(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing audit log: %s", arguments)
        params = validator.validate_params(arguments, "auditLogList")
        return await client.list_audit_log(params)

    return [
        CatalogTool(
            name="bookstack_audit_log_list",
            description="List audit log entries: who did what, and when. Requires admin permissions.",
            category="audit",
            input_schema=list_schema(
                "entries",
                ["created_at"],
                "created_at",
                {
                    "event": {"type": "string", "description": "Event type, e.g. page_update."},
                    "user_id": {"type": "integer", "description": "Only events by this user."},
                    "entity_type": {
                        "type": "string",
                        "enum": ["page", "book", "chapter", "bookshelf", "user", "role"],
                        "description": "Type of the affected item.",
                    },
                    "entity_id": {"type": "integer", "description": "ID of the affected item."},
                    "date_from": {"type": "string", "format": "date", "description": "Start date (YYYY-MM-DD)."},
                    "date_to": {"type": "string", "format": "date", "description": "End date (YYYY-MM-DD)."},
                },
            ),
            handler=list_audit_log,
            examples=[
                {"description": "Recent page edits", "input": {"filter": {"event": "page_update"}, "count": 10}}
            ],
            usage_patterns=["Filter by entity to see the history of a single item"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, audit_tools(client, validator))
