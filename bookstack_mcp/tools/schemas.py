"""
JSON Schema fragments shared by the tool input schemas.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, get_args

from ..models import ContentType, ExportFormat

EXPORT_FORMATS = list(get_args(ExportFormat))
CONTENT_TYPES = list(get_args(ContentType))

TAGS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Tag label (e.g. \"Category\")."},
            "value": {"type": "string", "description": "Tag value (e.g. \"API Docs\")."},
        },
        "required": ["name", "value"],
    },
    "description": "Key-value pairs for categorization and filtering.",
}

UNAUTHORIZED_ERROR = {
    "code": "UNAUTHORIZED",
    "description": "Authentication failed or insufficient permissions",
    "recovery_suggestion": "Verify API token and permissions",
}


def id_property(noun: str) -> Dict[str, Any]:
    return {"type": "integer", "minimum": 1, "description": f"ID of the {noun}."}


def not_found_error(noun: str) -> Dict[str, str]:
    return {
        "code": "NOT_FOUND",
        "description": f"{noun.capitalize()} not found",
        "recovery_suggestion": "Verify the ID",
    }


def list_schema(
    plural: str,
    sort_fields: List[str],
    default_sort: str,
    filters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    properties: Dict[str, Any] = {
        "count": {
            "type": "integer",
            "minimum": 1,
            "maximum": 500,
            "default": 20,
            "description": f"Number of {plural} to return.",
        },
        "offset": {
            "type": "integer",
            "minimum": 0,
            "default": 0,
            "description": f"Number of {plural} to skip.",
        },
        "sort": {
            "type": "string",
            "enum": sort_fields,
            "default": default_sort,
            "description": "Sort field.",
        },
    }
    if filters:
        properties["filter"] = {
            "type": "object",
            "properties": filters,
            "description": "Optional filters to apply.",
        }
    return {"type": "object", "properties": properties}


def id_schema(noun: str, **extra: Any) -> Dict[str, Any]:
    properties: Dict[str, Any] = {"id": id_property(noun)}
    properties.update(extra)
    return {"type": "object", "required": ["id"], "properties": properties}


def export_schema(noun: str) -> Dict[str, Any]:
    schema = id_schema(
        noun,
        format={
            "type": "string",
            "enum": EXPORT_FORMATS,
            "description": "Export format. PDF content is returned base64-encoded.",
        },
    )
    schema["required"] = ["id", "format"]
    return schema
