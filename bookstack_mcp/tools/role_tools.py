from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, id_schema, list_schema, not_found_error

logger = logging.getLogger(__name__)


def role_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def list_roles(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing roles: %s", arguments)
        params = validator.validate_params(arguments, "rolesList")
        return await client.list_roles(params)

    async def create_role(arguments: Dict[str, Any]) -> Any:
        logger.info("Creating role %r", arguments.get("display_name"))
        params = validator.validate_params(arguments, "roleCreate")
        return await client.create_role(params)

    async def read_role(arguments: Dict[str, Any]) -> Any:
        role_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading role %d", role_id)
        return await client.get_role(role_id)

    async def update_role(arguments: Dict[str, Any]) -> Any:
        role_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating role %d (fields: %s)", role_id, sorted(fields))
        params = validator.validate_params(fields, "roleUpdate")
        return await client.update_role(role_id, params)

    async def delete_role(arguments: Dict[str, Any]) -> Any:
        role_id = validator.validate_id(arguments.get("id"))
        migrate_to: Optional[int] = None
        if arguments.get("migrate_ownership_id") is not None:
            migrate_to = validator.validate_id(
                arguments["migrate_ownership_id"], "migrate_ownership_id"
            )
        logger.warning("Deleting role %d (migrate users to %s)", role_id, migrate_to)
        await client.delete_role(role_id, migrate_to)
        return {"success": True, "message": f"Role {role_id} deleted successfully"}

    role_fields: Dict[str, Any] = {
        "display_name": {"type": "string", "maxLength": 180, "description": "Role name shown in the UI."},
        "description": {"type": "string", "maxLength": 1000, "description": "What the role is for."},
        "mfa_enforced": {"type": "boolean", "description": "Require multi-factor auth for members."},
        "external_auth_id": {"type": "string", "description": "Group ID used by an external auth system."},
        "permissions": {
            "type": "object",
            "additionalProperties": {"type": "boolean"},
            "description": "System permissions keyed by name, e.g. {\"content-export\": true}.",
        },
    }

    return [
        CatalogTool(
            name="bookstack_roles_list",
            description="List roles with pagination and filtering.",
            category="roles",
            input_schema=list_schema(
                "roles",
                ["display_name", "system_name", "created_at", "updated_at"],
                "display_name",
                {
                    "display_name": {"type": "string", "description": "Filter by display name."},
                    "system_name": {"type": "string", "description": "Filter by system name."},
                },
            ),
            handler=list_roles,
            related_tools=["bookstack_roles_read", "bookstack_users_list"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_roles_create",
            description="Create a role with a set of system permissions.",
            category="roles",
            input_schema={"type": "object", "required": ["display_name"], "properties": role_fields},
            handler=create_role,
            examples=[
                {
                    "description": "Create a reviewer role",
                    "input": {"display_name": "Reviewer", "permissions": {"content-export": True}},
                }
            ],
            related_tools=["bookstack_users_update", "bookstack_permissions_update"],
        ),
        CatalogTool(
            name="bookstack_roles_read",
            description="Get a role with its permissions and assigned users.",
            category="roles",
            input_schema=id_schema("role"),
            handler=read_role,
            error_codes=[not_found_error("role")],
        ),
        CatalogTool(
            name="bookstack_roles_update",
            description="Update a role's details or system permissions.",
            category="roles",
            input_schema=id_schema("role", **role_fields),
            handler=update_role,
            usage_patterns=["Passing permissions replaces the full permission set"],
            error_codes=[not_found_error("role")],
        ),
        CatalogTool(
            name="bookstack_roles_delete",
            description="Delete a role, optionally moving its users to another role.",
            category="roles",
            input_schema=id_schema(
                "role",
                migrate_ownership_id={
                    "type": "integer",
                    "minimum": 1,
                    "description": "ID of the role the deleted role's users should move to.",
                },
            ),
            handler=delete_role,
            error_codes=[not_found_error("role")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, role_tools(client, validator))
