from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all
from .schemas import UNAUTHORIZED_ERROR, id_schema, list_schema, not_found_error

logger = logging.getLogger(__name__)


def user_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    """
    User administration tools. These require the "manage users" permission
    on the token's account.
    """

    async def list_users(arguments: Dict[str, Any]) -> Any:
        logger.debug("Listing users: %s", arguments)
        params = validator.validate_params(arguments, "usersList")
        return await client.list_users(params)

    async def create_user(arguments: Dict[str, Any]) -> Any:
        logger.info("Creating user %r", arguments.get("email"))
        params = validator.validate_params(arguments, "userCreate")
        return await client.create_user(params)

    async def read_user(arguments: Dict[str, Any]) -> Any:
        user_id = validator.validate_id(arguments.get("id"))
        logger.debug("Reading user %d", user_id)
        return await client.get_user(user_id)

    async def update_user(arguments: Dict[str, Any]) -> Any:
        user_id = validator.validate_id(arguments.get("id"))
        fields = {k: v for k, v in arguments.items() if k != "id"}
        logger.info("Updating user %d (fields: %s)", user_id, sorted(fields))
        params = validator.validate_params(fields, "userUpdate")
        return await client.update_user(user_id, params)

    async def delete_user(arguments: Dict[str, Any]) -> Any:
        user_id = validator.validate_id(arguments.get("id"))
        migrate_to: Optional[int] = None
        if arguments.get("migrate_ownership_id") is not None:
            migrate_to = validator.validate_id(
                arguments["migrate_ownership_id"], "migrate_ownership_id"
            )
        logger.warning("Deleting user %d (migrate ownership to %s)", user_id, migrate_to)
        await client.delete_user(user_id, migrate_to)
        return {"success": True, "message": f"User {user_id} deleted successfully"}

    user_fields: Dict[str, Any] = {
        "name": {"type": "string", "maxLength": 255, "description": "Display name."},
        "email": {"type": "string", "format": "email", "description": "Email address, used to log in."},
        "password": {"type": "string", "minLength": 8, "description": "Password (min 8 characters)."},
        "roles": {
            "type": "array",
            "items": {"type": "integer"},
            "description": "IDs of the roles to assign.",
        },
        "external_auth_id": {"type": "string", "description": "ID used by an external auth system."},
    }
    create_fields = dict(user_fields)
    create_fields["send_invite"] = {
        "type": "boolean",
        "default": False,
        "description": "Email an invite link so the user can set their own password.",
    }
    update_fields = dict(user_fields)
    update_fields["active"] = {"type": "boolean", "description": "Enable or disable the account."}

    return [
        CatalogTool(
            name="bookstack_users_list",
            description="List user accounts with pagination and filtering.",
            category="users",
            input_schema=list_schema(
                "users",
                ["name", "email", "created_at", "updated_at"],
                "name",
                {
                    "name": {"type": "string", "description": "Filter by name (partial match)."},
                    "email": {"type": "string", "description": "Filter by email address."},
                    "active": {"type": "boolean", "description": "Filter by account status."},
                },
            ),
            handler=list_users,
            related_tools=["bookstack_users_read", "bookstack_roles_list"],
            error_codes=[UNAUTHORIZED_ERROR],
        ),
        CatalogTool(
            name="bookstack_users_create",
            description="Create a user account. Either set a password or send an invite.",
            category="users",
            input_schema={"type": "object", "required": ["name", "email"], "properties": create_fields},
            handler=create_user,
            examples=[
                {
                    "description": "Invite an editor",
                    "input": {"name": "Ada", "email": "ada@example.com", "roles": [2], "send_invite": True},
                }
            ],
            related_tools=["bookstack_roles_list"],
            error_codes=[
                {
                    "code": "VALIDATION_ERROR",
                    "description": "Invalid email or email already in use",
                    "recovery_suggestion": "Use a different email address",
                }
            ],
        ),
        CatalogTool(
            name="bookstack_users_read",
            description="Get a user's profile and assigned roles.",
            category="users",
            input_schema=id_schema("user"),
            handler=read_user,
            error_codes=[not_found_error("user")],
        ),
        CatalogTool(
            name="bookstack_users_update",
            description="Update a user's profile, password, roles or account status.",
            category="users",
            input_schema=id_schema("user", **update_fields),
            handler=update_user,
            usage_patterns=["Passing roles replaces the user's current roles"],
            error_codes=[not_found_error("user")],
        ),
        CatalogTool(
            name="bookstack_users_delete",
            description="Delete a user, optionally handing their content over to another user.",
            category="users",
            input_schema=id_schema(
                "user",
                migrate_ownership_id={
                    "type": "integer",
                    "minimum": 1,
                    "description": "ID of the user who should take ownership of the deleted user's content.",
                },
            ),
            handler=delete_user,
            examples=[{"description": "Delete and reassign content", "input": {"id": 7, "migrate_ownership_id": 1}}],
            error_codes=[not_found_error("user")],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, user_tools(client, validator))
