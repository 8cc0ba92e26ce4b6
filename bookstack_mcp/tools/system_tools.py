from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..client import BookStackClient
from ..registry import CatalogTool, Registry
from ..validation import ValidationHandler
from . import add_all

logger = logging.getLogger(__name__)


def system_tools(client: BookStackClient, validator: ValidationHandler) -> List[CatalogTool]:
    async def system_info(arguments: Dict[str, Any]) -> Any:
        logger.debug("Getting system information")
        return await client.get_system_info()

    return [
        CatalogTool(
            name="bookstack_system_info",
            description=(
                "Get information about the BookStack instance, including version, base URL "
                "and configuration limits."
            ),
            category="system",
            input_schema={"type": "object", "properties": {}},
            handler=system_info,
            examples=[{"description": "Check system info", "input": {}}],
            usage_patterns=["Call on startup to verify the connection and version"],
        ),
    ]


def register_tools(
    registry: Registry,
    client: BookStackClient,
    validator: ValidationHandler,
) -> None:
    add_all(registry, system_tools(client, validator))
