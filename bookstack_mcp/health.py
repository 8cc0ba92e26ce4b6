from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .registry import Registry

logger = logging.getLogger(__name__)

ConnectivityProbe = Callable[[], Awaitable[bool]]


class HealthAggregator:
    """
    Fold API connectivity and registry population into one status.

    Nothing is cached; every call re-runs the checks.
    """

    def __init__(
        self,
        probe: ConnectivityProbe,
        registry: Registry,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._probe = probe
        self._registry = registry
        self._logger = log or logger

    async def _connectivity(self) -> bool:
        try:
            return bool(await self._probe())
        except Exception:
            self._logger.exception("Connectivity probe raised")
            return False

    async def check(self) -> Dict[str, Any]:
        tools = self._registry.tool_count
        resources = self._registry.resource_count
        checks: List[Dict[str, Any]] = [
            {
                "name": "bookstack_connection",
                "healthy": await self._connectivity(),
                "message": "BookStack API connection",
            },
            {
                "name": "tools_loaded",
                "healthy": tools > 0,
                "message": f"{tools} tools loaded",
            },
            {
                "name": "resources_loaded",
                "healthy": resources > 0,
                "message": f"{resources} resources loaded",
            },
        ]
        status = "healthy" if all(c["healthy"] for c in checks) else "unhealthy"
        return {"status": status, "checks": checks}
