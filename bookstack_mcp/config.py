from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the BookStack MCP server.

    All values are loaded from environment variables with `BOOKSTACK_` prefix.
    You can also use a `.env` file in the working directory during development.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKSTACK_",
        env_file=".env",
        extra="ignore",
    )

    # BookStack API
    base_url: str = "http://localhost:6875"
    api_token: str = ""  # "<token_id>:<token_secret>"
    timeout: float = 30.0
    max_retries: int = 3
    retry_backoff: float = 0.5

    # Server
    server_name: str = "bookstack-mcp"
    server_version: str = "1.0.0"
    server_port: int = 3000
    server_host: str = "0.0.0.0"
    transport: str = "stdio"  # "stdio" or "http"
    log_level: str = "INFO"

    # Validation
    validation_enabled: bool = True
    validation_strict: bool = False

    @property
    def api_url(self) -> str:
        return self.base_url.rstrip("/") + "/api"

    def with_overrides(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
    ) -> "Settings":
        """
        Return a copy with per-request connection overrides applied.

        Empty values keep the configured ones.
        """
        update = {}
        if base_url:
            update["base_url"] = base_url
        if api_token:
            update["api_token"] = api_token
        return self.model_copy(update=update)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings from environment."""
    return Settings()
