"""Shared fixtures for the BookStack MCP tests."""

from unittest.mock import AsyncMock

import pytest

from bookstack_mcp.client import BookStackClient
from bookstack_mcp.config import Settings
from bookstack_mcp.validation import ValidationHandler


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        base_url="http://bookstack.test",
        api_token="token-id:token-secret",
        max_retries=2,
        retry_backoff=0,
    )


@pytest.fixture
def validator():
    return ValidationHandler()


@pytest.fixture
def fake_client():
    """A BookStackClient double whose every API method is an AsyncMock."""
    return AsyncMock(spec=BookStackClient)
