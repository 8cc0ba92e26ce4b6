"""Tests for bookstack_mcp.config module."""

from bookstack_mcp.config import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.base_url == "http://localhost:6875"
    assert settings.transport == "stdio"
    assert settings.server_port == 3000
    assert settings.validation_enabled is True
    assert settings.validation_strict is False


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("BOOKSTACK_BASE_URL", "https://docs.example.com")
    monkeypatch.setenv("BOOKSTACK_API_TOKEN", "id:secret")
    monkeypatch.setenv("BOOKSTACK_MAX_RETRIES", "5")
    settings = Settings(_env_file=None)
    assert settings.base_url == "https://docs.example.com"
    assert settings.api_token == "id:secret"
    assert settings.max_retries == 5


def test_api_url_strips_trailing_slash():
    assert Settings(_env_file=None, base_url="https://docs.example.com/").api_url == "https://docs.example.com/api"


def test_with_overrides(settings):
    overridden = settings.with_overrides(base_url="http://other.test", api_token="a:b")
    assert overridden.base_url == "http://other.test"
    assert overridden.api_token == "a:b"
    assert settings.base_url == "http://bookstack.test"


def test_with_overrides_ignores_empty_values(settings):
    same = settings.with_overrides(base_url="", api_token=None)
    assert same.base_url == settings.base_url
    assert same.api_token == settings.api_token


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
