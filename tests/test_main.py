"""Tests for bookstack_mcp.main and logging setup."""

import logging
import sys
from unittest.mock import patch

import pytest

from bookstack_mcp import main as main_module
from bookstack_mcp.logging_config import configure_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_is_idempotent(clean_root_logger):
    configure_logging("DEBUG")
    configure_logging("WARNING")

    ours = [h for h in clean_root_logger.handlers if h.get_name() == "bookstack-mcp"]
    assert len(ours) == 1
    assert ours[0].stream is sys.stderr
    assert clean_root_logger.level == logging.WARNING


def test_stdio_startup_failure_exits_with_code_1(settings):
    with patch.object(main_module, "get_settings", return_value=settings), patch.object(
        main_module, "configure_logging"
    ), patch.object(main_module.anyio, "run", side_effect=RuntimeError("cannot start")):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main()
    assert exc_info.value.code == 1


def test_http_transport_runs_http_server(settings):
    http_settings = settings.model_copy(update={"transport": "http"})
    with patch.object(main_module, "get_settings", return_value=http_settings), patch.object(
        main_module, "configure_logging"
    ), patch.object(main_module.anyio, "run") as run:
        main_module.main()

    from bookstack_mcp.http_server import run_http_server

    run.assert_called_once_with(run_http_server, http_settings)
