from __future__ import annotations

import logging
import sys

import anyio
from mcp.server.stdio import stdio_server

from .config import Settings, get_settings
from .logging_config import configure_logging
from .server import BookStackServer

logger = logging.getLogger(__name__)


async def run_stdio(settings: Settings) -> None:
    """
    Serve one `BookStackServer` over stdin/stdout until the client disconnects.
    """
    app = BookStackServer(settings)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("BookStack MCP server running on stdio")
            await app.server.run(
                read_stream,
                write_stream,
                app.server.create_initialization_options(),
            )
    finally:
        await app.shutdown()


def main() -> None:
    """
    Entrypoint for running the MCP server.

    Supports two transport modes:
    - stdio: For direct process-to-process communication (default)
    - http: JSON-RPC over HTTP, one server instance per request
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    if settings.transport == "http":
        from .http_server import run_http_server

        anyio.run(run_http_server, settings)
        return

    try:
        anyio.run(run_stdio, settings)
    except Exception:
        logger.exception("Failed to start BookStack MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
