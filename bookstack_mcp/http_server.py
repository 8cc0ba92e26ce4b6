from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from mcp import types
from mcp.shared.exceptions import McpError

from . import __version__
from .config import Settings, get_settings
from .errors import BookStackMCPError
from .server import BookStackServer

logger = logging.getLogger(__name__)


def _error_response(message_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": message_id, "error": error}


def create_http_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create the FastAPI app that serves MCP JSON-RPC over plain HTTP.

    Every `POST /message` builds its own `BookStackServer`, so the
    `X-BookStack-Url` / `X-BookStack-Token` headers can point a single
    request at a different BookStack instance or account.
    """
    base_settings = settings or get_settings()

    app = FastAPI(
        title="BookStack MCP Server",
        version=__version__,
        description="MCP server exposing the BookStack API",
    )

    @app.get("/health")
    async def health():
        """Health check endpoint; 503 when any check fails."""
        server = BookStackServer(base_settings, transport=transport)
        try:
            report = await server.get_health()
        finally:
            await server.shutdown()
        status_code = 200 if report["status"] == "healthy" else 503
        return JSONResponse(report, status_code=status_code)

    @app.get("/")
    async def root():
        """Root endpoint with service info."""
        return {
            "service": base_settings.server_name,
            "version": base_settings.server_version,
            "protocol": "mcp",
            "transport": "http",
            "endpoints": {
                "health": "/health",
                "message": "/message",
            },
        }

    @app.post("/message")
    async def message(
        request: Request,
        x_bookstack_url: Optional[str] = Header(default=None),
        x_bookstack_token: Optional[str] = Header(default=None),
    ):
        """
        Handle one JSON-RPC 2.0 message.

        Requests get a JSON-RPC response; notifications (no `id`) get
        `202 Accepted` with no body.
        """
        body = await request.body()
        try:
            payload = json.loads(body)
        except ValueError as e:
            return JSONResponse(_error_response(None, types.PARSE_ERROR, f"Parse error: {e}"), status_code=400)

        if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0":
            message_id = payload.get("id") if isinstance(payload, dict) else None
            return JSONResponse(
                _error_response(message_id, types.INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'"),
                status_code=400,
            )

        method = payload.get("method")
        message_id = payload.get("id")
        params = payload.get("params") or {}

        if not method:
            return JSONResponse(
                _error_response(message_id, types.INVALID_REQUEST, "Invalid Request: method is required"),
                status_code=400,
            )

        if "id" not in payload:
            logger.debug("Notification %s acknowledged", method)
            return Response(status_code=202)

        server: Optional[BookStackServer] = None
        try:
            server = BookStackServer(
                base_settings.with_overrides(x_bookstack_url, x_bookstack_token),
                transport=transport,
            )
            response = await handle_mcp_request(server, method, params, message_id)
        except Exception:
            logger.exception("Error handling MCP request %s", method)
            return PlainTextResponse("Internal Server Error", status_code=500)
        finally:
            if server is not None:
                await server.shutdown()

        return JSONResponse(response)

    return app


async def handle_mcp_request(
    server: BookStackServer,
    method: str,
    params: Dict[str, Any],
    message_id: Any,
) -> Dict[str, Any]:
    """
    Route one MCP method to the server's dispatcher and build the JSON-RPC reply.

    Protocol errors become JSON-RPC error objects; anything else propagates.
    """
    try:
        result = await _route(server, method, params)
    except McpError as e:
        return _error_response(message_id, e.error.code, e.error.message, e.error.data)
    except BookStackMCPError as e:
        error = server.error_handler.handle_error(e).error
        return _error_response(message_id, error.code, error.message, error.data)

    return {"jsonrpc": "2.0", "id": message_id, "result": result}


async def _route(server: BookStackServer, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
    dispatcher = server.dispatcher

    if method == "initialize":
        return {
            "protocolVersion": params.get("protocolVersion") or types.LATEST_PROTOCOL_VERSION,
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"subscribe": False, "listChanged": False},
            },
            "serverInfo": {
                "name": server.settings.server_name,
                "version": server.settings.server_version,
            },
        }

    if method == "ping":
        return {}

    if method == "tools/list":
        return dispatcher.list_tools()

    if method == "tools/call":
        name = params.get("name")
        if not name:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message="Invalid params: 'name' is required"))
        return await dispatcher.call_tool(name, params.get("arguments"))

    if method == "resources/list":
        return dispatcher.list_resources()

    if method == "resources/templates/list":
        return dispatcher.list_resource_templates()

    if method == "resources/read":
        uri = params.get("uri")
        if not uri:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message="Invalid params: 'uri' is required"))
        return await dispatcher.read_resource(uri)

    raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Method not found: {method}"))


async def run_http_server(settings: Settings) -> None:
    """Run the HTTP server using uvicorn."""
    import uvicorn

    app = create_http_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
    server = uvicorn.Server(config)
    logger.info("BookStack MCP server listening on %s:%d", settings.server_host, settings.server_port)
    await server.serve()
