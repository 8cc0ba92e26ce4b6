"""
Error taxonomy for the BookStack MCP server and its translation to MCP errors.

Handlers and the API client raise the exceptions defined here; the dispatcher
passes every failure through `ErrorHandler.handle_error` so callers only ever
see a stable `McpError` shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
import pydantic
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

logger = logging.getLogger(__name__)

# Server-defined JSON-RPC codes (-32000 to -32099).
UNAUTHORIZED = -32001
NOT_FOUND = -32004


class BookStackMCPError(Exception):
    """Base class for all errors raised by this package."""

    error_type = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnknownToolError(BookStackMCPError):
    error_type = "UNKNOWN_TOOL"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownResourceError(BookStackMCPError):
    error_type = "UNKNOWN_RESOURCE"

    def __init__(self, uri: str) -> None:
        super().__init__(f"Unknown resource: {uri}")
        self.uri = uri


class ValidationError(BookStackMCPError):
    error_type = "VALIDATION_ERROR"


class NotFoundError(BookStackMCPError):
    error_type = "NOT_FOUND"


class UnauthorizedError(BookStackMCPError):
    error_type = "UNAUTHORIZED"


class UpstreamError(BookStackMCPError):
    error_type = "UPSTREAM_ERROR"


def describe_validation_errors(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


class ErrorHandler:
    """
    Translate internal failures into MCP protocol errors.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger

    def handle_error(self, error: BaseException) -> McpError:
        if isinstance(error, McpError):
            return error

        if isinstance(error, pydantic.ValidationError):
            error = ValidationError(describe_validation_errors(error))

        if isinstance(error, BookStackMCPError):
            return McpError(self._error_data(error))

        if isinstance(error, httpx.HTTPError):
            wrapped = UpstreamError(f"{type(error).__name__}: {error}")
            return McpError(self._error_data(wrapped))

        self._logger.debug("Untyped error reached the error handler: %r", error)
        return McpError(
            ErrorData(
                code=INTERNAL_ERROR,
                message=f"Internal error: {error}",
                data={"type": BookStackMCPError.error_type},
            )
        )

    def _error_data(self, error: BookStackMCPError) -> ErrorData:
        data: Dict[str, Any] = {"type": error.error_type}
        if error.status_code is not None:
            data["status_code"] = error.status_code

        if isinstance(error, (UnknownToolError, UnknownResourceError)):
            code = METHOD_NOT_FOUND if isinstance(error, UnknownToolError) else INVALID_PARAMS
            message = error.message
        elif isinstance(error, ValidationError):
            code, message = INVALID_PARAMS, f"Validation error: {error.message}"
        elif isinstance(error, NotFoundError):
            code, message = NOT_FOUND, f"Not found: {error.message}"
        elif isinstance(error, UnauthorizedError):
            code, message = UNAUTHORIZED, f"Unauthorized: {error.message}"
        elif isinstance(error, UpstreamError):
            code, message = INTERNAL_ERROR, f"Upstream error: {error.message}"
        else:
            code, message = INTERNAL_ERROR, f"Internal error: {error.message}"

        return ErrorData(code=code, message=message, data=data)
