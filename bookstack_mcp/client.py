"""
Async client for the BookStack REST API.

Every tool and resource handler goes through `BookStackClient`. It owns the
transport concerns the dispatcher deliberately ignores: token auth, timeouts,
retries with exponential backoff and mapping HTTP failures onto the error
taxonomy in `errors.py`.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import anyio
import httpx

from .config import Settings
from .errors import NotFoundError, UnauthorizedError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
BINARY_EXPORT_FORMATS = frozenset({"pdf"})
MAX_BACKOFF = 30.0


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_list_query(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Flatten list parameters into BookStack's query string format.

    `filter` entries become `filter[field]=value`; a `name` filter is turned
    into a partial `like` match.
    """
    query: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if key == "filter" and isinstance(value, Mapping):
            for field, fvalue in value.items():
                if fvalue is None:
                    continue
                if field == "name":
                    query["filter[name:like]"] = f"%{fvalue}%"
                else:
                    query[f"filter[{field}]"] = _query_value(fvalue)
        else:
            query[key] = _query_value(value)
    return query


def _decode_upload(field: str, content: str) -> bytes:
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"'{field}' must be base64-encoded content") from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    text = response.text.strip()
    return text[:500] if text else response.reason_phrase


class BookStackClient:
    """
    Thin async wrapper around the BookStack API.

    Methods return decoded JSON (or text for exports) and raise
    `NotFoundError`, `UnauthorizedError`, `ValidationError` or `UpstreamError`.
    """

    def __init__(
        self,
        settings: Settings,
        log: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._logger = log or logger
        headers = {"Accept": "application/json"}
        if settings.api_token:
            headers["Authorization"] = f"Token {settings.api_token}"
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        max_retries = max(self._settings.max_retries, 0)
        for attempt in range(max_retries + 1):
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as e:
                if attempt >= max_retries:
                    raise UpstreamError(
                        f"{method} {path} failed after {attempt + 1} attempts: {type(e).__name__}: {e}"
                    ) from e
                reason = type(e).__name__
            else:
                if response.status_code not in RETRY_STATUS_CODES or attempt >= max_retries:
                    self._raise_for_status(method, path, response)
                    return response
                reason = f"HTTP {response.status_code}"

            delay = min(self._settings.retry_backoff * (2**attempt), MAX_BACKOFF)
            self._logger.warning(
                "BookStack %s %s attempt %d/%d failed (%s), retrying in %.1fs",
                method,
                path,
                attempt + 1,
                max_retries + 1,
                reason,
                delay,
            )
            await anyio.sleep(delay)

        raise AssertionError("unreachable")

    def _raise_for_status(self, method: str, path: str, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        message = _error_message(response)
        self._logger.debug("BookStack %s %s returned %d: %s", method, path, status, message)
        if status in (401, 403):
            raise UnauthorizedError(message, status_code=status)
        if status == 404:
            raise NotFoundError(message, status_code=status)
        if status == 422:
            raise ValidationError(message, status_code=status)
        raise UpstreamError(f"{method} {path} returned {status}: {message}", status_code=status)

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{method} {path} returned a non-JSON body") from e

    # ------------------------------------------------------------------
    # Generic CRUD helpers
    # ------------------------------------------------------------------

    async def _list(self, collection: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._json("GET", f"/{collection}", params=build_list_query(params or {}))

    async def _get(self, collection: str, item_id: int) -> Any:
        return await self._json("GET", f"/{collection}/{item_id}")

    async def _create(self, collection: str, data: Mapping[str, Any]) -> Any:
        return await self._json("POST", f"/{collection}", json=dict(data))

    async def _update(self, collection: str, item_id: int, data: Mapping[str, Any]) -> Any:
        return await self._json("PUT", f"/{collection}/{item_id}", json=dict(data))

    async def _delete(self, collection: str, item_id: int, data: Optional[Mapping[str, Any]] = None) -> None:
        if data:
            await self._request("DELETE", f"/{collection}/{item_id}", json=dict(data))
        else:
            await self._request("DELETE", f"/{collection}/{item_id}")

    async def _export(self, collection: str, item_id: int, export_format: str) -> Any:
        response = await self._request("GET", f"/{collection}/{item_id}/export/{export_format}")
        if export_format in BINARY_EXPORT_FORMATS:
            return {
                "format": export_format,
                "encoding": "base64",
                "content": base64.b64encode(response.content).decode("ascii"),
            }
        return response.text

    async def _upload(
        self,
        path: str,
        file_field: str,
        content: str,
        filename: str,
        data: Mapping[str, Any],
        method_override: Optional[str] = None,
    ) -> Any:
        payload = {k: str(_query_value(v)) for k, v in data.items() if v is not None}
        if method_override:
            # PHP only parses multipart bodies on POST.
            payload["_method"] = method_override
        files: Dict[str, Tuple[str, bytes]] = {
            file_field: (filename, _decode_upload(file_field, content)),
        }
        return await self._json("POST", path, data=payload, files=files)

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def list_books(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("books", params)

    async def create_book(self, data: Mapping[str, Any]) -> Any:
        return await self._create("books", data)

    async def get_book(self, book_id: int) -> Any:
        return await self._get("books", book_id)

    async def update_book(self, book_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("books", book_id, data)

    async def delete_book(self, book_id: int) -> None:
        await self._delete("books", book_id)

    async def export_book(self, book_id: int, export_format: str) -> Any:
        return await self._export("books", book_id, export_format)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def list_pages(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("pages", params)

    async def create_page(self, data: Mapping[str, Any]) -> Any:
        return await self._create("pages", data)

    async def get_page(self, page_id: int) -> Any:
        return await self._get("pages", page_id)

    async def update_page(self, page_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("pages", page_id, data)

    async def delete_page(self, page_id: int) -> None:
        await self._delete("pages", page_id)

    async def export_page(self, page_id: int, export_format: str) -> Any:
        return await self._export("pages", page_id, export_format)

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------

    async def list_chapters(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("chapters", params)

    async def create_chapter(self, data: Mapping[str, Any]) -> Any:
        return await self._create("chapters", data)

    async def get_chapter(self, chapter_id: int) -> Any:
        return await self._get("chapters", chapter_id)

    async def update_chapter(self, chapter_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("chapters", chapter_id, data)

    async def delete_chapter(self, chapter_id: int) -> None:
        await self._delete("chapters", chapter_id)

    async def export_chapter(self, chapter_id: int, export_format: str) -> Any:
        return await self._export("chapters", chapter_id, export_format)

    # ------------------------------------------------------------------
    # Shelves
    # ------------------------------------------------------------------

    async def list_shelves(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("shelves", params)

    async def create_shelf(self, data: Mapping[str, Any]) -> Any:
        return await self._create("shelves", data)

    async def get_shelf(self, shelf_id: int) -> Any:
        return await self._get("shelves", shelf_id)

    async def update_shelf(self, shelf_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("shelves", shelf_id, data)

    async def delete_shelf(self, shelf_id: int) -> None:
        await self._delete("shelves", shelf_id)

    # ------------------------------------------------------------------
    # Users and roles
    # ------------------------------------------------------------------

    async def list_users(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("users", params)

    async def create_user(self, data: Mapping[str, Any]) -> Any:
        return await self._create("users", data)

    async def get_user(self, user_id: int) -> Any:
        return await self._get("users", user_id)

    async def update_user(self, user_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("users", user_id, data)

    async def delete_user(self, user_id: int, migrate_ownership_id: Optional[int] = None) -> None:
        data = {"migrate_ownership_id": migrate_ownership_id} if migrate_ownership_id else None
        await self._delete("users", user_id, data)

    async def list_roles(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("roles", params)

    async def create_role(self, data: Mapping[str, Any]) -> Any:
        return await self._create("roles", data)

    async def get_role(self, role_id: int) -> Any:
        return await self._get("roles", role_id)

    async def update_role(self, role_id: int, data: Mapping[str, Any]) -> Any:
        return await self._update("roles", role_id, data)

    async def delete_role(self, role_id: int, migrate_ownership_id: Optional[int] = None) -> None:
        data = {"migrate_ownership_id": migrate_ownership_id} if migrate_ownership_id else None
        await self._delete("roles", role_id, data)

    # ------------------------------------------------------------------
    # Attachments and images
    # ------------------------------------------------------------------

    async def list_attachments(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("attachments", params)

    async def create_attachment(self, data: Mapping[str, Any]) -> Any:
        fields = dict(data)
        content = fields.pop("file", None)
        if content:
            return await self._upload("/attachments", "file", content, fields.get("name", "file"), fields)
        return await self._create("attachments", fields)

    async def get_attachment(self, attachment_id: int) -> Any:
        return await self._get("attachments", attachment_id)

    async def update_attachment(self, attachment_id: int, data: Mapping[str, Any]) -> Any:
        fields = dict(data)
        content = fields.pop("file", None)
        if content:
            return await self._upload(
                f"/attachments/{attachment_id}",
                "file",
                content,
                fields.get("name", "file"),
                fields,
                method_override="PUT",
            )
        return await self._update("attachments", attachment_id, fields)

    async def delete_attachment(self, attachment_id: int) -> None:
        await self._delete("attachments", attachment_id)

    async def list_images(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("image-gallery", params)

    async def create_image(self, data: Mapping[str, Any]) -> Any:
        fields = dict(data)
        content = fields.pop("image")
        return await self._upload("/image-gallery", "image", content, fields.get("name", "image"), fields)

    async def get_image(self, image_id: int) -> Any:
        return await self._get("image-gallery", image_id)

    async def update_image(self, image_id: int, data: Mapping[str, Any]) -> Any:
        fields = dict(data)
        content = fields.pop("image", None)
        if content:
            return await self._upload(
                f"/image-gallery/{image_id}",
                "image",
                content,
                fields.get("name", "image"),
                fields,
                method_override="PUT",
            )
        return await self._update("image-gallery", image_id, fields)

    async def delete_image(self, image_id: int) -> None:
        await self._delete("image-gallery", image_id)

    # ------------------------------------------------------------------
    # Search, recycle bin, permissions, audit, system
    # ------------------------------------------------------------------

    async def search(self, params: Mapping[str, Any]) -> Any:
        return await self._json("GET", "/search", params=build_list_query(params))

    async def list_recycle_bin(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("recycle-bin", params)

    async def restore_from_recycle_bin(self, deletion_id: int) -> Any:
        return await self._json("PUT", f"/recycle-bin/{deletion_id}")

    async def permanently_delete(self, deletion_id: int) -> Any:
        return await self._json("DELETE", f"/recycle-bin/{deletion_id}")

    async def get_content_permissions(self, content_type: str, content_id: int) -> Any:
        return await self._json("GET", f"/content-permissions/{content_type}/{content_id}")

    async def update_content_permissions(
        self, content_type: str, content_id: int, data: Mapping[str, Any]
    ) -> Any:
        body = dict(data)
        if "permissions" in body:
            body["role_permissions"] = body.pop("permissions")
        return await self._json("PUT", f"/content-permissions/{content_type}/{content_id}", json=body)

    async def list_audit_log(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("audit-log", params)

    async def get_system_info(self) -> Any:
        return await self._json("GET", "/system")

    async def health_check(self) -> bool:
        """
        Probe API connectivity with a single cheap request.

        Never raises; any failure is reported as `False`.
        """
        try:
            response = await self._client.get("/books", params={"count": 1})
        except httpx.HTTPError as e:
            self._logger.warning("BookStack health check failed: %s", e)
            return False
        if response.is_success:
            return True
        self._logger.warning("BookStack health check returned %d", response.status_code)
        return False
