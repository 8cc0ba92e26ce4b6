"""Tests for bookstack_mcp.client module."""

import base64
import json

import httpx
import pytest

from bookstack_mcp.client import BookStackClient, build_list_query
from bookstack_mcp.errors import NotFoundError, UnauthorizedError, UpstreamError, ValidationError


def make_client(settings, handler):
    return BookStackClient(settings, transport=httpx.MockTransport(handler))


def test_build_list_query_flattens_filters():
    query = build_list_query(
        {"count": 10, "offset": 0, "filter": {"name": "api", "book_id": 3, "draft": False, "chapter_id": None}}
    )
    assert query == {
        "count": 10,
        "offset": 0,
        "filter[name:like]": "%api%",
        "filter[book_id]": 3,
        "filter[draft]": "false",
    }


async def test_requests_carry_token_and_api_prefix(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": [], "total": 0})

    client = make_client(settings, handler)
    result = await client.list_books({"count": 5, "filter": {"name": "ops"}})
    await client.aclose()

    assert result == {"data": [], "total": 0}
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/books"
    assert request.url.params["count"] == "5"
    assert request.url.params["filter[name:like]"] == "%ops%"
    assert request.headers["Authorization"] == "Token token-id:token-secret"


async def test_create_and_update_send_json(settings):
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"id": 9})

    client = make_client(settings, handler)
    await client.create_page({"book_id": 1, "name": "P", "markdown": "x"})
    await client.update_chapter(4, {"name": "Renamed"})
    await client.aclose()

    assert seen == [
        ("POST", "/api/pages", {"book_id": 1, "name": "P", "markdown": "x"}),
        ("PUT", "/api/chapters/4", {"name": "Renamed"}),
    ]


async def test_delete_user_with_ownership_migration(settings):
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(204)

    client = make_client(settings, handler)
    await client.delete_user(7, migrate_ownership_id=1)
    await client.delete_book(3)
    await client.aclose()

    assert seen[0][:2] == ("DELETE", "/api/users/7")
    assert json.loads(seen[0][2]) == {"migrate_ownership_id": 1}
    assert seen[1] == ("DELETE", "/api/books/3", b"")


@pytest.mark.parametrize(
    "status, error_cls",
    [(401, UnauthorizedError), (403, UnauthorizedError), (404, NotFoundError), (422, ValidationError), (400, UpstreamError)],
)
async def test_error_statuses_map_to_taxonomy(settings, status, error_cls):
    def handler(request):
        return httpx.Response(status, json={"error": {"message": "Nope", "code": status}})

    client = make_client(settings, handler)
    with pytest.raises(error_cls) as exc_info:
        await client.get_book(1)
    await client.aclose()

    assert "Nope" in str(exc_info.value)
    assert exc_info.value.status_code == status


async def test_retries_server_errors_then_succeeds(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"id": 1})

    client = make_client(settings, handler)
    assert await client.get_page(1) == {"id": 1}
    await client.aclose()
    assert len(attempts) == 3


async def test_gives_up_after_max_retries(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        return httpx.Response(502, text="Bad Gateway")

    client = make_client(settings, handler)
    with pytest.raises(UpstreamError) as exc_info:
        await client.get_page(1)
    await client.aclose()

    assert len(attempts) == settings.max_retries + 1
    assert exc_info.value.status_code == 502


async def test_transport_errors_are_retried_and_wrapped(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(settings, handler)
    with pytest.raises(UpstreamError, match="ConnectError"):
        await client.list_shelves()
    await client.aclose()
    assert len(attempts) == settings.max_retries + 1


async def test_client_errors_are_not_retried(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        return httpx.Response(404, json={"error": {"message": "Page not found"}})

    client = make_client(settings, handler)
    with pytest.raises(NotFoundError):
        await client.get_page(99)
    await client.aclose()
    assert len(attempts) == 1


async def test_text_export(settings):
    def handler(request):
        assert request.url.path == "/api/pages/2/export/markdown"
        return httpx.Response(200, text="# Heading\n")

    client = make_client(settings, handler)
    assert await client.export_page(2, "markdown") == "# Heading\n"
    await client.aclose()


async def test_pdf_export_is_base64_encoded(settings):
    pdf = b"%PDF-1.4 binary\x00\xff"

    def handler(request):
        return httpx.Response(200, content=pdf, headers={"Content-Type": "application/pdf"})

    client = make_client(settings, handler)
    result = await client.export_book(1, "pdf")
    await client.aclose()

    assert result["format"] == "pdf"
    assert result["encoding"] == "base64"
    assert base64.b64decode(result["content"]) == pdf


async def test_attachment_link_is_sent_as_json(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": 1})

    client = make_client(settings, handler)
    await client.create_attachment({"uploaded_to": 3, "name": "Docs", "link": "https://example.com"})
    await client.aclose()

    assert seen[0].headers["Content-Type"] == "application/json"
    assert json.loads(seen[0].content) == {"uploaded_to": 3, "name": "Docs", "link": "https://example.com"}


async def test_attachment_file_update_uses_multipart_method_override(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": 5})

    client = make_client(settings, handler)
    content = base64.b64encode(b"hello file").decode()
    await client.update_attachment(5, {"name": "notes.txt", "file": content})
    await client.aclose()

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/api/attachments/5"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.content
    assert b'name="_method"' in body and b"PUT" in body
    assert b"hello file" in body


async def test_invalid_base64_upload_is_a_validation_error(settings):
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(settings, handler)
    with pytest.raises(ValidationError, match="base64"):
        await client.create_image({"name": "logo", "image": "not base64!!"})
    await client.aclose()


async def test_content_permissions_use_role_permissions_key(settings):
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={})

    client = make_client(settings, handler)
    await client.update_content_permissions("page", 4, {"permissions": [{"role_id": 2, "view": True}]})
    await client.aclose()

    assert seen == [("PUT", "/api/content-permissions/page/4", {"role_permissions": [{"role_id": 2, "view": True}]})]


async def test_recycle_bin_operations(settings):
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={"restore_count": 1})

    client = make_client(settings, handler)
    await client.restore_from_recycle_bin(8)
    await client.permanently_delete(8)
    await client.aclose()
    assert seen == [("PUT", "/api/recycle-bin/8"), ("DELETE", "/api/recycle-bin/8")]


async def test_health_check_reports_status(settings):
    client = make_client(settings, lambda request: httpx.Response(200, json={"data": []}))
    assert await client.health_check() is True
    await client.aclose()

    client = make_client(settings, lambda request: httpx.Response(401))
    assert await client.health_check() is False
    await client.aclose()


async def test_health_check_never_raises(settings):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    client = make_client(settings, handler)
    assert await client.health_check() is False
    await client.aclose()
