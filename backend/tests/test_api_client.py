"""Tests for the admin API client."""
import json

import httpx
import pytest

from showcase.dashboard.api_client import AdminApiClient, ReorderItem
from showcase.dashboard.errors import EntityMutationError, ReorderError, TransportError
from showcase.dashboard.transport import LocalFile


def make_client(handler):
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="http://api.test/api/v1",
    )
    return AdminApiClient(client=http, token="admin-token")


class TestEntityCalls:
    @pytest.mark.asyncio
    async def test_create_posts_to_collection(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": "p-1", "title": "Atlas"})

        entity = await make_client(handler).create("team-member", {"name": "Ada"})

        assert entity == {"id": "p-1", "title": "Atlas"}
        assert seen["url"] == "http://api.test/api/v1/admin/team-members"
        assert seen["auth"] == "Bearer admin-token"
        assert seen["body"] == {"name": "Ada"}

    @pytest.mark.asyncio
    async def test_patch_error_uses_fastapi_detail(self):
        def handler(request):
            assert request.method == "PATCH"
            assert request.url.path == "/api/v1/admin/brands/b-1"
            return httpx.Response(404, json={"detail": "Brand not found"})

        with pytest.raises(EntityMutationError) as exc_info:
            await make_client(handler).patch("brand", "b-1", {"logo": "https://cdn.test/l.png"})

        assert exc_info.value.message == "Brand not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_site_settings_use_singleton_endpoint(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"id": "settings", "logo": "https://cdn.test/l.png"})

        client = make_client(handler)
        await client.get_site_settings()
        entity = await client.patch("admin", "settings", {"logo": "https://cdn.test/l.png"})

        assert entity["id"] == "settings"
        assert seen == [
            ("GET", "/api/v1/admin/site-settings"),
            ("PATCH", "/api/v1/admin/site-settings"),
        ]

    @pytest.mark.asyncio
    async def test_validation_errors_are_joined(self):
        def handler(request):
            return httpx.Response(422, json={"detail": [
                {"loc": ["body", "title"], "msg": "Field required"},
                {"loc": ["body", "slug"], "msg": "String too long"},
            ]})

        with pytest.raises(EntityMutationError, match="Field required; String too long"):
            await make_client(handler).create("project", {})

    @pytest.mark.asyncio
    async def test_connection_failure_uses_fallback_message(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(EntityMutationError, match="Failed to create project"):
            await make_client(handler).create("project", {"title": "Atlas"})


class TestUploadGateway:
    @pytest.mark.asyncio
    async def test_issue_upload_target(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "4b0c8a8e-2f7e-4a43-9d1b-0d5d7f3f8a11",
                "intent": "logo",
                "upload_url": "https://storage.test/uploads/brand/b-1/logo/x.svg?sig=1",
                "key": "uploads/brand/b-1/logo/x.svg",
                "filename": "x.svg",
                "public_url": "https://cdn.test/uploads/brand/b-1/logo/x.svg",
                "content_type": "image/svg+xml",
                "expires_in": 3600,
                "expires_at": "2026-10-19T10:00:00",
            })

        target = await make_client(handler).issue_upload_target(
            "brand", "b-1", "logo", LocalFile("Mark.SVG", b"<svg/>", "image/svg+xml")
        )

        assert seen["body"] == {
            "entity_type": "brand",
            "entity_id": "b-1",
            "intent": "logo",
            "file_extension": "svg",
            "content_type": "image/svg+xml",
        }
        assert target.upload_url.startswith("https://storage.test/")
        assert target.final_asset_url == "https://cdn.test/uploads/brand/b-1/logo/x.svg"
        assert target.key == "uploads/brand/b-1/logo/x.svg"
        assert target.expiry.hour == 10

    @pytest.mark.asyncio
    async def test_gateway_rejection_is_transport_error(self):
        def handler(request):
            return httpx.Response(500, json={"detail": "Failed to generate upload URL"})

        with pytest.raises(TransportError, match="Failed to generate upload URL"):
            await make_client(handler).issue_upload_target("brand", "b-1", "logo", LocalFile("a.png", b"x"))

    @pytest.mark.asyncio
    async def test_malformed_target_is_transport_error(self):
        with pytest.raises(TransportError, match="Invalid upload target response"):
            await make_client(lambda request: httpx.Response(200, json={"key": "k"})).issue_upload_target(
                "brand", "b-1", "logo", LocalFile("a.png", b"x")
            )


class TestReorder:
    @pytest.mark.asyncio
    async def test_reorder_sends_display_orders(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"matched_count": 2, "modified_count": 2, "message": "ok"})

        await make_client(handler).reorder("service", [ReorderItem("s-2", 1), ReorderItem("s-1", 2)])

        assert seen["method"] == "PATCH"
        assert seen["path"] == "/api/v1/admin/services/reorder"
        assert seen["body"] == {"reorder_items": [
            {"id": "s-2", "display_order": 1},
            {"id": "s-1", "display_order": 2},
        ]}

    @pytest.mark.asyncio
    async def test_reorder_failure(self):
        def handler(request):
            return httpx.Response(404, json={"detail": "No services were found to update"})

        with pytest.raises(ReorderError) as exc_info:
            await make_client(handler).reorder("service", [ReorderItem("s-1", 1)])

        assert exc_info.value.status_code == 404
