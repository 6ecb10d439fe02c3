"""HTTP client for the admin API, as consumed by dashboard screens.

Covers the three remote collaborators of the upload and reorder pipeline:
entity create/patch, the presigned upload gateway and the bulk reorder
endpoint. The coordinators depend on the protocols below, so any of them can
be swapped for a fake.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

import httpx

from showcase.config import get_settings
from showcase.constants import SITE_SETTINGS_ENTITY_ID, SITE_SETTINGS_ENTITY_TYPE, collection_for
from showcase.dashboard.errors import (
    DashboardError,
    EntityMutationError,
    ReorderError,
    TransportError,
)
from showcase.dashboard.transport import LocalFile

settings = get_settings()
logger = logging.getLogger("showcase.dashboard.api")


@dataclass(frozen=True)
class UploadTarget:
    """Where to PUT the bytes, and the URL the asset will have afterwards."""
    upload_url: str
    final_asset_url: str
    expiry: datetime
    key: str
    document_id: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class ReorderItem:
    id: str
    position: int


class EntityApi(Protocol):
    async def create(self, entity_type: str, payload: dict) -> dict: ...

    async def patch(self, entity_type: str, entity_id: str, payload: dict) -> dict: ...


class UploadGateway(Protocol):
    async def issue_upload_target(
        self, entity_type: str, entity_id: str, intent: str, file: LocalFile
    ) -> UploadTarget: ...


class ReorderApi(Protocol):
    async def reorder(self, entity_type: str, items: list[ReorderItem]) -> dict: ...


def error_detail(response: httpx.Response) -> str:
    """Extract a readable message from a FastAPI error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # Request validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or str(detail)
    return response.reason_phrase


class AdminApiClient:
    """Bearer-authenticated client for ``/api/v1/admin``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        base_url = (base_url or settings.ADMIN_API_URL).rstrip("/")
        token = token if token is not None else settings.ADMIN_API_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=f"{base_url}{settings.API_V1_PREFIX}",
            headers=headers,
            timeout=timeout,
        )
        if client is not None and headers:
            self._client.headers.update(headers)

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        error_cls: type[DashboardError],
        fallback_message: str,
        **kwargs,
    ) -> dict:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = error_detail(e.response) or fallback_message
            logger.warning(f"{method} {url} failed: HTTP {e.response.status_code} {message}")
            raise error_cls(message, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise error_cls(fallback_message) from e

        if not response.content:
            return {}
        return response.json()

    async def create(self, entity_type: str, payload: dict) -> dict:
        collection = collection_for(entity_type)
        return await self._request(
            "POST",
            f"/admin/{collection}",
            EntityMutationError,
            f"Failed to create {entity_type.replace('-', ' ')}",
            json=payload,
        )

    async def patch(self, entity_type: str, entity_id: str, payload: dict) -> dict:
        if entity_type == SITE_SETTINGS_ENTITY_TYPE and entity_id == SITE_SETTINGS_ENTITY_ID:
            return await self._request(
                "PATCH",
                "/admin/site-settings",
                EntityMutationError,
                "Failed to update site settings",
                json=payload,
            )

        collection = collection_for(entity_type)
        return await self._request(
            "PATCH",
            f"/admin/{collection}/{entity_id}",
            EntityMutationError,
            f"Failed to update {entity_type.replace('-', ' ')}",
            json=payload,
        )

    async def get_site_settings(self) -> dict:
        return await self._request(
            "GET",
            "/admin/site-settings",
            EntityMutationError,
            "Failed to load site settings",
        )

    async def issue_upload_target(
        self, entity_type: str, entity_id: str, intent: str, file: LocalFile
    ) -> UploadTarget:
        data = await self._request(
            "POST",
            "/admin/upload/presigned-url",
            TransportError,
            "Failed to get upload URL",
            json={
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "intent": intent,
                "file_extension": file.extension,
                "content_type": file.content_type,
            },
        )
        try:
            return UploadTarget(
                upload_url=data["upload_url"],
                final_asset_url=data["public_url"],
                expiry=datetime.fromisoformat(data["expires_at"]),
                key=data["key"],
                document_id=data.get("id"),
                content_type=data.get("content_type"),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed upload target response: {data!r}")
            raise TransportError("Invalid upload target response") from e

    async def reorder(self, entity_type: str, items: list[ReorderItem]) -> dict:
        collection = collection_for(entity_type)
        return await self._request(
            "PATCH",
            f"/admin/{collection}/reorder",
            ReorderError,
            f"Failed to reorder {collection.replace('-', ' ')}",
            json={
                "reorder_items": [
                    {"id": str(item.id), "display_order": item.position} for item in items
                ]
            },
        )
