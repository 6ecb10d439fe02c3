"""Shared fixtures: in-memory fakes for the admin API, storage and database."""
import asyncio
import uuid
from datetime import datetime, timedelta
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from showcase.dashboard.api_client import UploadTarget
from showcase.dashboard.errors import EntityMutationError, ReorderError, TransportError
from showcase.dashboard.notifications import Notifier
from showcase.dashboard.previews import PreviewRegistry
from showcase.dashboard.session import UploadSession
from showcase.dashboard.transport import LocalFile
from showcase.services.storage_base import ObjectStat, StorageBackend


class FakeGateway:
    """Presigned upload gateway that records every request."""

    def __init__(self):
        self.calls: list[tuple[str, str, str, str]] = []
        self.fail_intents: set[str] = set()

    async def issue_upload_target(self, entity_type, entity_id, intent, file):
        self.calls.append((entity_type, entity_id, intent, file.name))
        if intent in self.fail_intents:
            raise TransportError("Failed to generate upload URL", status_code=500)
        key = f"uploads/{entity_type}/{entity_id}/{intent}/{file.name}"
        return UploadTarget(
            upload_url=f"https://storage.test/{key}?X-Amz-Signature=abc",
            final_asset_url=f"https://cdn.test/{key}",
            expiry=datetime.utcnow() + timedelta(hours=1),
            key=key,
            document_id=str(uuid.uuid4()),
        )


class FakeTransport:
    """Direct upload transport; files can be failed or held behind an event."""

    def __init__(self):
        self.puts: list[tuple[str, str]] = []
        self.fail_names: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}

    async def put(self, upload_url, file, on_progress=None):
        gate = self.gates.get(file.name)
        if gate is not None:
            await gate.wait()
        if file.name in self.fail_names:
            raise TransportError("Upload failed with status: 403", status_code=403)
        if on_progress:
            on_progress(50)
            on_progress(100)
        self.puts.append((upload_url, file.name))


class FakeEntityApi:
    def __init__(self):
        self.created: list[tuple[str, dict]] = []
        self.patches: list[tuple[str, str, dict]] = []
        self.fail_create = False
        self.fail_patch = False

    async def create(self, entity_type, payload):
        if self.fail_create:
            raise EntityMutationError("Project with this slug already exists", status_code=400)
        self.created.append((entity_type, dict(payload)))
        return {"id": str(uuid.uuid4()), **payload}

    async def patch(self, entity_type, entity_id, payload):
        self.patches.append((entity_type, entity_id, dict(payload)))
        if self.fail_patch:
            raise EntityMutationError("Database unavailable", status_code=503)
        return {"id": entity_id, **payload}


class FakeReorderApi:
    def __init__(self):
        self.calls: list[tuple[str, list]] = []
        self.fail = False
        self.gate: Optional[asyncio.Event] = None

    async def reorder(self, entity_type, items):
        self.calls.append((entity_type, list(items)))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ReorderError("No projects were found to update", status_code=404)
        return {"matched_count": len(items), "modified_count": len(items)}


class FakeStorage(StorageBackend):
    """Storage backend holding object metadata in a dict."""

    def __init__(self):
        super().__init__(public_base_url="https://cdn.test")
        self.objects: dict[str, ObjectStat] = {}
        self.presigned: list[tuple[str, Optional[str], int]] = []
        self.fail_stat = False

    def get_presigned_upload_url(self, object_name, content_type=None, expires=3600):
        self.presigned.append((object_name, content_type, expires))
        return f"https://storage.test/{object_name}?X-Amz-Expires={expires}"

    def stat_object(self, object_name):
        if self.fail_stat:
            raise ConnectionError("storage unreachable")
        return self.objects.get(object_name)

    def delete_object(self, object_name):
        self.objects.pop(object_name, None)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def entity_api():
    return FakeEntityApi()


@pytest.fixture
def reorder_api():
    return FakeReorderApi()


@pytest.fixture
def previews():
    return PreviewRegistry()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def make_file():
    def _make(name="photo.png", content=b"\x89PNG fake image bytes", content_type="image/png"):
        return LocalFile(name=name, content=content, content_type=content_type)
    return _make


@pytest.fixture
def make_session(gateway, transport, previews):
    def _make(**kwargs):
        kwargs.setdefault("intent", "image")
        return UploadSession(
            "project",
            gateway=gateway,
            transport=transport,
            previews=previews,
            **kwargs,
        )
    return _make


@pytest.fixture
def mock_db():
    """AsyncSession stand-in; set ``mock_db.execute.return_value`` per test."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


def query_result(scalar=None, rows=None):
    """Build the object returned by ``await db.execute(...)``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalar_one.return_value = scalar
    result.scalars.return_value.all.return_value = rows or []
    return result


@pytest.fixture
def admin():
    admin = MagicMock()
    admin.id = uuid.uuid4()
    admin.email = "editor@example.com"
    admin.is_active = True
    return admin


@pytest.fixture
def make_result():
    return query_result
