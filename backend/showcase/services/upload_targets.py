"""Presigned upload target issuance.

Targets are scoped to an existing entity: the object key embeds the entity
type, entity id and intent, so a target can only be issued once the owning
entity has been created.
"""
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Optional, Union

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import get_settings
from showcase.constants import (
    ENTITY_TYPES,
    SITE_SETTINGS_ENTITY_ID,
    SITE_SETTINGS_ENTITY_TYPE,
    UPLOAD_INTENTS,
)
from showcase.models.content import CONTENT_MODELS
from showcase.models.document import Document
from showcase.models.user import Admin
from showcase.schemas.upload import (
    FileDescriptor,
    PresignedUrlRequest,
    UploadTargetBatchResponse,
    UploadTargetResponse,
)
from showcase.services.site_settings import get_site_settings
from showcase.services.storage_base import StorageBackend
from showcase.utils.audit import log_audit_event
from showcase.utils.content_types import resolve_content_type

settings = get_settings()
logger = logging.getLogger(__name__)


def _entity_model(entity_type: str):
    if entity_type == "admin":
        return Admin
    return CONTENT_MODELS[entity_type]


async def ensure_entity_exists(db: AsyncSession, entity_type: str, entity_id: str) -> None:
    """Reject targets for entities that do not exist (yet).

    The site settings record always exists; it is created on first use.
    """
    if entity_id == SITE_SETTINGS_ENTITY_ID:
        await get_site_settings(db)
        return

    model = _entity_model(entity_type)
    result = await db.execute(select(model.id).where(model.id == uuid.UUID(entity_id)))
    if result.scalar_one_or_none() is None:
        label = entity_type.replace("-", " ").capitalize()
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found",
        )


def build_object_key(entity_type: str, entity_id, intent: str, extension: str) -> tuple[str, str]:
    """Return (filename, key) laid out as {prefix}/{entity_type}/{entity_id}/{intent}/{filename}."""
    filename = secrets.token_urlsafe(16)
    if extension:
        filename = f"{filename}.{extension.lstrip('.')}"
    key = f"{settings.STORAGE_FOLDER_PREFIX}/{entity_type}/{entity_id}/{intent}/{filename}"
    return filename, key


def _validate_request(request: PresignedUrlRequest) -> list[FileDescriptor]:
    if request.entity_type not in ENTITY_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid entity_type. Must be one of: {', '.join(ENTITY_TYPES)}",
        )

    if request.entity_id == SITE_SETTINGS_ENTITY_ID and request.entity_type != SITE_SETTINGS_ENTITY_TYPE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'entity_id "{SITE_SETTINGS_ENTITY_ID}" is only valid for entity_type "{SITE_SETTINGS_ENTITY_TYPE}"',
        )

    if request.intent not in UPLOAD_INTENTS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Invalid intent "{request.intent}". Must be one of: {", ".join(UPLOAD_INTENTS)}',
        )

    has_single_file = request.file_extension is not None and request.content_type is not None
    has_files = bool(request.files)

    if not has_single_file and not has_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide either file_extension and content_type, or a files array",
        )
    if has_single_file and has_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot provide both file_extension/content_type and a files array",
        )

    if not has_files:
        return [FileDescriptor(file_extension=request.file_extension, content_type=request.content_type)]

    if len(request.files) > settings.MAX_PRESIGNED_BATCH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"You can only generate up to {settings.MAX_PRESIGNED_BATCH} presigned URLs per request",
        )
    for index, entry in enumerate(request.files):
        if entry.file_extension is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"files[{index}].file_extension is required",
            )
        if entry.content_type is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"files[{index}].content_type is required",
            )
    return list(request.files)


def _issue_one(
    db: AsyncSession,
    storage: StorageBackend,
    request: PresignedUrlRequest,
    descriptor: FileDescriptor,
    admin: Optional[Admin],
) -> UploadTargetResponse:
    extension, content_type = resolve_content_type(
        descriptor.file_extension, descriptor.content_type, request.intent
    )
    filename, key = build_object_key(request.entity_type, request.entity_id, request.intent, extension)
    expires_in = settings.UPLOAD_URL_EXPIRES_SECONDS

    try:
        upload_url = storage.get_presigned_upload_url(key, content_type=content_type, expires=expires_in)
    except Exception as e:
        logger.error(f"Failed to presign upload for {key}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate upload URL",
        )

    expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
    document = Document(
        id=uuid.uuid4(),
        entity_type=request.entity_type,
        entity_id=request.entity_id,
        intent=request.intent,
        filename=filename,
        key=key,
        public_url=storage.get_public_url(key),
        upload_url=upload_url,
        file_extension=extension,
        content_type=content_type,
        status="pending",
        expires_at=expires_at,
        uploaded_by_id=admin.id if admin is not None else None,
    )
    db.add(document)

    return UploadTargetResponse(
        id=document.id,
        intent=document.intent,
        upload_url=upload_url,
        key=key,
        filename=filename,
        public_url=document.public_url,
        content_type=content_type,
        expires_in=expires_in,
        expires_at=expires_at,
    )


async def issue_upload_targets(
    db: AsyncSession,
    storage: StorageBackend,
    request: PresignedUrlRequest,
    admin: Optional[Admin] = None,
) -> Union[UploadTargetResponse, UploadTargetBatchResponse]:
    """Issue one presigned target (or a batch) and record a pending upload per target."""
    descriptors = _validate_request(request)
    await ensure_entity_exists(db, request.entity_type, request.entity_id)

    uploads = [_issue_one(db, storage, request, descriptor, admin) for descriptor in descriptors]
    await db.commit()

    log_audit_event(
        "presign",
        "document",
        admin=admin,
        details={
            "entity_type": request.entity_type,
            "entity_id": request.entity_id,
            "intent": request.intent,
            "keys": [upload.key for upload in uploads],
        },
    )

    if request.files:
        return UploadTargetBatchResponse(uploads=uploads, count=len(uploads))
    return uploads[0]
