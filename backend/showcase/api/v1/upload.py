"""Presigned upload target endpoint."""
from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.database import get_db
from showcase.models.user import Admin
from showcase.auth.jwt import get_current_admin
from showcase.schemas.upload import (
    PresignedUrlRequest,
    UploadTargetBatchResponse,
    UploadTargetResponse,
)
from showcase.services.storage import get_storage
from showcase.services.storage_base import StorageBackend
from showcase.services.upload_targets import issue_upload_targets

router = APIRouter(prefix="/admin/upload", tags=["Upload"])


@router.post(
    "/presigned-url",
    response_model=Union[UploadTargetResponse, UploadTargetBatchResponse],
)
async def generate_presigned_url(
    request: PresignedUrlRequest,
    current_admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Issue a short-lived direct-upload target for an existing entity.

    The browser (or dashboard client) PUTs the file to ``upload_url`` and then
    stores ``public_url`` on the entity. A pending upload record is kept until
    the completion webhook verifies the object.
    """
    return await issue_upload_targets(db, storage, request, admin=current_admin)
