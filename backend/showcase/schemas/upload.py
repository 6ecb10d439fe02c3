"""Pydantic schemas for presigned uploads and upload verification."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, field_validator

from showcase.constants import SITE_SETTINGS_ENTITY_ID


class FileDescriptor(BaseModel):
    """File metadata sent when requesting an upload target."""
    file_extension: Optional[str] = None
    content_type: Optional[str] = None


class PresignedUrlRequest(BaseModel):
    """Request an upload target for one file, or a batch via ``files``."""
    entity_type: str
    entity_id: str
    intent: str
    file_extension: Optional[str] = None
    content_type: Optional[str] = None
    files: Optional[List[FileDescriptor]] = None

    @field_validator("entity_id", mode="before")
    @classmethod
    def normalize_entity_id(cls, value):
        """Accept a UUID, or the fixed id of the site settings record."""
        if value == SITE_SETTINGS_ENTITY_ID:
            return value
        return str(UUID(str(value)))


class UploadTargetResponse(BaseModel):
    """A presigned destination plus the URL the asset will have once uploaded."""
    id: UUID  # upload record id
    intent: str
    upload_url: str
    key: str
    filename: str
    public_url: str
    content_type: str
    expires_in: int
    expires_at: datetime


class UploadTargetBatchResponse(BaseModel):
    """Batch presign response."""
    uploads: List[UploadTargetResponse]
    count: int


class VerifyUploadRequest(BaseModel):
    """Webhook body: identify the upload record by id or storage key."""
    document_id: Optional[UUID] = None
    key: Optional[str] = None


class DocumentResponse(BaseModel):
    """Upload record state after verification."""
    id: UUID
    status: str
    key: str
    public_url: str
    size: Optional[int] = None
    uploaded_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VerifyUploadResponse(BaseModel):
    document: DocumentResponse
    message: str
