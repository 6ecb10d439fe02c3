"""Upload completion verification.

Called by the storage provider's completion webhook (or by the Celery
fallback task) to confirm that a presigned upload actually landed before the
asset URL is treated as durable.
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.models.document import Document
from showcase.services.storage_base import ObjectStat, StorageBackend
from showcase.utils.audit import log_audit_event

logger = logging.getLogger(__name__)


def apply_object_stat(document: Document, stat: Optional[ObjectStat], now: datetime) -> bool:
    """Update a document from a storage lookup. Returns True when verified."""
    if stat is None:
        if document.status == "pending":
            document.status = "failed"
            document.error_message = "File not found in storage"
        return False

    document.status = "verified"
    document.verified_at = now
    document.error_message = None
    if document.uploaded_at is None:
        document.uploaded_at = now
    if stat.size is not None:
        document.size = stat.size
    return True


async def _find_document(
    db: AsyncSession,
    document_id: Optional[UUID],
    key: Optional[str],
) -> Document:
    if document_id is not None:
        result = await db.execute(select(Document).where(Document.id == document_id))
        document = result.scalar_one_or_none()
        if not document:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Document not found",
            )
        return document

    result = await db.execute(select(Document).where(Document.key == key))
    document = result.scalar_one_or_none()
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found with the provided key",
        )
    return document


async def verify_document_upload(
    db: AsyncSession,
    storage: StorageBackend,
    *,
    document_id: Optional[UUID] = None,
    key: Optional[str] = None,
) -> tuple[Document, str]:
    """Verify that the object behind an upload record exists in storage.

    Returns the (possibly updated) document and a human-readable message.
    """
    if document_id is None and not key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either document_id or key is required",
        )

    document = await _find_document(db, document_id, key)

    if document.status == "verified":
        return document, "Document already verified"

    if document.status == "expired":
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Document upload URL has expired",
        )

    try:
        stat = await asyncio.to_thread(storage.stat_object, document.key)
    except Exception as e:
        logger.error(f"Storage lookup failed for {document.key}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error verifying upload: {e}",
        )

    verified = apply_object_stat(document, stat, datetime.utcnow())
    await db.commit()

    if not verified:
        logger.warning(f"Upload {document.id} not found in storage (key={document.key})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found in storage. Upload may not have completed.",
        )

    log_audit_event(
        "verify",
        "document",
        resource_id=document.id,
        details={"key": document.key, "size": document.size},
    )
    return document, "Document upload verified successfully"
