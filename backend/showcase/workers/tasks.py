"""Celery application and upload housekeeping tasks."""
import logging
import uuid
from datetime import datetime

from celery import Celery
from celery.schedules import crontab

from showcase.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Create Celery application
celery_app = Celery(
    "showcase",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_routes={
        "showcase.workers.tasks.expire_stale_documents": {"queue": "celery"},
        "showcase.workers.tasks.verify_document_upload": {"queue": "celery"},
    },
    beat_schedule={
        "expire-stale-documents": {
            "task": "showcase.workers.tasks.expire_stale_documents",
            "schedule": crontab(minute="*/15"),
        },
    },
)


def _utcnow() -> datetime:
    return datetime.utcnow()


@celery_app.task(bind=True, name="showcase.workers.tasks.expire_stale_documents")
def expire_stale_documents(self):
    """Mark pending upload records whose presigned URL has lapsed as expired.

    A pending record past ``expires_at`` can never be completed: the client
    would have to request a new upload target.
    """
    from sqlalchemy import update
    from showcase.models.document import Document
    from showcase.utils.db import sync_db_session

    now = _utcnow()
    with sync_db_session() as db:
        result = db.execute(
            update(Document)
            .where(Document.status == "pending", Document.expires_at < now)
            .values(status="expired", error_message="Upload URL expired")
        )
        db.commit()
        expired = result.rowcount or 0

    if expired:
        logger.info(f"Expired {expired} stale upload record(s)")
    return {"status": "ok", "expired": expired}


@celery_app.task(
    bind=True,
    name="showcase.workers.tasks.verify_document_upload",
    autoretry_for=(ConnectionError, TimeoutError),
    retry_backoff=True,
    max_retries=3,
)
def verify_document_upload(self, document_id: str):
    """Fallback verification for providers without a completion webhook."""
    from showcase.models.document import Document
    from showcase.services.document_verifier import apply_object_stat
    from showcase.services.storage import get_storage
    from showcase.utils.db import sync_db_session

    with sync_db_session() as db:
        document = db.get(Document, uuid.UUID(str(document_id)))
        if not document:
            return {"status": "error", "message": "Document not found"}

        if document.status == "verified":
            return {"status": "verified", "message": "Document already verified"}

        now = _utcnow()
        if document.expires_at is not None and document.expires_at < now and document.status == "pending":
            document.status = "expired"
            document.error_message = "Upload URL expired"
            db.commit()
            return {"status": "expired", "message": "Upload URL has expired"}

        stat = get_storage().stat_object(document.key)
        verified = apply_object_stat(document, stat, now)
        db.commit()

        if not verified:
            logger.warning(f"Upload {document.key} not found in storage")
            return {"status": document.status, "message": "File not found in storage"}

    logger.info(f"Verified upload {document_id}")
    return {"status": "verified", "message": "Document upload verified successfully"}
