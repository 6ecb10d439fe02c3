"""Workers exports."""
from showcase.workers.tasks import (
    celery_app,
    expire_stale_documents,
    verify_document_upload,
)

__all__ = [
    "celery_app",
    "expire_stale_documents",
    "verify_document_upload",
]
