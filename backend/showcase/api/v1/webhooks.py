"""Storage webhooks: upload completion verification."""
import hashlib
import hmac

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import get_settings
from showcase.database import get_db
from showcase.schemas.upload import DocumentResponse, VerifyUploadRequest, VerifyUploadResponse
from showcase.services.document_verifier import verify_document_upload
from showcase.services.storage import get_storage
from showcase.services.storage_base import StorageBackend

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])
settings = get_settings()


def verify_webhook_caller(token: str, signature: str, body: bytes) -> None:
    """Verify the storage webhook caller.

    - If UPLOAD_WEBHOOK_TOKEN is configured, caller must provide either:
      - X-Webhook-Token header (exact match) or token query param
      - or X-Webhook-Signature (HMAC-SHA256 of the raw body)
    - If no token is configured the hook is open (local development).
    """
    secret = settings.UPLOAD_WEBHOOK_TOKEN
    if not secret:
        return

    if token and hmac.compare_digest(token, secret):
        return

    if signature:
        expected_signature = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
        if hmac.compare_digest(signature, expected_signature):
            return

    raise HTTPException(status_code=403, detail="Invalid webhook auth")


@router.post("/verify-document-upload", response_model=VerifyUploadResponse)
async def verify_document_upload_hook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Confirm that an uploaded object exists before its URL is treated as durable.

    Body: ``{"document_id": ...}`` or ``{"key": ...}``.
    """
    body = await request.body()

    verify_webhook_caller(
        request.headers.get("X-Webhook-Token")
        or request.query_params.get("token")
        or "",
        request.headers.get("X-Webhook-Signature") or "",
        body,
    )

    try:
        payload = VerifyUploadRequest.model_validate_json(body or b"{}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON")

    document, message = await verify_document_upload(
        db,
        storage,
        document_id=payload.document_id,
        key=payload.key,
    )
    return VerifyUploadResponse(
        document=DocumentResponse.model_validate(document),
        message=message,
    )
