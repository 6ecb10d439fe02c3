"""MinIO storage backend implementation."""
import logging
from datetime import timedelta
from typing import Optional

from minio import Minio
from minio.error import S3Error

from showcase.config import get_settings
from showcase.services.storage_base import ObjectStat, StorageBackend

settings = get_settings()
logger = logging.getLogger(__name__)


class MinIOStorageBackend(StorageBackend):
    """Storage backend using MinIO (local development and self-hosted)."""

    def __init__(self, client: Optional[Minio] = None, bucket: Optional[str] = None):
        super().__init__()
        self.client = client or Minio(
            settings.S3_ENDPOINT,
            access_key=settings.S3_ACCESS_KEY,
            secret_key=settings.S3_SECRET_KEY,
            secure=settings.S3_SECURE,
            region=settings.S3_REGION,
        )
        self.bucket = bucket or settings.S3_BUCKET
        if client is None:
            self._ensure_bucket()

    def _ensure_bucket(self):
        """Ensure the bucket exists."""
        try:
            if not self.client.bucket_exists(self.bucket):
                self.client.make_bucket(self.bucket)
        except S3Error as e:
            logger.error(f"Error ensuring bucket {self.bucket}: {e}")

    def get_presigned_upload_url(
        self,
        object_name: str,
        content_type: Optional[str] = None,
        expires: int = 3600,
    ) -> str:
        # MinIO's PUT presign does not sign Content-Type; the client still sends it
        return self.client.presigned_put_object(
            self.bucket,
            object_name,
            expires=timedelta(seconds=expires),
        )

    def stat_object(self, object_name: str) -> Optional[ObjectStat]:
        try:
            stat = self.client.stat_object(self.bucket, object_name)
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchObject", "NotFound"):
                return None
            raise
        return ObjectStat(size=stat.size, content_type=stat.content_type, etag=stat.etag)

    def delete_object(self, object_name: str) -> None:
        self.client.remove_object(self.bucket, object_name)
