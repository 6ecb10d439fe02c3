"""S3-compatible storage backend using boto3.

Used against Cloudflare R2 or AWS S3. Presigned PUT URLs include the
Content-Type in the signature, so the client must upload with exactly the
content type it announced when requesting the target.
"""
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from showcase.config import get_settings
from showcase.services.storage_base import ObjectStat, StorageBackend

settings = get_settings()


class S3StorageBackend(StorageBackend):
    """Storage backend for any S3-compatible provider."""

    def __init__(self, s3_client=None, bucket: Optional[str] = None):
        super().__init__()
        if s3_client is None:
            scheme = "https" if settings.S3_SECURE else "http"
            endpoint = settings.S3_ENDPOINT
            endpoint_url = endpoint if "://" in endpoint else f"{scheme}://{endpoint}"
            s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=settings.S3_ACCESS_KEY,
                aws_secret_access_key=settings.S3_SECRET_KEY,
                config=Config(signature_version="s3v4"),
                region_name=settings.S3_REGION,  # R2 accepts "auto"
            )
        self.s3_client = s3_client
        self.bucket = bucket or settings.S3_BUCKET

    def get_presigned_upload_url(
        self,
        object_name: str,
        content_type: Optional[str] = None,
        expires: int = 3600,
    ) -> str:
        params = {
            "Bucket": self.bucket,
            "Key": object_name,
        }
        if content_type:
            params["ContentType"] = content_type

        return self.s3_client.generate_presigned_url(
            "put_object",
            Params=params,
            ExpiresIn=expires,
        )

    def stat_object(self, object_name: str) -> Optional[ObjectStat]:
        try:
            head = self.s3_client.head_object(Bucket=self.bucket, Key=object_name)
        except ClientError as e:
            error = e.response.get("Error", {})
            status_code = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if error.get("Code") in ("404", "NoSuchKey", "NotFound") or status_code == 404:
                return None
            raise
        return ObjectStat(
            size=head.get("ContentLength"),
            content_type=head.get("ContentType"),
            etag=(head.get("ETag") or "").strip('"') or None,
        )

    def delete_object(self, object_name: str) -> None:
        self.s3_client.delete_object(Bucket=self.bucket, Key=object_name)
