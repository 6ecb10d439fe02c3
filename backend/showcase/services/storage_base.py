"""Storage backend abstract base class.

Defines the interface the upload pipeline needs from object storage:
presigned single-PUT targets, public asset URLs and HEAD-style lookups.
Consumers should use get_storage() from storage.py to get the active backend.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from showcase.config import get_settings


@dataclass(frozen=True)
class ObjectStat:
    """Metadata of an object that exists in storage."""
    size: Optional[int] = None
    content_type: Optional[str] = None
    etag: Optional[str] = None


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    def __init__(self, public_base_url: Optional[str] = None):
        settings = get_settings()
        base = public_base_url or settings.STORAGE_CDN_URL or settings.STORAGE_PUBLIC_URL or ""
        self.public_base_url = base.rstrip("/")

    @abstractmethod
    def get_presigned_upload_url(
        self,
        object_name: str,
        content_type: Optional[str] = None,
        expires: int = 3600,
    ) -> str:
        """Generate a presigned URL for a single PUT upload.

        Args:
            object_name: Object name/key in storage
            content_type: MIME type the client must send
            expires: Expiration time in seconds

        Returns:
            Presigned URL for PUT request
        """
        ...

    @abstractmethod
    def stat_object(self, object_name: str) -> Optional[ObjectStat]:
        """Return object metadata, or None when the object does not exist."""
        ...

    @abstractmethod
    def delete_object(self, object_name: str) -> None:
        """Delete an object from storage."""
        ...

    def object_exists(self, object_name: str) -> bool:
        """Check if an object exists in storage."""
        return self.stat_object(object_name) is not None

    def get_public_url(self, object_name: str) -> str:
        """Durable URL the site uses to render the object."""
        return f"{self.public_base_url}/{object_name}"

    def extract_key(self, url: str) -> Optional[str]:
        """Reverse of get_public_url; None for URLs outside this storage."""
        prefix = f"{self.public_base_url}/"
        if self.public_base_url and url.startswith(prefix):
            return url[len(prefix):]
        return None
