"""Storage backend selection."""
from functools import lru_cache

from showcase.config import get_settings
from showcase.services.storage_base import StorageBackend


@lru_cache()
def get_storage() -> StorageBackend:
    """Get the configured storage backend instance.

    Backends are imported lazily so only the selected client library is loaded.
    """
    settings = get_settings()
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "minio":
        from showcase.services.storage_minio import MinIOStorageBackend
        return MinIOStorageBackend()
    if backend == "s3":
        from showcase.services.storage_s3 import S3StorageBackend
        return S3StorageBackend()

    raise ValueError(f"Unsupported STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
