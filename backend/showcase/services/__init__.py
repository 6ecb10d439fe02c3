"""Services exports."""
from showcase.services.storage import get_storage
from showcase.services.storage_base import ObjectStat, StorageBackend

__all__ = [
    "ObjectStat",
    "StorageBackend",
    "get_storage",
]
