"""File extension and content type helpers shared by the gateway and the dashboard."""
from typing import Optional

from showcase.constants import IMAGE_INTENTS

_EXTENSION_CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "avif": "image/avif",
    "pdf": "application/pdf",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_file_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or "" when there is none.

    Examples:
        get_file_extension("Logo.PNG")  -> "png"
        get_file_extension("archive.")  -> ""
    """
    last_dot = filename.rfind(".")
    if last_dot == -1 or last_dot == len(filename) - 1:
        return ""
    return filename[last_dot + 1:].lower()


def content_type_for_extension(extension: str) -> str:
    ext = extension.lower().lstrip(".")
    return _EXTENSION_CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def _normalize(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def resolve_content_type(
    file_extension: Optional[str],
    content_type: Optional[str],
    intent: str,
) -> tuple[str, str]:
    """Resolve the (extension, content type) pair stored for an upload.

    An explicit content type wins, then the extension, then a default based
    on the intent.
    """
    extension = (_normalize(file_extension) or "").lstrip(".").lower()
    resolved = _normalize(content_type)

    if not resolved and extension:
        guessed = content_type_for_extension(extension)
        if guessed != DEFAULT_CONTENT_TYPE:
            resolved = guessed

    if not resolved:
        resolved = "image/jpeg" if intent in IMAGE_INTENTS else DEFAULT_CONTENT_TYPE

    return extension, resolved
