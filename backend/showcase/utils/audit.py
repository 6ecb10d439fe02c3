"""Structured audit logging for content and upload changes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

audit_logger = logging.getLogger("showcase.audit")

AUDIT_RESOURCES = frozenset(
    {
        "document",
        "service",
        "project",
        "brand",
        "testimonial",
        "team-member",
        "site_settings",
    }
)


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def log_audit_event(
    action: str,
    resource: str,
    *,
    resource_id: Any = None,
    admin: Any = None,
    details: Mapping[str, Any] | None = None,
) -> None:
    """Emit one JSON audit line, e.g. ``log_audit_event("reorder", "brand", admin=admin)``."""
    if resource not in AUDIT_RESOURCES:
        raise ValueError(f"Unknown audit resource: {resource}")

    record: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "resource": resource,
    }
    if resource_id is not None:
        record["resource_id"] = str(resource_id)

    if admin is not None:
        admin_id = getattr(admin, "id", None)
        record["admin_id"] = str(admin_id) if admin_id else None
        record["admin_email"] = getattr(admin, "email", None)

    if details:
        record["details"] = _jsonable(details)

    audit_logger.info(json.dumps(record, ensure_ascii=True))
