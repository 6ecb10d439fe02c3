"""Bulk display-order persistence for reorderable collections."""
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.constants import collection_for
from showcase.models.content import CONTENT_MODELS
from showcase.models.user import Admin
from showcase.schemas.content import ReorderItem
from showcase.utils.audit import log_audit_event


async def apply_display_order(
    db: AsyncSession,
    entity_type: str,
    items: list[ReorderItem],
    admin: Optional[Admin] = None,
) -> tuple[int, int]:
    """Write the submitted display order in one transaction.

    Returns (matched_count, modified_count). Unknown ids are ignored as long
    as at least one id matches.
    """
    model = CONTENT_MODELS[entity_type]
    collection = collection_for(entity_type)

    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Each id may appear only once in reorder_items",
        )

    result = await db.execute(select(model).where(model.id.in_(ids)))
    rows = {row.id: row for row in result.scalars().all()}

    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {collection.replace('-', ' ')} were found to update",
        )

    modified = 0
    for item in items:
        row = rows.get(item.id)
        if row is None or row.display_order == item.display_order:
            continue
        row.display_order = item.display_order
        modified += 1

    await db.commit()

    log_audit_event(
        "reorder",
        entity_type,
        admin=admin,
        details={"order": [str(item.id) for item in sorted(items, key=lambda i: i.display_order)]},
    )
    return len(rows), modified
