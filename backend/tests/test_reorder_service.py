"""Tests for bulk display-order persistence."""
import uuid
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from showcase.schemas.content import ReorderItem
from showcase.services.reorder import apply_display_order


class TestApplyDisplayOrder:
    @pytest.mark.asyncio
    async def test_updates_changed_rows(self, mock_db, make_result, admin):
        a, b, c = (SimpleNamespace(id=uuid.uuid4(), display_order=n) for n in (1, 2, 3))
        mock_db.execute.return_value = make_result(rows=[a, b, c])

        matched, modified = await apply_display_order(
            mock_db,
            "brand",
            [
                ReorderItem(id=c.id, display_order=1),
                ReorderItem(id=a.id, display_order=2),
                ReorderItem(id=b.id, display_order=3),
            ],
            admin=admin,
        )

        assert (matched, modified) == (3, 3)
        assert (c.display_order, a.display_order, b.display_order) == (1, 2, 3)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unchanged_rows_are_not_counted(self, mock_db, make_result):
        a = SimpleNamespace(id=uuid.uuid4(), display_order=1)
        mock_db.execute.return_value = make_result(rows=[a])

        matched, modified = await apply_display_order(
            mock_db,
            "service",
            [ReorderItem(id=a.id, display_order=1), ReorderItem(id=uuid.uuid4(), display_order=2)],
        )

        assert (matched, modified) == (1, 0)

    @pytest.mark.asyncio
    async def test_nothing_matched(self, mock_db, make_result):
        mock_db.execute.return_value = make_result(rows=[])

        with pytest.raises(HTTPException) as exc_info:
            await apply_display_order(mock_db, "team-member", [ReorderItem(id=uuid.uuid4(), display_order=1)])

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "No team members were found to update"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_ids_are_rejected(self, mock_db):
        item_id = uuid.uuid4()

        with pytest.raises(HTTPException) as exc_info:
            await apply_display_order(
                mock_db,
                "project",
                [ReorderItem(id=item_id, display_order=1), ReorderItem(id=item_id, display_order=2)],
            )

        assert exc_info.value.status_code == 400
        mock_db.execute.assert_not_awaited()
