"""Drag-to-reorder surface for a dashboard list.

Moves only change the local working order. Nothing is sent until
``commit()``, which submits the whole order in one bulk request.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from showcase.constants import collection_for
from showcase.dashboard.api_client import ReorderApi, ReorderItem
from showcase.dashboard.errors import DashboardError, ReorderError, ReorderInFlightError
from showcase.dashboard.notifications import Notifier

logger = logging.getLogger("showcase.dashboard.reorder")


@dataclass
class OrderableItem:
    id: str
    current_position: int  # display_order known to the server
    working_position: int  # 1-based position in the working order
    entity: dict


class ReorderCoordinator:
    def __init__(
        self,
        entity_type: str,
        *,
        api: ReorderApi,
        notifier: Optional[Notifier] = None,
        on_saved: Optional[Callable[[list[OrderableItem]], None]] = None,
    ):
        self.entity_type = entity_type
        self.api = api
        self.notifier = notifier or Notifier()
        self.on_saved = on_saved
        self.collection_label = collection_for(entity_type).replace("-", " ")

        self._items: list[OrderableItem] = []
        self._seeded_ids: list[str] = []
        self._open = False
        self._in_flight = False

    @property
    def items(self) -> list[OrderableItem]:
        return list(self._items)

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def seed(self, entities: Iterable[dict]) -> list[OrderableItem]:
        """Open the surface with entities sorted by their server display order."""
        if self._open:
            raise ReorderError("Reorder surface is already open")

        ordered = sorted(entities, key=lambda e: e.get("display_order") or 0)
        self._items = [
            OrderableItem(
                id=str(entity["id"]),
                current_position=entity.get("display_order") or 0,
                working_position=index + 1,
                entity=entity,
            )
            for index, entity in enumerate(ordered)
        ]
        self._seeded_ids = [item.id for item in self._items]
        self._open = True
        return self.items

    def _ensure_editable(self) -> None:
        if not self._open:
            raise ReorderError("Reorder surface is not open")
        if self._in_flight:
            raise ReorderInFlightError("Reorder is already being saved")

    def _renumber(self) -> None:
        for index, item in enumerate(self._items):
            item.working_position = index + 1

    def move(self, from_index: int, to_index: int) -> None:
        self._ensure_editable()
        size = len(self._items)
        if not (0 <= from_index < size and 0 <= to_index < size):
            raise IndexError(f"Move {from_index} -> {to_index} out of range for {size} items")
        if from_index == to_index:
            return
        item = self._items.pop(from_index)
        self._items.insert(to_index, item)
        self._renumber()

    def move_up(self, index: int) -> None:
        if index > 0:
            self.move(index, index - 1)
        else:
            self._ensure_editable()

    def move_down(self, index: int) -> None:
        if index < len(self._items) - 1:
            self.move(index, index + 1)
        else:
            self._ensure_editable()

    def move_item(self, active_id, over_id) -> None:
        """Apply a drag gesture: drop ``active_id`` where ``over_id`` is."""
        self._ensure_editable()
        if over_id is None or str(active_id) == str(over_id):
            return
        ids = [item.id for item in self._items]
        try:
            from_index = ids.index(str(active_id))
            to_index = ids.index(str(over_id))
        except ValueError:
            raise IndexError(f"Unknown item in drag: {active_id} -> {over_id}") from None
        self.move(from_index, to_index)

    def has_changes(self) -> bool:
        return [item.id for item in self._items] != self._seeded_ids

    async def commit(self) -> bool:
        """Save the working order. Returns True when the surface closed."""
        self._ensure_editable()
        if not self.has_changes():
            self.close()
            return True

        payload = [ReorderItem(id=item.id, position=item.working_position) for item in self._items]
        self._in_flight = True
        try:
            await self.api.reorder(self.entity_type, payload)
        except DashboardError as e:
            logger.warning(f"Reorder of {self.collection_label} failed: {e}")
            self.notifier.error(e.message or f"Failed to reorder {self.collection_label}")
            return False
        finally:
            self._in_flight = False

        self.notifier.success(f"{self.collection_label.capitalize()} reordered successfully")
        saved = self.items
        self.close()
        if self.on_saved is not None:
            self.on_saved(saved)
        return True

    def close(self) -> None:
        """Tear the surface down; the next open must seed again."""
        self._items = []
        self._seeded_ids = []
        self._open = False
        self._in_flight = False
