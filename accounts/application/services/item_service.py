from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ...domain.exceptions import ItemNotFoundError
from ...domain.models import Item
from ...domain.models.user import Clock, utcnow
from ...domain.ports.persistence import ItemRepository


class ItemService:
    """Create, list and edit items."""

    def __init__(self, items: ItemRepository, clock: Clock = utcnow) -> None:
        self._items = items
        self._clock = clock

    def create_item(self, name: str, description: Optional[str] = None) -> Item:
        return self._items.create(Item.create(name, description, clock=self._clock))

    def list_items(self) -> List[Item]:
        return self._items.list_all()

    def update_item(
        self,
        item_id: UUID,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Item:
        item = self._items.get_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(f"Item {item_id} not found")
        if name is not None:
            item.update_name(name)
        if description is not None:
            item.update_description(description)
        return self._items.update(item)
