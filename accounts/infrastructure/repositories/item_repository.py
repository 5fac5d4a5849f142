"""Repository for Item persistence."""

import sqlite3
from typing import List, Optional
from uuid import UUID

from ...domain.models.item import Item, ItemName
from ...domain.models.user import Clock, utcnow
from ...domain.ports.persistence import ItemRepository
from ..persistence.sqlite import SQLiteDatabase, from_db_datetime, to_db_datetime


class SQLiteItemRepository(ItemRepository):
    """Stores items in the ``items`` table."""

    def __init__(self, database: SQLiteDatabase, clock: Clock = utcnow) -> None:
        self._db = database
        self._clock = clock

    def create(self, item: Item) -> Item:
        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO items (id, name, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(item.id),
                    item.name.value,
                    item.description,
                    to_db_datetime(item.created_at),
                    to_db_datetime(item.updated_at),
                ),
            )
        return item

    def get_by_id(self, item_id: UUID) -> Optional[Item]:
        row = self._db.fetchone("SELECT * FROM items WHERE id = ?", (str(item_id),))
        if not row:
            return None
        return self._row_to_item(row)

    def list_all(self) -> List[Item]:
        rows = self._db.fetchall("SELECT * FROM items ORDER BY created_at DESC")
        return [self._row_to_item(row) for row in rows]

    def update(self, item: Item) -> Item:
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE items SET name = ?, description = ?, updated_at = ? WHERE id = ?",
                (item.name.value, item.description, to_db_datetime(item.updated_at), str(item.id)),
            )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> Item:
        return Item(
            id=UUID(row["id"]),
            name=ItemName(row["name"]),
            description=row["description"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
            clock=self._clock,
        )
