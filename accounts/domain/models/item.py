"""Item domain model: the example resource exposed next to user accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from ..exceptions import ValidationError
from .user import Clock, utcnow

ITEM_NAME_MIN_LENGTH = 3
ITEM_NAME_MAX_LENGTH = 100


@dataclass(frozen=True, slots=True)
class ItemName:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not (
            ITEM_NAME_MIN_LENGTH <= len(self.value) <= ITEM_NAME_MAX_LENGTH
        ):
            raise ValidationError(
                f"Item name must be between {ITEM_NAME_MIN_LENGTH} and {ITEM_NAME_MAX_LENGTH} characters"
            )

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class Item:
    id: UUID
    name: ItemName
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    clock: Clock = field(default=utcnow, repr=False, compare=False)

    @classmethod
    def create(cls, name: str, description: Optional[str] = None, *, clock: Clock = utcnow) -> Item:
        now = clock()
        return cls(
            id=uuid4(),
            name=ItemName(name),
            description=description,
            created_at=now,
            updated_at=now,
            clock=clock,
        )

    def update_name(self, name: str) -> None:
        self.name = ItemName(name)
        self.updated_at = self.clock()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description
        self.updated_at = self.clock()
