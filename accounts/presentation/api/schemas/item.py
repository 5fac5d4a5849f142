from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from ....domain.models import Item


class CreateItemRequest(BaseModel):
    name: str
    description: Optional[str] = None


class UpdateItemRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ItemResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        return cls(
            id=item.id,
            name=item.name.value,
            description=item.description,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
