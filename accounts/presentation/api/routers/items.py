from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ....application.services.item_service import ItemService
from ....core.dependencies import get_item_service
from ..schemas.item import CreateItemRequest, ItemResponse, UpdateItemRequest

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=List[ItemResponse])
def list_items(item_service: ItemService = Depends(get_item_service)) -> List[ItemResponse]:
    return [ItemResponse.from_item(item) for item in item_service.list_items()]


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: CreateItemRequest,
    item_service: ItemService = Depends(get_item_service),
) -> ItemResponse:
    return ItemResponse.from_item(item_service.create_item(payload.name, payload.description))


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: UUID,
    payload: UpdateItemRequest,
    item_service: ItemService = Depends(get_item_service),
) -> ItemResponse:
    item = item_service.update_item(item_id, name=payload.name, description=payload.description)
    return ItemResponse.from_item(item)
