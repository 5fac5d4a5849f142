from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from ..models import Item, User


class UserRepository(Protocol):
    """Persistence functions for the User aggregate.

    ``create`` raises UserAlreadyExistsError when the normalised email (or the
    Google id) is already taken. Email lookups expect an already-normalised
    address.
    """

    def create(self, user: User) -> User:
        ...

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        ...

    def get_by_verification_token(self, token: str) -> Optional[User]:
        ...

    def get_by_reset_token(self, token: str) -> Optional[User]:
        ...

    def list_all(self) -> List[User]:
        ...

    def update(self, user: User) -> User:
        ...

    def delete(self, user_id: UUID) -> None:
        ...


class ItemRepository(Protocol):
    """Persistence functions for items."""

    def create(self, item: Item) -> Item:
        ...

    def get_by_id(self, item_id: UUID) -> Optional[Item]:
        ...

    def list_all(self) -> List[Item]:
        ...

    def update(self, item: Item) -> Item:
        ...
