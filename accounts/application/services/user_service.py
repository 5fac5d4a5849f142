from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from ...domain.exceptions import InvalidCredentialsError, UserNotFoundError
from ...domain.models import EventCollector, User, UserListItem
from ...domain.ports.notifications import EventPublisher
from ...domain.ports.persistence import UserRepository

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ListUsersOutput(Generic[T]):
    users: List[T]
    total: int


class UserService:
    """Profile and SSO operations of the user-facing application."""

    def __init__(self, users: UserRepository, publisher: EventPublisher) -> None:
        self._users = users
        self._publisher = publisher

    def list_users(self) -> ListUsersOutput[UserListItem]:
        users = self._users.list_all()
        return ListUsersOutput(users=[UserListItem.from_user(user) for user in users], total=len(users))

    def get_profile(self, user_id: UUID) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def update_name(self, user_id: UUID, name: str) -> User:
        user = self.get_profile(user_id)
        user.update_name(name)
        return self._users.update(user)

    def change_password(self, user_id: UUID, current_password: Optional[str], new_password: str) -> User:
        """
        Change the password of ``user_id``.

        SSO-only accounts may set a first password without ``current_password``.
        """
        user = self.get_profile(user_id)
        if user.has_password() and not user.verify_password(current_password or ""):
            raise InvalidCredentialsError(
                f"Wrong current password for user {user_id}", "Current password is incorrect"
            )
        events = EventCollector()
        user.set_password(new_password, events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        return user

    def link_google_account(self, user_id: UUID, google_id: str, avatar_url: Optional[str] = None) -> User:
        user = self.get_profile(user_id)
        events = EventCollector()
        user.link_google_account(google_id, avatar_url, events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        return user

    def unlink_google_account(self, user_id: UUID) -> User:
        user = self.get_profile(user_id)
        events = EventCollector()
        user.unlink_google_account(events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        return user
