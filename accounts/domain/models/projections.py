"""Read-only views of the User aggregate for other bounded contexts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from .role import UserRole
from .user import User


@dataclass(frozen=True, slots=True)
class BackofficeUserView:
    """What administrators see about a user. Credentials and tokens are left out."""

    id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> BackofficeUserView:
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            role=user.role.value,
            is_active=user.is_active,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class UserListItem:
    """Public listing entry used by the user-facing application."""

    id: UUID
    email: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserListItem:
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
