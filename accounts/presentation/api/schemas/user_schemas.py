"""Pydantic schemas for user API endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ....domain.models import User, UserListItem


class UserResponse(BaseModel):
    """Response schema for the authenticated user's own data."""

    id: UUID
    email: str
    name: str
    role: str
    avatar_url: Optional[str] = None
    is_email_verified: bool
    has_password: bool
    uses_google_sso: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            role=str(user.role),
            avatar_url=user.avatar_url,
            is_email_verified=user.is_email_verified,
            has_password=user.has_password(),
            uses_google_sso=user.uses_google_sso(),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )


class UserListItemResponse(BaseModel):
    id: UUID
    email: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_item(cls, item: UserListItem) -> "UserListItemResponse":
        return cls(
            id=item.id,
            email=item.email,
            name=item.name,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class UserListResponse(BaseModel):
    users: List[UserListItemResponse]
    total: int


class UpdateProfileRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = None
    new_password: str
