from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel

from ....domain.models import BackofficeUserView, UserRole


class AdminUserResponse(BaseModel):
    id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: BackofficeUserView) -> "AdminUserResponse":
        return cls(
            id=view.id,
            email=view.email,
            name=view.name,
            role=view.role,
            is_active=view.is_active,
            is_email_verified=view.is_email_verified,
            created_at=view.created_at,
            updated_at=view.updated_at,
        )


class AdminUserListResponse(BaseModel):
    users: List[AdminUserResponse]
    total: int


class ChangeRoleRequest(BaseModel):
    role: str
