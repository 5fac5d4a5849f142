"""Role value object and the privilege hierarchy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..exceptions import ValidationError


class UserRole(str, Enum):
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"
    SUPERADMIN = "ROLE_SUPERADMIN"


_HIERARCHY = {
    UserRole.USER: 1,
    UserRole.ADMIN: 2,
    UserRole.SUPERADMIN: 3,
}


@dataclass(frozen=True, slots=True)
class Role:
    """
    Authorization level of a user.

    Roles are totally ordered: USER < ADMIN < SUPERADMIN. Use
    :meth:`has_privileges_of` for authorization checks instead of comparing
    raw strings.
    """

    value: UserRole

    @classmethod
    def create(cls, raw: str) -> Role:
        try:
            return cls(UserRole(raw))
        except ValueError as exc:
            raise ValidationError(f"Invalid role: {raw!r}") from exc

    @classmethod
    def from_enum(cls, value: UserRole) -> Role:
        return cls(value)

    @classmethod
    def default(cls) -> Role:
        return cls(UserRole.USER)

    @property
    def rank(self) -> int:
        return _HIERARCHY[self.value]

    def is_user(self) -> bool:
        return self.value is UserRole.USER

    def is_admin(self) -> bool:
        return self.value is UserRole.ADMIN

    def is_super_admin(self) -> bool:
        return self.value is UserRole.SUPERADMIN

    def has_admin_privileges(self) -> bool:
        return self.is_admin() or self.is_super_admin()

    def has_privileges_of(self, other: Role) -> bool:
        return self.rank >= other.rank

    def equals(self, other: Role) -> bool:
        return self.value is other.value

    def __str__(self) -> str:
        return self.value.value
