"""Domain models for the accounts service."""

from .email import Email
from .events import EventCollector
from .item import Item, ItemName
from .password import Password
from .projections import BackofficeUserView, UserListItem
from .role import Role, UserRole
from .user import User

__all__ = [
    "BackofficeUserView",
    "Email",
    "EventCollector",
    "Item",
    "ItemName",
    "Password",
    "Role",
    "User",
    "UserListItem",
    "UserRole",
]
