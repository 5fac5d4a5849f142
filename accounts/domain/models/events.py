"""User domain events.

Aggregate command methods take an optional ``events`` collector and record
what happened there; nothing is buffered on the aggregate itself. The
application layer owns the collector for the duration of one use case and
publishes its contents once the aggregate has been persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

__all__ = [
    "DomainEvent",
    "EmailVerificationRequested",
    "EmailVerified",
    "EventCollector",
    "GoogleAccountLinked",
    "GoogleAccountUnlinked",
    "PasswordChanged",
    "PasswordResetRequested",
    "UserActivated",
    "UserDeactivated",
    "UserLoggedIn",
    "UserRegistered",
    "UserRoleChanged",
]


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent:
    """Base event. ``name`` is the dotted identifier used when publishing."""

    aggregate_id: UUID
    occurred_at: datetime
    id: UUID = field(default_factory=uuid4)

    name = "user.event"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserRegistered(DomainEvent):
    email: str
    name = "user.registered"


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailVerificationRequested(DomainEvent):
    expires_at: datetime
    name = "user.email_verification_requested"


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailVerified(DomainEvent):
    name = "user.email_verified"


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordResetRequested(DomainEvent):
    expires_at: datetime
    name = "user.password_reset_requested"


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordChanged(DomainEvent):
    name = "user.password_changed"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserLoggedIn(DomainEvent):
    name = "user.logged_in"


@dataclass(frozen=True, slots=True, kw_only=True)
class GoogleAccountLinked(DomainEvent):
    google_id: str
    name = "user.google_linked"


@dataclass(frozen=True, slots=True, kw_only=True)
class GoogleAccountUnlinked(DomainEvent):
    name = "user.google_unlinked"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserActivated(DomainEvent):
    name = "user.activated"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserDeactivated(DomainEvent):
    name = "user.deactivated"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserRoleChanged(DomainEvent):
    old_role: str
    new_role: str
    name = "user.role_changed"


class EventCollector:
    """Accumulates events raised while a single use case runs."""

    def __init__(self) -> None:
        self._events: List[DomainEvent] = []

    def record(self, event: DomainEvent) -> None:
        self._events.append(event)

    def drain(self) -> List[DomainEvent]:
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))


def record(events: Optional[EventCollector], event: DomainEvent) -> None:
    if events is not None:
        events.record(event)
