from __future__ import annotations

from typing import Iterable, Protocol

from ..models.events import DomainEvent


class Mailer(Protocol):
    """Out-of-band delivery of account tokens."""

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        ...

    def send_password_reset_email(self, to_email: str, reset_token: str) -> bool:
        ...


class EventPublisher(Protocol):
    """Receives domain events once the aggregate that raised them is persisted."""

    def publish(self, events: Iterable[DomainEvent]) -> None:
        ...
