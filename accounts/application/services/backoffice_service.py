from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from ...domain.exceptions import InsufficientPrivilegesError, UserNotFoundError
from ...domain.models import BackofficeUserView, Email, EventCollector, Role, User, UserRole
from ...domain.models.user import Clock, utcnow
from ...domain.ports.notifications import EventPublisher
from ...domain.ports.persistence import UserRepository
from .user_service import ListUsersOutput

logger = logging.getLogger(__name__)


class BackofficeService:
    """Administrative operations over user accounts."""

    def __init__(self, users: UserRepository, publisher: EventPublisher, clock: Clock = utcnow) -> None:
        self._users = users
        self._publisher = publisher
        self._clock = clock

    # ------------------------------------------------------------------
    def ensure_default_admin(
        self,
        email: Optional[str],
        password: Optional[str],
        name: str = "Administrator",
    ) -> Optional[User]:
        """
        Create the bootstrap super administrator if configured and missing.

        An existing account with that email is promoted to an active, verified
        super administrator. Its password is left as it is.
        """
        if not email or not password:
            return None
        normalized = Email.create(email).value
        existing = self._users.get_by_email(normalized)
        if existing:
            return self._promote_to_superadmin(existing)
        events = EventCollector()
        user = User.register(
            normalized,
            name,
            is_email_verified=True,
            is_active=True,
            role=UserRole.SUPERADMIN,
            clock=self._clock,
            events=events,
        )
        user.set_password(password)
        logger.info("Creating default administrator account for %s", normalized)
        self._users.create(user)
        self._publisher.publish(events.drain())
        return user

    def list_users(self) -> ListUsersOutput[BackofficeUserView]:
        users = self._users.list_all()
        return ListUsersOutput(users=[BackofficeUserView.from_user(user) for user in users], total=len(users))

    def get_user(self, user_id: UUID) -> BackofficeUserView:
        return BackofficeUserView.from_user(self._load(user_id))

    # Commands below act on behalf of ``actor``, who must rank at least as
    # high as the account being managed.
    def activate(self, actor: User, user_id: UUID) -> BackofficeUserView:
        user = self._load_managed(actor, user_id)
        events = EventCollector()
        user.activate(events=events)
        return self._save(user, events)

    def deactivate(self, actor: User, user_id: UUID) -> BackofficeUserView:
        user = self._load_managed(actor, user_id)
        events = EventCollector()
        user.deactivate(events=events)
        return self._save(user, events)

    def change_role(self, actor: User, user_id: UUID, role: str) -> BackofficeUserView:
        new_role = Role.create(role)
        if not actor.role.has_privileges_of(new_role):
            raise InsufficientPrivilegesError(f"User {actor.id} cannot grant {new_role}")
        user = self._load_managed(actor, user_id)
        events = EventCollector()
        user.update_role(new_role, events=events)
        return self._save(user, events)

    def mark_email_verified(self, actor: User, user_id: UUID) -> BackofficeUserView:
        user = self._load_managed(actor, user_id)
        events = EventCollector()
        user.mark_email_as_verified(events=events)
        return self._save(user, events)

    def delete_user(self, actor: User, user_id: UUID) -> None:
        self._load_managed(actor, user_id)
        self._users.delete(user_id)
        logger.info("User %s deleted user %s", actor.id, user_id)

    def _promote_to_superadmin(self, user: User) -> User:
        if user.role.is_super_admin() and user.is_active and user.is_email_verified:
            return user
        logger.warning("Promoting existing account %s to super administrator", user.id)
        events = EventCollector()
        if not user.role.is_super_admin():
            user.update_role(UserRole.SUPERADMIN, events=events)
        if not user.is_active:
            user.activate(events=events)
        if not user.is_email_verified:
            user.mark_email_as_verified(events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        return user

    def _load_managed(self, actor: User, user_id: UUID) -> User:
        user = self._load(user_id)
        if not actor.role.has_privileges_of(user.role):
            raise InsufficientPrivilegesError(
                f"User {actor.id} ({actor.role}) cannot manage {user.id} ({user.role})"
            )
        return user

    def _load(self, user_id: UUID) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def _save(self, user: User, events: EventCollector) -> BackofficeUserView:
        self._users.update(user)
        self._publisher.publish(events.drain())
        return BackofficeUserView.from_user(user)
