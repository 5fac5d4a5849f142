from __future__ import annotations

import logging
from typing import Optional, Tuple

from ...domain.exceptions import InvalidCredentialsError, UserAlreadyExistsError, ValidationError
from ...domain.models import Email, EventCollector, Password, User
from ...domain.models.user import Clock, utcnow
from ...domain.ports.notifications import EventPublisher, Mailer
from ...domain.ports.persistence import UserRepository
from .token_service import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login, email verification and password reset flows."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        mailer: Mailer,
        publisher: EventPublisher,
        *,
        skip_email_verification: bool = False,
        auto_activate_users: bool = False,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._mailer = mailer
        self._publisher = publisher
        self._skip_email_verification = skip_email_verification
        self._auto_activate_users = auto_activate_users
        self._clock = clock

    # ------------------------------------------------------------------
    def register(self, email: str, name: str, password: str) -> Tuple[User, Optional[str]]:
        """
        Register a new user.

        Returns:
            Tuple of (User, verification_token). The token is None when email
            verification is skipped by configuration.

        Raises:
            ValidationError: If email, name or password are invalid
            UserAlreadyExistsError: If the email is already registered
        """
        normalized = Email.create(email)
        # Reject weak passwords before touching storage.
        Password.validate(password)
        if self._users.get_by_email(normalized.value):
            raise UserAlreadyExistsError(f"User with email {normalized.value} already exists")

        events = EventCollector()
        user = User.register(
            normalized.value,
            name,
            is_email_verified=self._skip_email_verification,
            is_active=self._auto_activate_users,
            clock=self._clock,
            events=events,
        )
        user.set_password(password)

        token: Optional[str] = None
        if not user.is_email_verified:
            token = user.initiate_email_verification(events=events)

        # The UNIQUE constraint settles concurrent registrations of one email.
        self._users.create(user)
        self._publisher.publish(events.drain())
        logger.info("Registered user %s (active=%s)", user.id, user.is_active)

        if token:
            self._mailer.send_verification_email(user.email.value, token)
        return user, token

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user and issue an access token.

        Raises:
            InvalidCredentialsError: For an unknown email, an account that is
                not allowed to log in, or a wrong password
        """
        try:
            normalized = Email.create(email).value
        except ValidationError as exc:
            raise InvalidCredentialsError("Malformed email on login") from exc

        user = self._users.get_by_email(normalized)
        if not user:
            raise InvalidCredentialsError("Unknown email on login")
        if not user.can_login():
            logger.info("Login refused for inactive or unverified user %s", user.id)
            raise InvalidCredentialsError(
                f"User {user.id} is not active or not verified",
                "Account is not active or email not verified",
            )
        if not user.verify_password(password):
            logger.info("Login failed for user %s: wrong password", user.id)
            raise InvalidCredentialsError(f"Wrong password for user {user.id}")

        events = EventCollector()
        user.record_login(events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        return user, self._tokens.create_access_token(user)

    # Email verification -------------------------------------------------
    def verify_email(self, token: str) -> bool:
        if not token:
            return False
        user = self._users.get_by_verification_token(token)
        if not user:
            return False
        events = EventCollector()
        if not user.verify_email(token, events=events):
            return False
        self._users.update(user)
        self._publisher.publish(events.drain())
        return True

    def resend_verification(self, email: str) -> Optional[str]:
        """Issue a fresh verification token. Returns None if nothing was sent."""
        user = self._find_by_email(email)
        if not user or user.is_email_verified:
            return None
        events = EventCollector()
        token = user.initiate_email_verification(events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        self._mailer.send_verification_email(user.email.value, token)
        return token

    # Password reset -----------------------------------------------------
    def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a reset token. Returns None if the email is unknown or inactive."""
        user = self._find_by_email(email)
        if not user or not user.is_active:
            return None
        events = EventCollector()
        token = user.initiate_password_reset(events=events)
        self._users.update(user)
        self._publisher.publish(events.drain())
        self._mailer.send_password_reset_email(user.email.value, token)
        return token

    def reset_password(self, token: str, new_password: str) -> bool:
        """
        Redeem a reset token.

        Raises:
            ValidationError: If the token is valid but the new password is weak
        """
        if not token:
            return False
        user = self._users.get_by_reset_token(token)
        if not user:
            return False
        events = EventCollector()
        if not user.reset_password(token, new_password, events=events):
            return False
        self._users.update(user)
        self._publisher.publish(events.drain())
        logger.info("Password reset completed for user %s", user.id)
        return True

    def _find_by_email(self, email: str) -> Optional[User]:
        try:
            normalized = Email.create(email).value
        except ValidationError:
            return None
        return self._users.get_by_email(normalized)
