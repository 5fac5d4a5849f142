"""User aggregate: identity, credentials and account lifecycle."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Union
from uuid import UUID, uuid4

from ..exceptions import DomainInvariantError, ValidationError
from . import events as ev
from .email import Email
from .password import Password
from .role import Role, UserRole

Clock = Callable[[], datetime]

EMAIL_VERIFICATION_TTL = timedelta(hours=24)
PASSWORD_RESET_TTL = timedelta(hours=1)
NAME_MAX_LENGTH = 255
TOKEN_BYTES = 32


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def generate_token() -> str:
    """256 random bits, hex encoded."""
    return secrets.token_hex(TOKEN_BYTES)


def tokens_match(stored: str, candidate: Any) -> bool:
    """Constant-time comparison of two tokens through their SHA-256 digests."""
    if not isinstance(candidate, str):
        return False
    stored_digest = hashlib.sha256(stored.encode("utf-8")).digest()
    candidate_digest = hashlib.sha256(candidate.encode("utf-8")).digest()
    if len(stored_digest) != len(candidate_digest):
        return False
    return hmac.compare_digest(stored_digest, candidate_digest)


def validate_name(name: Any) -> str:
    if not isinstance(name, str) or not 1 <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be between 1 and {NAME_MAX_LENGTH} characters")
    return name


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _as_uuid(value: Union[UUID, str]) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid user id: {value!r}") from exc


def _as_role(value: Union[Role, UserRole, str]) -> Role:
    if isinstance(value, Role):
        return value
    return Role.create(value)


def _check_token_pair(label: str, token: Optional[str], expiry: Optional[datetime]) -> None:
    if (token is None) != (expiry is None):
        raise ValidationError(f"{label} token and expiry must be set together")


class User:
    """
    User aggregate root.

    Attributes:
        id: Immutable UUID assigned at creation
        email: Normalised :class:`Email`; changing it clears verification
        name: Display name (1-255 characters)
        password_hash: bcrypt digest, or None for SSO-only accounts
        role: :class:`Role` used for authorization decisions
        google_id / avatar_url: Google SSO linkage
        is_email_verified: Whether the email address has been confirmed
        email_verification_token / email_verification_expiry: Pending verification
        password_reset_token / password_reset_expiry: Pending password reset
        is_active: Account enablement flag
        last_login_at: Time of the last successful login
        created_at / updated_at: Audit timestamps

    Command methods accept an optional ``events`` collector; see
    :mod:`accounts.domain.models.events`.
    """

    def __init__(
        self,
        *,
        id: Union[UUID, str],
        email: Union[Email, str],
        name: str,
        role: Union[Role, UserRole, str],
        created_at: datetime,
        updated_at: datetime,
        password_hash: Optional[str] = None,
        google_id: Optional[str] = None,
        avatar_url: Optional[str] = None,
        is_email_verified: bool = False,
        email_verification_token: Optional[str] = None,
        email_verification_expiry: Optional[datetime] = None,
        password_reset_token: Optional[str] = None,
        password_reset_expiry: Optional[datetime] = None,
        is_active: bool = True,
        last_login_at: Optional[datetime] = None,
        clock: Clock = utcnow,
    ) -> None:
        _check_token_pair("Email verification", email_verification_token, email_verification_expiry)
        _check_token_pair("Password reset", password_reset_token, password_reset_expiry)

        self._id = _as_uuid(id)
        self._email = email if isinstance(email, Email) else Email.create(email)
        self._name = validate_name(name)
        self._role = _as_role(role)
        self._password_hash = password_hash or None
        self._google_id = google_id or None
        self._avatar_url = avatar_url or None
        self._is_email_verified = bool(is_email_verified)
        self._email_verification_token = email_verification_token
        self._email_verification_expiry = _as_utc(email_verification_expiry)
        self._password_reset_token = password_reset_token
        self._password_reset_expiry = _as_utc(password_reset_expiry)
        self._is_active = bool(is_active)
        self._last_login_at = _as_utc(last_login_at)
        self._created_at = _as_utc(created_at)
        self._updated_at = _as_utc(updated_at)
        self._clock = clock

    @classmethod
    def register(
        cls,
        email: str,
        name: str,
        *,
        is_email_verified: bool = False,
        is_active: bool = True,
        role: Union[Role, UserRole, str] = UserRole.USER,
        clock: Clock = utcnow,
        events: Optional[ev.EventCollector] = None,
    ) -> User:
        """Create a brand new user with a fresh id and no credentials yet."""
        now = clock()
        user = cls(
            id=uuid4(),
            email=email,
            name=name,
            role=role,
            is_email_verified=is_email_verified,
            is_active=is_active,
            created_at=now,
            updated_at=now,
            clock=clock,
        )
        ev.record(events, ev.UserRegistered(aggregate_id=user.id, occurred_at=now, email=user.email.value))
        return user

    # Read access -------------------------------------------------------------
    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> Email:
        return self._email

    @property
    def name(self) -> str:
        return self._name

    @property
    def password_hash(self) -> Optional[str]:
        return self._password_hash

    @property
    def role(self) -> Role:
        return self._role

    @property
    def google_id(self) -> Optional[str]:
        return self._google_id

    @property
    def avatar_url(self) -> Optional[str]:
        return self._avatar_url

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def email_verification_token(self) -> Optional[str]:
        return self._email_verification_token

    @property
    def email_verification_expiry(self) -> Optional[datetime]:
        return self._email_verification_expiry

    @property
    def password_reset_token(self) -> Optional[str]:
        return self._password_reset_token

    @property
    def password_reset_expiry(self) -> Optional[datetime]:
        return self._password_reset_expiry

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def last_login_at(self) -> Optional[datetime]:
        return self._last_login_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    # Profile -----------------------------------------------------------------
    def update_name(self, name: str) -> None:
        self._name = validate_name(name)
        self._touch()

    def update_email(self, email: str) -> None:
        """
        Change the address and require it to be verified again.

        An address that normalises to the current one is a no-op and keeps the
        verification state.
        """
        new_email = Email.create(email)
        if new_email.equals(self._email):
            return
        self._email = new_email
        self._is_email_verified = False
        self._touch()

    def update_role(
        self,
        role: Union[Role, UserRole, str],
        *,
        events: Optional[ev.EventCollector] = None,
    ) -> None:
        new_role = _as_role(role)
        old_role = self._role
        self._role = new_role
        now = self._touch()
        ev.record(
            events,
            ev.UserRoleChanged(
                aggregate_id=self._id, occurred_at=now, old_role=str(old_role), new_role=str(new_role)
            ),
        )

    def update_avatar_url(self, avatar_url: Optional[str]) -> None:
        self._avatar_url = avatar_url or None
        self._touch()

    # Authentication ----------------------------------------------------------
    def can_login(self) -> bool:
        """Active, and either verified or backed by a Google identity."""
        return self._is_active and (self._is_email_verified or bool(self._google_id))

    def record_login(self, *, events: Optional[ev.EventCollector] = None) -> None:
        now = self._clock()
        self._last_login_at = now
        self._updated_at = now
        ev.record(events, ev.UserLoggedIn(aggregate_id=self._id, occurred_at=now))

    def verify_password(self, plain: str) -> bool:
        if not self._password_hash:
            return False
        return Password.from_hash(self._password_hash).verify(plain)

    def set_password(self, plain: str, *, events: Optional[ev.EventCollector] = None) -> None:
        self._password_hash = Password.create(plain).hashed_value
        now = self._touch()
        ev.record(events, ev.PasswordChanged(aggregate_id=self._id, occurred_at=now))

    def has_password(self) -> bool:
        return bool(self._password_hash)

    def uses_google_sso(self) -> bool:
        return bool(self._google_id)

    # Email verification ------------------------------------------------------
    def initiate_email_verification(self, *, events: Optional[ev.EventCollector] = None) -> str:
        token = generate_token()
        now = self._clock()
        self._email_verification_token = token
        self._email_verification_expiry = now + EMAIL_VERIFICATION_TTL
        self._updated_at = now
        ev.record(
            events,
            ev.EmailVerificationRequested(
                aggregate_id=self._id, occurred_at=now, expires_at=self._email_verification_expiry
            ),
        )
        return token

    def verify_email(self, token: str, *, events: Optional[ev.EventCollector] = None) -> bool:
        if not self._email_verification_token or not self._email_verification_expiry:
            return False
        if not tokens_match(self._email_verification_token, token):
            return False
        now = self._clock()
        if now > self._email_verification_expiry:
            return False
        self._apply_email_verified(now)
        ev.record(events, ev.EmailVerified(aggregate_id=self._id, occurred_at=now))
        return True

    def mark_email_as_verified(self, *, events: Optional[ev.EventCollector] = None) -> None:
        now = self._clock()
        self._apply_email_verified(now)
        ev.record(events, ev.EmailVerified(aggregate_id=self._id, occurred_at=now))

    def _apply_email_verified(self, now: datetime) -> None:
        self._is_email_verified = True
        self._email_verification_token = None
        self._email_verification_expiry = None
        self._updated_at = now

    # Password reset ----------------------------------------------------------
    def initiate_password_reset(self, *, events: Optional[ev.EventCollector] = None) -> str:
        token = generate_token()
        now = self._clock()
        self._password_reset_token = token
        self._password_reset_expiry = now + PASSWORD_RESET_TTL
        self._updated_at = now
        ev.record(
            events,
            ev.PasswordResetRequested(
                aggregate_id=self._id, occurred_at=now, expires_at=self._password_reset_expiry
            ),
        )
        return token

    def reset_password(
        self,
        token: str,
        new_password: str,
        *,
        events: Optional[ev.EventCollector] = None,
    ) -> bool:
        """
        Redeem a reset token and set ``new_password``.

        Returns False when no reset is pending, the token does not match or it
        has expired. A password that breaks the policy raises ValidationError
        and leaves the token in place.
        """
        if not self._password_reset_token or not self._password_reset_expiry:
            return False
        if not tokens_match(self._password_reset_token, token):
            return False
        if self._clock() > self._password_reset_expiry:
            return False
        self.set_password(new_password, events=events)
        self.clear_password_reset_token()
        return True

    def clear_password_reset_token(self) -> None:
        self._password_reset_token = None
        self._password_reset_expiry = None
        self._touch()

    # Account state -----------------------------------------------------------
    def activate(self, *, events: Optional[ev.EventCollector] = None) -> None:
        self._is_active = True
        now = self._touch()
        ev.record(events, ev.UserActivated(aggregate_id=self._id, occurred_at=now))

    def deactivate(self, *, events: Optional[ev.EventCollector] = None) -> None:
        self._is_active = False
        now = self._touch()
        ev.record(events, ev.UserDeactivated(aggregate_id=self._id, occurred_at=now))

    # Google SSO --------------------------------------------------------------
    def link_google_account(
        self,
        google_id: str,
        avatar_url: Optional[str] = None,
        *,
        events: Optional[ev.EventCollector] = None,
    ) -> None:
        if not google_id:
            raise ValidationError("Google account id cannot be empty")
        self._google_id = google_id
        if avatar_url:
            self._avatar_url = avatar_url
        # Google has already confirmed the address.
        self._is_email_verified = True
        now = self._touch()
        ev.record(events, ev.GoogleAccountLinked(aggregate_id=self._id, occurred_at=now, google_id=google_id))

    def unlink_google_account(self, *, events: Optional[ev.EventCollector] = None) -> None:
        if not self.has_password():
            raise DomainInvariantError(
                "Cannot unlink Google account without a password set",
                "Set a password before unlinking your Google account",
            )
        self._google_id = None
        now = self._touch()
        ev.record(events, ev.GoogleAccountUnlinked(aggregate_id=self._id, occurred_at=now))

    # Persistence -------------------------------------------------------------
    def to_primitives(self) -> Dict[str, Any]:
        return {
            "id": str(self._id),
            "email": self._email.value,
            "name": self._name,
            "password_hash": self._password_hash,
            "role": self._role.value.value,
            "google_id": self._google_id,
            "avatar_url": self._avatar_url,
            "is_email_verified": self._is_email_verified,
            "email_verification_token": self._email_verification_token,
            "email_verification_expiry": self._email_verification_expiry,
            "password_reset_token": self._password_reset_token,
            "password_reset_expiry": self._password_reset_expiry,
            "is_active": self._is_active,
            "last_login_at": self._last_login_at,
            "created_at": self._created_at,
            "updated_at": self._updated_at,
        }

    @classmethod
    def from_primitives(cls, record: Mapping[str, Any], *, clock: Clock = utcnow) -> User:
        return cls(
            id=record["id"],
            email=record["email"],
            name=record["name"],
            role=record["role"],
            password_hash=record.get("password_hash"),
            google_id=record.get("google_id"),
            avatar_url=record.get("avatar_url"),
            is_email_verified=record.get("is_email_verified", False),
            email_verification_token=record.get("email_verification_token"),
            email_verification_expiry=record.get("email_verification_expiry"),
            password_reset_token=record.get("password_reset_token"),
            password_reset_expiry=record.get("password_reset_expiry"),
            is_active=record.get("is_active", True),
            last_login_at=record.get("last_login_at"),
            created_at=record["created_at"],
            updated_at=record["updated_at"],
            clock=clock,
        )

    def _touch(self) -> datetime:
        now = self._clock()
        self._updated_at = now
        return now

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"<User id={self._id} email={self._email.value} role={self._role} "
            f"active={self._is_active} verified={self._is_email_verified}>"
        )
