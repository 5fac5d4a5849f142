from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

import jwt

from ...domain.models import User

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me"


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    user_id: UUID
    email: str
    roles: List[str]
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and validates signed JWT access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expiration_minutes: int = 60 * 24 * 7,
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        if secret_key == DEFAULT_SECRET:
            logger.warning("JWT_SECRET is using the default value. Configure a secure secret in production.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expiration = timedelta(minutes=expiration_minutes)

    def create_access_token(self, user: User) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email.value,
            "roles": [str(user.role)],
            "iat": now,
            "exp": now + self._expiration,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> Optional[AccessTokenClaims]:
        """Return the token claims, or None if the token is invalid or expired."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        try:
            return AccessTokenClaims(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                roles=list(payload.get("roles", [])),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Rejected access token with malformed claims")
            return None
