"""Password value object: policy validation and bcrypt hashing."""

from __future__ import annotations

import logging
import re
from typing import Optional

import bcrypt

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
MIN_LENGTH = 8
# bcrypt ignores everything past the 72nd byte.
MAX_BYTES = 72
SPECIAL_CHARACTERS = "!@#$%^&*(),.?\":{}|<>[]/-_=+`~"

_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (
        re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]"),
        "Password must contain at least one special character",
    ),
)


def password_policy_violation(plain: str) -> Optional[str]:
    """Return the first password rule ``plain`` breaks, or None if it passes."""
    if not isinstance(plain, str) or len(plain) < MIN_LENGTH:
        return f"Password must be at least {MIN_LENGTH} characters long"
    for pattern, message in _RULES:
        if not pattern.search(plain):
            return message
    if len(plain.encode("utf-8")) > MAX_BYTES:
        return f"Password must be at most {MAX_BYTES} bytes long"
    return None


class Password:
    """
    Hashed password. The plaintext is never stored on the instance.

    Build one with :meth:`create` from user input (validated and hashed) or
    with :meth:`from_hash` when loading a stored digest.
    """

    __slots__ = ("_hashed_value",)

    def __init__(self, hashed_value: str):
        self._hashed_value = hashed_value

    @classmethod
    def create(cls, plain: str) -> Password:
        cls.validate(plain)
        digest = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
        return cls(digest.decode("utf-8"))

    @classmethod
    def from_hash(cls, hashed_value: str) -> Password:
        if not hashed_value:
            raise ValidationError("Hashed password cannot be empty")
        return cls(hashed_value)

    @staticmethod
    def validate(plain: str) -> None:
        violation = password_policy_violation(plain)
        if violation:
            raise ValidationError(violation)

    @staticmethod
    def is_valid(plain: str) -> bool:
        return password_policy_violation(plain) is None

    @property
    def hashed_value(self) -> str:
        return self._hashed_value

    def verify(self, plain: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), self._hashed_value.encode("utf-8"))
        except Exception:  # noqa: BLE001 - a malformed digest must read as a failed match
            logger.warning("Password verification failed with an internal error", exc_info=True)
            return False

    def __repr__(self) -> str:
        return "<Password [hashed]>"
