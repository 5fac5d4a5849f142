"""Email value object."""

from __future__ import annotations

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from ..exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class Email:
    """A trimmed, lower-cased and syntactically valid email address."""

    value: str

    def __post_init__(self) -> None:
        candidate = (self.value or "").strip().lower()
        try:
            info = validate_email(candidate, check_deliverability=False, test_environment=True)
        except EmailNotValidError as exc:
            raise ValidationError(f"Invalid email format: {exc}", "Invalid email format") from exc
        object.__setattr__(self, "value", info.normalized)

    @classmethod
    def create(cls, raw: str) -> Email:
        return cls(raw)

    def equals(self, other: Email) -> bool:
        return self.value == other.value

    def __str__(self) -> str:
        return self.value
