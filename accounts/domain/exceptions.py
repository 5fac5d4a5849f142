"""Domain exceptions for the accounts service.

Each exception carries an internal message (for logs) and a ``user_message``
that is safe to return to API clients.
"""


class AccountsError(Exception):
    """Base exception for account-related errors."""

    default_user_message = "An error occurred while processing your request."

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


class ValidationError(AccountsError):
    """A value object or entity was constructed from invalid input."""

    def __init__(self, message: str, user_message: str | None = None):
        # Validation messages describe the input, not internals.
        super().__init__(message, user_message or message)


class DomainInvariantError(AccountsError):
    """An operation would leave the aggregate in an inconsistent state."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message, user_message or message)


class InvalidCredentialsError(AccountsError):
    """Authentication failed. The user-facing message never says why."""

    default_user_message = "Invalid email or password"


class UserAlreadyExistsError(AccountsError):
    """A user with the same normalised email is already registered."""

    default_user_message = "A user with this email already exists"


class UserNotFoundError(AccountsError):
    """No user matches the requested identifier."""

    default_user_message = "User not found"


class ItemNotFoundError(AccountsError):
    """No item matches the requested identifier."""

    default_user_message = "Item not found"


class InsufficientPrivilegesError(AccountsError):
    """The acting user ranks below the account it tries to manage."""

    default_user_message = "Insufficient privileges"
