"""Error taxonomy for the authentication core."""

from dataclasses import dataclass, field
from enum import StrEnum


class HashingError(Exception):
    """Raised when a password digest cannot be produced."""


class AuthErrorKind(StrEnum):
    """Transport-agnostic authentication failure causes."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"


# Shared by USER_NOT_FOUND and INVALID_CREDENTIALS so sign-in does not reveal
# which emails are registered.
INVALID_LOGIN_MESSAGE = "Invalid email or password"


@dataclass(frozen=True)
class AuthError:
    """An expected authentication failure.

    ``cause`` is kept for logging only and is never rendered to clients.
    """

    kind: AuthErrorKind
    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    @classmethod
    def invalid_credentials(cls) -> "AuthError":
        return cls(AuthErrorKind.INVALID_CREDENTIALS, INVALID_LOGIN_MESSAGE)

    @classmethod
    def user_not_found(cls) -> "AuthError":
        return cls(AuthErrorKind.USER_NOT_FOUND, INVALID_LOGIN_MESSAGE)

    @classmethod
    def email_already_exists(cls) -> "AuthError":
        return cls(AuthErrorKind.EMAIL_ALREADY_EXISTS, "Email already registered")

    @classmethod
    def database_error(cls, message: str, cause: BaseException | None = None) -> "AuthError":
        return cls(AuthErrorKind.DATABASE_ERROR, message, cause)

    @classmethod
    def unauthorized(cls, message: str = "Not authenticated") -> "AuthError":
        return cls(AuthErrorKind.UNAUTHORIZED, message)
