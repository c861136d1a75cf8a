"""Translation of service errors into HTTP responses."""

import logging
from typing import NoReturn

from fastapi import HTTPException, Request, status

from carteira.services.errors import AuthError, AuthErrorKind

logger = logging.getLogger(__name__)

AUTH_ERROR_STATUS = {
    AuthErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.USER_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.EMAIL_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    AuthErrorKind.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
}

INTERNAL_ERROR_DETAIL = "Internal server error"


def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    """Build a 401 response carrying the bearer challenge header."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def raise_for_auth_error(error: AuthError, request: Request | None = None) -> NoReturn:
    """Raise the HTTPException that corresponds to an AuthError."""
    status_code = AUTH_ERROR_STATUS[error.kind]
    where = f"{request.method} {request.url.path}" if request is not None else "-"

    if status_code >= 500:
        cause = type(error.cause).__name__ if error.cause is not None else "-"
        logger.error(f"{where}: {error.kind} {error.message} (cause: {cause})")
        raise HTTPException(status_code=status_code, detail=INTERNAL_ERROR_DETAIL)

    logger.info(f"{where}: {error.kind}")
    if status_code == status.HTTP_401_UNAUTHORIZED:
        raise unauthorized(error.message)
    raise HTTPException(status_code=status_code, detail=error.message)
