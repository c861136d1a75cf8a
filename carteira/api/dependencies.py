"""FastAPI dependencies for authentication, ownership and services."""

import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from carteira.api.errors import unauthorized
from carteira.config import get_settings
from carteira.constants import SESSION_COOKIE_TOKEN, SESSION_COOKIE_USER_ID
from carteira.database import get_db
from carteira.models.account import Account
from carteira.services.account_service import AccountService
from carteira.services.auth import AuthService
from carteira.services.result import Err
from carteira.services.user_store import UserStore

logger = logging.getLogger(__name__)

# auto_error=False so that cookie sessions work without an Authorization header
security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
) -> AuthService:
    """Get auth service with dependencies."""
    settings = get_settings()
    return AuthService(
        UserStore(db),
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        token_ttl=timedelta(minutes=settings.jwt_expiration_minutes),
    )


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
) -> AccountService:
    """Get account service with dependencies."""
    return AccountService(db)


def get_current_user_id(
    request: Request,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    session_user_id: Annotated[str | None, Cookie(alias=SESSION_COOKIE_USER_ID)] = None,
    session_token: Annotated[str | None, Cookie(alias=SESSION_COOKIE_TOKEN)] = None,
) -> str:
    """Resolve the authenticated user id from session cookies or a bearer token.

    Both session cookies must be present to be used; a lone cookie is ignored.
    Without a complete cookie pair the Authorization header is consulted.
    The resolved id is also stored on ``request.state.user_id``.
    """
    if session_user_id and session_token:
        token = session_token
        expected_user_id = session_user_id
    elif credentials is not None and credentials.credentials:
        token = credentials.credentials
        expected_user_id = None
    else:
        raise unauthorized()

    result = auth_service.verify_token(token)
    if isinstance(result, Err):
        logger.info(f"{request.method} {request.url.path}: session rejected")
        raise unauthorized()

    user_id = result.value.user_id
    if expected_user_id is not None and expected_user_id != user_id:
        logger.warning(f"{request.method} {request.url.path}: session cookie/token mismatch")
        raise unauthorized()

    request.state.user_id = user_id
    return user_id


def get_owned_account(
    account_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> Account:
    """Load an account from the path and require the current user to own it."""
    account = account_service.get_account(account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")

    if account.owner_id != user_id:
        logger.warning(f"User {user_id} denied access to account {account_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this account",
        )

    return account
