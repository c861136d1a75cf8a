"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials

from carteira.api.dependencies import get_auth_service, get_current_user_id, security
from carteira.api.errors import raise_for_auth_error, unauthorized
from carteira.config import get_settings
from carteira.constants import (
    SESSION_COOKIE_OPTIONS,
    SESSION_COOKIE_TOKEN,
    SESSION_COOKIE_USER_ID,
)
from carteira.schemas.auth import (
    AuthResponse,
    UserResponse,
    UserSignIn,
    UserSignUp,
    VerifyResponse,
)
from carteira.services.auth import AuthService
from carteira.services.result import Err

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_session_cookies(response: Response, auth: AuthResponse) -> None:
    """Bind the session to the browser with the user id and token cookies."""
    max_age = get_settings().session_max_age
    for key, value in ((SESSION_COOKIE_USER_ID, auth.user.id), (SESSION_COOKIE_TOKEN, auth.token)):
        response.set_cookie(key, value, max_age=max_age, **SESSION_COOKIE_OPTIONS)


@router.post("/signup", response_model=AuthResponse)
async def sign_up(
    user_data: UserSignUp,
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and start a session."""
    result = auth_service.sign_up(user_data.email, user_data.password, user_data.name)
    if isinstance(result, Err):
        raise_for_auth_error(result.error, request)

    set_session_cookies(response, result.value)
    return result.value


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    credentials: UserSignIn,
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Sign in with email and password."""
    result = auth_service.sign_in(credentials.email, credentials.password)
    if isinstance(result, Err):
        raise_for_auth_error(result.error, request)

    set_session_cookies(response, result.value)
    return result.value


@router.get("/me", response_model=UserResponse)
async def get_me(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    result = auth_service.me(user_id)
    if isinstance(result, Err):
        raise_for_auth_error(result.error, request)
    return result.value


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    request: Request,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
):
    """Verify a bearer token and return the user it identifies."""
    if credentials is None or not credentials.credentials:
        raise unauthorized("Token not provided")

    claims = auth_service.verify_token(credentials.credentials)
    if isinstance(claims, Err):
        raise_for_auth_error(claims.error, request)

    user = auth_service.me(claims.value.user_id)
    if isinstance(user, Err):
        raise_for_auth_error(user.error, request)

    return VerifyResponse(user=user.value, user_id=user.value.id)


@router.post("/signout")
async def sign_out(response: Response):
    """Clear the session cookies.

    Tokens already handed out stay valid until they expire.
    """
    response.delete_cookie(SESSION_COOKIE_USER_ID, **SESSION_COOKIE_OPTIONS)
    response.delete_cookie(SESSION_COOKIE_TOKEN, **SESSION_COOKIE_OPTIONS)
    return {"message": "Signed out successfully"}
