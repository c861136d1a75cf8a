"""Authentication service: sign-up, sign-in, identity lookup and token checks."""

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from carteira.schemas.auth import AuthResponse, UserResponse
from carteira.services import tokens
from carteira.services.errors import AuthError, HashingError
from carteira.services.passwords import dummy_verify, hash_password, verify_password
from carteira.services.result import Err, Ok, Result
from carteira.services.tokens import TokenClaims
from carteira.services.user_store import DuplicateEmailError, UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """Orchestrates the credential hasher, token codec and identity store.

    Expected failures are returned as ``Err(AuthError)``; nothing here raises
    for them. A missing signing secret is a configuration fault and raises.
    """

    def __init__(
        self,
        store: UserStore,
        secret: str,
        algorithm: str = tokens.DEFAULT_ALGORITHM,
        token_ttl: timedelta = tokens.DEFAULT_TOKEN_TTL,
    ):
        self.store = store
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    def sign_up(self, email: str, password: str, name: str) -> Result[AuthResponse, AuthError]:
        """Register a new user and issue a session token."""
        try:
            existing_user = self.store.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Email lookup failed during sign-up: {type(e).__name__}")
            return Err(AuthError.database_error("Could not verify email", e))

        if existing_user:
            return Err(AuthError.email_already_exists())

        try:
            password_hash = hash_password(password)
        except HashingError as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            return Err(AuthError.database_error("Could not create user", e))

        try:
            user = self.store.create(email=email, password_hash=password_hash, name=name)
        except DuplicateEmailError:
            # Lost a race with a concurrent sign-up for the same email
            return Err(AuthError.email_already_exists())
        except SQLAlchemyError as e:
            logger.error(f"User insert failed: {type(e).__name__}")
            return Err(AuthError.database_error("Could not create user", e))

        if user is None or user.id is None:
            return Err(AuthError.database_error("Could not create user"))

        logger.info(f"User {user.id} signed up")
        return Ok(self._auth_response(UserResponse.model_validate(user)))

    def sign_in(self, email: str, password: str) -> Result[AuthResponse, AuthError]:
        """Authenticate by email and password and issue a session token."""
        try:
            user = self.store.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Email lookup failed during sign-in: {type(e).__name__}")
            return Err(AuthError.database_error("Could not find user", e))

        if user is None:
            # Spend the same time as a real verify so timing does not reveal the email
            dummy_verify()
            return Err(AuthError.user_not_found())

        if not verify_password(user.password_hash, password):
            return Err(AuthError.invalid_credentials())

        return Ok(self._auth_response(UserResponse.model_validate(user)))

    def me(self, user_id: str) -> Result[UserResponse, AuthError]:
        """Load the user behind an authenticated session."""
        try:
            user = self.store.get_by_id(user_id)
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed: {type(e).__name__}")
            return Err(AuthError.database_error("Could not load user", e))

        if user is None:
            return Err(AuthError.unauthorized("User not found"))

        return Ok(UserResponse.model_validate(user))

    def verify_token(self, token: str) -> Result[TokenClaims, AuthError]:
        """Validate a session token and return its identity claim."""
        return tokens.verify_token(token, self.secret, algorithm=self.algorithm)

    def _auth_response(self, user: UserResponse) -> AuthResponse:
        token = tokens.issue_token(
            user.id, self.secret, ttl=self.token_ttl, algorithm=self.algorithm
        )
        return AuthResponse(user=user, token=token)
