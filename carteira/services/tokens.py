"""Signed, time-limited session tokens."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from carteira.services.errors import AuthError
from carteira.services.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(days=7)
DEFAULT_ALGORITHM = "HS256"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"  # noqa: S105


@dataclass(frozen=True)
class TokenClaims:
    """Identity claim carried by a verified token."""

    user_id: str
    expires_at: datetime


def _require_secret(secret: str) -> None:
    if not secret:
        raise ValueError("Token signing secret is not configured")


def issue_token(
    user_id: str,
    secret: str,
    ttl: timedelta = DEFAULT_TOKEN_TTL,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> str:
    """Create a signed token for ``user_id`` that expires after ``ttl``."""
    _require_secret(secret)
    issued_at = now or datetime.now(UTC)
    to_encode = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Result[TokenClaims, AuthError]:
    """Decode and validate a token.

    Every failure yields the same UNAUTHORIZED error; only the log records
    which check failed.
    """
    _require_secret(secret)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        logger.info("Token rejected: expired")
        return Err(AuthError.unauthorized(INVALID_TOKEN_MESSAGE))
    except JWTClaimsError as e:
        logger.info(f"Token rejected: invalid claims ({e})")
        return Err(AuthError.unauthorized(INVALID_TOKEN_MESSAGE))
    except JWTError:
        logger.info("Token rejected: malformed or bad signature")
        return Err(AuthError.unauthorized(INVALID_TOKEN_MESSAGE))

    user_id = payload.get("sub")
    if not user_id:
        logger.info("Token rejected: empty subject")
        return Err(AuthError.unauthorized(INVALID_TOKEN_MESSAGE))

    return Ok(
        TokenClaims(
            user_id=user_id,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
    )
