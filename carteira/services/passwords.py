"""Password hashing and verification."""

from passlib.context import CryptContext

from carteira.services.errors import HashingError

# pbkdf2_sha256 digests are self-describing: "$pbkdf2-sha256$<rounds>$<salt>$<hash>".
# 16 random salt bytes are drawn per digest.
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__salt_size=16,
)


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError, OSError) as e:
        raise HashingError("Failed to hash password") from e


def verify_password(digest: str, candidate: str) -> bool:
    """Verify a candidate password against a stored digest.

    A malformed or unrecognised digest is treated as a mismatch.
    """
    try:
        return pwd_context.verify(candidate, digest)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Run a verification against a throwaway digest to equalise timing."""
    pwd_context.dummy_verify()
