"""Auth service tests, run against the test database without HTTP."""

import logging
from datetime import timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from carteira.api.errors import raise_for_auth_error

from carteira.models.user import User
from carteira.services import auth as auth_module
from carteira.services.auth import AuthService
from carteira.services.errors import INVALID_LOGIN_MESSAGE, AuthErrorKind, HashingError
from carteira.services.result import Err, Ok
from carteira.services.user_store import UserStore

SECRET = "service-test-secret"  # noqa: S105


@pytest.fixture
def service(db):
    """Auth service backed by the test database."""
    return AuthService(UserStore(db), SECRET)


class UnavailableStore(UserStore):
    """Store whose every lookup fails as if the database were down."""

    def get_by_email(self, email):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def get_by_id(self, user_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))


class FailingInsertStore(UserStore):
    """Store whose insert fails after the digest has been bound to the statement."""

    def create(self, email, password_hash, name):
        raise OperationalError(
            "INSERT INTO users (email, password_hash, name, id) VALUES (?, ?, ?, ?)",
            (email, password_hash, name, "c1fbe8b6-0000-0000-0000-000000000000"),
            Exception("no such table: audit_log"),
        )


class StaleReadStore(UserStore):
    """Store that misses existing rows on lookup, as a concurrent sign-up would."""

    def get_by_email(self, email):
        return None


def test_sign_up_returns_sanitized_user_and_token(service):
    """Sign-up returns the public user view and a token bound to it."""
    result = service.sign_up("a@b.com", "secret123", "Alice")

    assert isinstance(result, Ok)
    assert result.value.user.email == "a@b.com"
    assert result.value.user.name == "Alice"
    assert result.value.token
    assert "password_hash" not in result.value.model_dump()["user"]

    claims = service.verify_token(result.value.token)
    assert isinstance(claims, Ok)
    assert claims.value.user_id == result.value.user.id


def test_sign_up_stores_digest_not_plaintext(service, db):
    """Only the digest is persisted."""
    service.sign_up("a@b.com", "secret123", "Alice")

    user = db.query(User).filter(User.email == "a@b.com").one()
    assert user.password_hash != "secret123"
    assert "secret123" not in user.password_hash


def test_duplicate_sign_up_is_rejected(service, db):
    """The second sign-up with the same email fails and inserts nothing."""
    assert isinstance(service.sign_up("a@b.com", "secret123", "Alice"), Ok)

    result = service.sign_up("a@b.com", "other-password", "Alice Again")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.EMAIL_ALREADY_EXISTS
    assert db.query(User).filter(User.email == "a@b.com").count() == 1


def test_concurrent_duplicate_sign_up_hits_unique_index(db):
    """If the pre-check misses a duplicate, the unique index still rejects it."""
    AuthService(UserStore(db), SECRET).sign_up("a@b.com", "secret123", "Alice")
    racing = AuthService(StaleReadStore(db), SECRET)

    result = racing.sign_up("a@b.com", "secret123", "Alice")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.EMAIL_ALREADY_EXISTS
    assert db.query(User).filter(User.email == "a@b.com").count() == 1


def test_sign_up_store_failure_is_database_error(db):
    """Store failures are reported, not raised."""
    service = AuthService(UnavailableStore(db), SECRET)

    result = service.sign_up("a@b.com", "secret123", "Alice")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.DATABASE_ERROR
    assert isinstance(result.error.cause, OperationalError)


def test_sign_up_hashing_failure_fails_closed(service, db, monkeypatch):
    """A hashing failure aborts sign-up before any write."""

    def broken_hash(password):
        raise HashingError("no entropy")

    monkeypatch.setattr(auth_module, "hash_password", broken_hash)

    result = service.sign_up("a@b.com", "secret123", "Alice")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.DATABASE_ERROR
    assert db.query(User).count() == 0


def test_sign_in_with_correct_password(service):
    """Sign-in succeeds with the registered password."""
    signed_up = service.sign_up("a@b.com", "secret123", "Alice")

    result = service.sign_in("a@b.com", "secret123")

    assert isinstance(result, Ok)
    assert result.value.user.id == signed_up.value.user.id
    assert result.value.token


def test_sign_in_with_wrong_password(service):
    """Sign-in with the wrong password fails with INVALID_CREDENTIALS."""
    service.sign_up("a@b.com", "secret123", "Alice")

    result = service.sign_in("a@b.com", "wrong")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.INVALID_CREDENTIALS


def test_sign_in_unknown_email(service):
    """Unknown emails fail with USER_NOT_FOUND but the same message."""
    result = service.sign_in("nobody@b.com", "secret123")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.USER_NOT_FOUND
    assert result.error.message == INVALID_LOGIN_MESSAGE


def test_sign_in_with_corrupt_digest(service, db):
    """A corrupt stored digest is treated as a credential mismatch."""
    db.add(User(email="a@b.com", password_hash="corrupted", name="Alice"))
    db.commit()

    result = service.sign_in("a@b.com", "secret123")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.INVALID_CREDENTIALS


def test_sign_in_store_failure_is_database_error(db):
    """Lookup failures during sign-in are DATABASE_ERROR."""
    result = AuthService(UnavailableStore(db), SECRET).sign_in("a@b.com", "secret123")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.DATABASE_ERROR


def test_me_returns_user(service):
    """me() loads the user behind a session."""
    signed_up = service.sign_up("a@b.com", "secret123", "Alice")

    result = service.me(signed_up.value.user.id)

    assert isinstance(result, Ok)
    assert result.value.email == "a@b.com"


def test_me_for_missing_user_is_unauthorized(service):
    """A vanished identity is an auth failure, not a lookup failure."""
    result = service.me("00000000-0000-0000-0000-000000000000")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.UNAUTHORIZED


def test_verify_token_failures_are_unauthorized(service, db):
    """Codec failures surface uniformly as UNAUTHORIZED."""
    expired_service = AuthService(UserStore(db), SECRET, token_ttl=timedelta(seconds=-1))
    expired = expired_service.sign_up("a@b.com", "secret123", "Alice").value.token

    for token in (expired, "garbage"):
        result = service.verify_token(token)
        assert isinstance(result, Err)
        assert result.error.kind == AuthErrorKind.UNAUTHORIZED


def test_failed_insert_does_not_log_credentials(db, caplog):
    """Neither the password nor its digest reaches the logs when the insert fails."""
    caplog.set_level(logging.DEBUG)
    service = AuthService(FailingInsertStore(db), SECRET)

    result = service.sign_up("a@b.com", "secret123", "Alice")

    assert isinstance(result, Err)
    assert result.error.kind == AuthErrorKind.DATABASE_ERROR
    with pytest.raises(HTTPException):
        raise_for_auth_error(result.error)

    assert "User insert failed: OperationalError" in caplog.text
    assert "$pbkdf2-sha256$" not in caplog.text
    assert "secret123" not in caplog.text


def test_engine_hides_statement_parameters(db):
    """Store errors never render bound parameter values."""
    with pytest.raises(OperationalError) as exc_info:
        db.execute(
            text("INSERT INTO missing_table (password_hash) VALUES (:password_hash)"),
            {"password_hash": "$pbkdf2-sha256$29000$salt$hash"},
        )
    db.rollback()

    assert "$pbkdf2-sha256$" not in str(exc_info.value)


def test_sign_in_unknown_email_spends_a_verify(service, monkeypatch):
    """Unknown emails still pay for a password verification."""
    calls = []
    monkeypatch.setattr(auth_module, "dummy_verify", lambda: calls.append(True))

    service.sign_in("nobody@b.com", "secret123")

    assert calls == [True]
