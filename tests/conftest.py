"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from carteira.constants import SESSION_COOKIE_TOKEN, SESSION_COOKIE_USER_ID
from carteira.database import Base, build_engine, get_db
from carteira.main import app


class SessionHeaders(dict):
    """Dict subclass that also stores the signed-up user's details."""

    def __init__(self, *args, user_id: str, email: str, token: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


def session_cookie(user_id: str, token: str) -> str:
    """Build a Cookie header value carrying both session cookies."""
    return f"{SESSION_COOKIE_USER_ID}={user_id}; {SESSION_COOKIE_TOKEN}={token}"


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/carteira", "/carteira_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from carteira import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sign_up(client):
    """Return a helper that signs up a user and returns cookie session headers."""

    def _sign_up(
        email: str = "test@example.com", password: str = "password123", name: str = "Test User"
    ) -> SessionHeaders:
        response = client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 200
        data = response.json()
        user_id = data["user"]["id"]
        token = data["token"]
        return SessionHeaders(
            {"Cookie": session_cookie(user_id, token)},
            user_id=user_id,
            email=email,
            token=token,
        )

    return _sign_up


@pytest.fixture
def auth_headers(sign_up):
    """Create a user and return session cookie headers with user info."""
    return sign_up()


@pytest.fixture
def other_auth_headers(sign_up):
    """Create a second, unrelated user."""
    return sign_up(email="other@example.com", name="Other User")


@pytest.fixture
def account_payload():
    """A valid account creation payload."""
    return {
        "service_name": "Netflix",
        "start_date": "2025-03-01T00:00:00Z",
        "expiration_date": "2025-04-01T00:00:00Z",
        "max_users": 4,
        "price": "39.90",
    }
