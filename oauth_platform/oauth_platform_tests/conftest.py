"""
Pytest configuration for the OAuth session service tests.

Environment is set before the application modules are imported so the
settings, engine and OAuth client pick up the test values.
"""
import base64
import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_oauth_service.db")
os.environ.setdefault("COOKIE_ENCRYPTION_KEY", "test-cookie-secret")
os.environ.setdefault("ORIGIN", "http://client.test")
os.environ.setdefault("CLIENT_URL", "http://client.test")
os.environ.setdefault("LOGIN_URL", "http://client.test/login")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import pytest
from fastapi.testclient import TestClient
from itsdangerous import TimestampSigner
from sqlalchemy.orm import Session

from oauth_platform.oauth_platform.oauth_service.auth import hash_password
from oauth_platform.oauth_platform.oauth_service.config import settings
from oauth_platform.oauth_platform.oauth_service.db import Base, engine
from oauth_platform.oauth_platform.oauth_service.main import app
from oauth_platform.oauth_platform.oauth_service.models import User


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app, follow_redirects=False) as c:
        yield c


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    session = Session(bind=engine)
    yield session
    session.close()


@pytest.fixture
def test_user(db_session):
    """Create a local user with password 'correctpassword'."""
    user = User(
        username="testuser",
        email="test@example.com",
        password=hash_password("correctpassword"),
        display_name="Test User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def decode_session_cookie(value: str) -> dict:
    """Verify and decode a session cookie the way SessionMiddleware does."""
    signer = TimestampSigner(settings.COOKIE_ENCRYPTION_KEY)
    data = signer.unsign(value.encode("utf-8"), max_age=settings.SESSION_MAX_AGE)
    return json.loads(base64.b64decode(data))


def session_set_cookies(response) -> list:
    """Set-Cookie headers of response that target the session cookie."""
    return [
        header for header in response.headers.get_list("set-cookie")
        if header.startswith(f"{settings.SESSION_COOKIE_NAME}=")
    ]
