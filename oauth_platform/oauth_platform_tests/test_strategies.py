"""Unit tests for the local and Google authentication strategies."""
import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError, OperationalError

from oauth_platform.oauth_platform.oauth_service.auth import hash_password
from oauth_platform.oauth_platform.oauth_service.models import User
from oauth_platform.oauth_platform.oauth_service.strategies import (
    BAD_PASSWORD,
    MISSING_CREDENTIALS,
    MISSING_SUBJECT,
    NO_USER_FOUND,
    AuthResult,
    GoogleStrategy,
    LocalStrategy,
)


def test_auth_result_ok():
    assert AuthResult(user=User(id=1)).ok
    assert not AuthResult(info=NO_USER_FOUND).ok


def test_local_strategy_success(db_session, test_user):
    result = LocalStrategy().authenticate(db_session, "testuser", "correctpassword")
    assert result.ok
    assert result.user.id == test_user.id
    assert result.info is None


def test_local_strategy_matches_email(db_session, test_user):
    result = LocalStrategy().authenticate(db_session, "test@example.com", "correctpassword")
    assert result.user.id == test_user.id


@pytest.mark.parametrize(
    "username,password,info",
    [
        ("testuser", "wrongpassword", BAD_PASSWORD),
        ("ghost", "correctpassword", NO_USER_FOUND),
        ("", "correctpassword", MISSING_CREDENTIALS),
        ("testuser", None, MISSING_CREDENTIALS),
    ],
)
def test_local_strategy_rejections(db_session, test_user, username, password, info):
    result = LocalStrategy().authenticate(db_session, username, password)
    assert not result.ok
    assert result.info == info


def test_local_strategy_prefers_oldest_record_on_overlap(db_session, test_user):
    # Legacy row whose username collides with test_user's email
    db_session.add(User(username="test@example.com", password=hash_password("other")))
    db_session.commit()

    result = LocalStrategy().authenticate(db_session, "test@example.com", "correctpassword")
    assert result.ok
    assert result.user.id == test_user.id


def test_strategy_names():
    assert LocalStrategy.name == "local"
    assert GoogleStrategy.name == "google"


def test_local_strategy_rejects_account_without_password(db_session):
    user = User(username="googleonly", google_id="sub-1")
    db_session.add(user)
    db_session.commit()

    result = LocalStrategy().authenticate(db_session, "googleonly", "anything")
    assert result.info == BAD_PASSWORD


def test_local_strategy_propagates_database_errors():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))

    with pytest.raises(OperationalError):
        LocalStrategy().authenticate(db, "testuser", "pw")


def test_google_strategy_creates_then_finds(db_session):
    strategy = GoogleStrategy()
    profile = {"sub": "abc", "email": "a@example.com", "name": "A"}

    first = strategy.authenticate(db_session, profile)
    second = strategy.authenticate(db_session, profile)

    assert first.ok and second.ok
    assert first.user.id == second.user.id
    assert db_session.query(User).count() == 1


def test_google_strategy_missing_subject(db_session):
    result = GoogleStrategy().authenticate(db_session, {"email": "a@example.com"})
    assert result.info == MISSING_SUBJECT
    assert GoogleStrategy().authenticate(db_session, None).info == MISSING_SUBJECT


def test_google_strategy_email_conflict_raises(db_session, test_user):
    with pytest.raises(IntegrityError):
        GoogleStrategy().authenticate(db_session, {"sub": "xyz", "email": test_user.email})
