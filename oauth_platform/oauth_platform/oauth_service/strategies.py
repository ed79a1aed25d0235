"""
Authentication strategies.

Each strategy verifies one kind of credential and returns an AuthResult:
a user on success, or an info message explaining the rejection. Hard
errors (database failures) propagate as exceptions.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from .auth import verify_password
from .models import User

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Missing credentials"
NO_USER_FOUND = "no user found"
BAD_PASSWORD = "bad password"
MISSING_SUBJECT = "missing subject"


@dataclass(frozen=True)
class AuthResult:
    user: Optional[User] = None
    info: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None


class LocalStrategy:
    """Username (or email) and password checked against the stored hash."""

    name = "local"

    def authenticate(self, db: Session, username: Optional[str], password: Optional[str]) -> AuthResult:
        if not username or not password:
            return AuthResult(info=MISSING_CREDENTIALS)

        # Signup keeps usernames and emails disjoint; oldest record wins otherwise
        user = (
            db.query(User)
            .filter(or_(User.username == username, User.email == username))
            .order_by(User.id)
            .first()
        )
        if not user:
            return AuthResult(info=NO_USER_FOUND)
        if not verify_password(password, user.password):
            return AuthResult(info=BAD_PASSWORD)
        return AuthResult(user=user)


class GoogleStrategy:
    """
    Resolve a Google OpenID Connect profile to a local user.

    Finds the user by Google subject id and creates the record on first
    login. The code exchange itself is done by the Authlib client.
    """

    name = "google"

    def authenticate(self, db: Session, userinfo: Optional[Mapping[str, Any]]) -> AuthResult:
        subject = (userinfo or {}).get("sub")
        if not subject:
            return AuthResult(info=MISSING_SUBJECT)
        subject = str(subject)

        user = db.query(User).filter(User.google_id == subject).first()
        if user:
            return AuthResult(user=user)

        user = User(
            google_id=subject,
            email=userinfo.get("email"),
            display_name=userinfo.get("name"),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user from Google profile: user_id=%s google_id=%s", user.id, subject)
        return AuthResult(user=user)


local_strategy = LocalStrategy()
google_strategy = GoogleStrategy()
