"""
Cookie session helpers.

The session itself is a plain dict decoded from the signed cookie by
Starlette's SessionMiddleware. Only the user id is stored; the user record
is loaded again on each request.
"""
from typing import Optional

from fastapi import Request

from .models import User

SESSION_USER_KEY = "user_id"


def log_in(request: Request, user: User) -> None:
    """Establish an authenticated session for user."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def log_out(request: Request) -> None:
    request.session.clear()


def session_user_id(request: Request) -> Optional[int]:
    value = request.session.get(SESSION_USER_KEY)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None
