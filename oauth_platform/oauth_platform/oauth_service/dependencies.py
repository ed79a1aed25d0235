"""
Request dependencies: session identity, authentication gates and body parsing.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models import User
from .sessions import SESSION_USER_KEY, session_user_id


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """
    Deserialize the session into a User.

    Returns None when the session carries no identity. A user id whose
    record no longer exists is dropped from the session.
    """
    user_id = session_user_id(request)
    if user_id is None:
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        request.session.pop(SESSION_USER_KEY, None)
        return None
    return user


def require_authenticated(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def require_not_authenticated(user: Optional[User] = Depends(get_current_user)) -> None:
    if user is not None:
        raise HTTPException(
            status_code=status.HTTP_302_FOUND,
            detail="Already authenticated",
            headers={"Location": settings.CLIENT_URL},
        )


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a dict from either a form or a JSON document.

    Raises:
        HTTPException: 400 if a JSON body cannot be decoded into an object
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}
    try:
        data = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body") from exc
    if not isinstance(data, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be an object")
    return data
