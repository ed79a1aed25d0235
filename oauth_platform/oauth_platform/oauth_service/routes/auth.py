"""
Signup, login (local and Google) and logout routes.
"""
from typing import Any, Dict
import logging

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..auth import hash_password
from ..config import settings
from ..db import get_db
from ..dependencies import read_payload, require_not_authenticated
from ..models import User
from ..oauth import oauth
from ..schemas import MessageResponse, UserCreate, UserLogin
from ..sessions import log_in, log_out, session_user_id
from ..strategies import google_strategy, local_strategy
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


def _validate(model, payload: Dict[str, Any]):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.post("/signup", dependencies=[Depends(require_not_authenticated)])
def signup(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    db: Session = Depends(get_db),
):
    user_in = _validate(UserCreate, payload)

    try:
        # Usernames and emails share one login namespace
        if db.query(User).filter(
            or_(User.username == user_in.username, User.email == user_in.username)
        ).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
        if user_in.email and db.query(User).filter(
            or_(User.email == user_in.email, User.username == user_in.email)
        ).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

        new_user = User(
            username=user_in.username,
            email=user_in.email,
            password=hash_password(user_in.password),
            display_name=user_in.display_name,
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError as e:
        db.rollback()
        logger.warning("Signup conflict for username=%s: %s", user_in.username, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Signup error for username=%s: %s", user_in.username, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user"
        ) from e

    log_auth_event("signup", request, new_user)
    return RedirectResponse(settings.LOGIN_URL, status_code=status.HTTP_302_FOUND)


@router.post("/login", dependencies=[Depends(require_not_authenticated)])
def login(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    db: Session = Depends(get_db),
):
    credentials = _validate(UserLogin, payload)

    try:
        result = local_strategy.authenticate(db, credentials.username, credentials.password)
    except SQLAlchemyError as e:
        logger.error("Login error for username=%s: %s", credentials.username, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to authenticate user"
        ) from e

    if not result.ok:
        log_auth_event(
            "login_failure", request,
            strategy=local_strategy.name, reason=result.info, attempted=credentials.username,
        )
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"message": result.info})

    log_in(request, result.user)
    log_auth_event("login_success", request, result.user, strategy=local_strategy.name)
    return RedirectResponse(settings.CLIENT_URL, status_code=status.HTTP_302_FOUND)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request):
    user_id = session_user_id(request)
    log_out(request)
    log_auth_event("logout", request, session_user_id=user_id)

    response = JSONResponse(status_code=status.HTTP_200_OK, content={"message": "logout success"})
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        path="/",
        secure=settings.SESSION_HTTPS_ONLY,
        samesite=settings.SESSION_SAME_SITE,
    )
    return response


@router.get("/auth/google")
async def google_login(request: Request):
    redirect_uri = settings.GOOGLE_CALLBACK_URL or str(request.url_for("google_callback"))
    return await oauth.google.authorize_redirect(request, redirect_uri)


@router.get("/auth/google/callback", name="google_callback")
async def google_callback(request: Request, db: Session = Depends(get_db)):
    failure = RedirectResponse(settings.LOGIN_URL, status_code=status.HTTP_302_FOUND)

    try:
        token = await oauth.google.authorize_access_token(request)
        userinfo = token.get("userinfo") or await oauth.google.userinfo(token=token)
    except OAuthError as e:
        logger.warning("Google OAuth failed: error=%s description=%s", e.error, e.description)
        log_auth_event("google_login_failure", request, strategy=google_strategy.name, error=e.error)
        return failure

    try:
        result = await run_in_threadpool(google_strategy.authenticate, db, userinfo)
    except IntegrityError as e:
        await run_in_threadpool(db.rollback)
        logger.warning("Google account conflicts with an existing user: %s", e)
        log_auth_event("google_login_failure", request, strategy=google_strategy.name, error="conflict")
        return failure
    except SQLAlchemyError as e:
        await run_in_threadpool(db.rollback)
        logger.error("Google login error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to authenticate user"
        ) from e

    if not result.ok:
        log_auth_event("google_login_failure", request, strategy=google_strategy.name, error=result.info)
        return failure

    log_in(request, result.user)
    log_auth_event("google_login_success", request, result.user, strategy=google_strategy.name)
    return RedirectResponse(settings.CLIENT_URL, status_code=status.HTTP_302_FOUND)
