"""
Request pipeline.

Middleware stages are declared here in request order, outermost first:

  cors         pre:  any request
               post: CORS headers for ORIGIN (credentials allowed); preflight answered here
  session      pre:  signed cookie SESSION_COOKIE_NAME, if any
               post: request.session is a dict (empty when the cookie is absent,
                     tampered or older than SESSION_MAX_AGE); a modified session
                     is re-signed into the response cookie, an emptied one cleared
  request_log  pre:  request.session available
               post: one log line per request with status and elapsed time

Authentication gates and body parsing run after these stages as route
dependencies (see dependencies.py).
"""
from typing import Callable, List, Tuple
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """Log method, path, status code and response time of each request."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %s %.3f ms",
                scope.get("method"), scope.get("path"), status_code, elapsed_ms,
            )


def _cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _session(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.COOKIE_ENCRYPTION_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        same_site=settings.SESSION_SAME_SITE,
        https_only=settings.SESSION_HTTPS_ONLY,
    )


def _request_log(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(RequestLogMiddleware)


PIPELINE: List[Tuple[str, Callable[[FastAPI, Settings], None]]] = [
    ("cors", _cors),
    ("session", _session),
    ("request_log", _request_log),
]


def install_pipeline(app: FastAPI, settings: Settings) -> None:
    """
    Install the PIPELINE stages on app.

    Starlette wraps each added middleware around the ones added before it,
    so stages are added innermost first.
    """
    for name, install in reversed(PIPELINE):
        install(app, settings)
        logger.debug("Installed middleware stage: %s", name)

