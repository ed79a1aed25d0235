"""
Logging setup and event logger utility for authentication events.
"""
from datetime import datetime
from typing import Optional
from fastapi import Request
import sys
import logging
import os

from ..config import settings
from ..models import User

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "signup",
    "login_success",
    "login_failure",
    "google_login_success",
    "google_login_failure",
    "logout",
}


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """
    Configure root logging to stdout, plus a file under log_dir when given.

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL)
        log_dir: Directory for auth_events.log (defaults to settings.LOG_DIR)
    """
    level = level or settings.LOG_LEVEL
    log_dir = log_dir if log_dir is not None else settings.LOG_DIR

    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "auth_events.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For entry."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    request: Request,
    user: Optional[User] = None,
    **metadata,
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: signup, login_success, login_failure,
                    google_login_success, google_login_failure, logout
        request: FastAPI Request object
        user: User involved in the event, if known
        **metadata: Additional context appended to the log line

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    extra = "".join(f" {key}={value}" for key, value in sorted(metadata.items()))
    logger.info(
        "AUTH %s user_id=%s username=%s ip=%s user_agent=%s timestamp=%s%s",
        event_type,
        user.id if user else None,
        user.username if user else None,
        client_ip(request),
        request.headers.get("user-agent"),
        datetime.utcnow().isoformat(),
        extra,
    )
