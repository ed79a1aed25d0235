"""
Configuration management for the OAuth session service
"""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Service configuration loaded from environment variables"""

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # CORS Configuration (single allowed origin, credentials enabled)
    ORIGIN: str = "http://localhost:3000"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"

    # Session cookie
    COOKIE_ENCRYPTION_KEY: str = "change-this-secret-in-prod"
    SESSION_COOKIE_NAME: str = "OAuth"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60  # 14 days, in seconds
    SESSION_HTTPS_ONLY: bool = False
    SESSION_SAME_SITE: str = "lax"

    # Redirect targets of the client application
    CLIENT_URL: str = "http://localhost:3000"
    LOGIN_URL: str = "http://localhost:3000/login"

    # Google OAuth2
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_CALLBACK_URL: Optional[str] = None

    # Static assets served under /static
    STATIC_DIR: str = str(PACKAGE_DIR / "public")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
