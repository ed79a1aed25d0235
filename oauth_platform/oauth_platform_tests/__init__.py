"""
oauth_service test package

Tests for the cookie-session authentication service:

- signup, local login, logout and auth gates (`test_auth.py`)
- Google OAuth2 redirect and callback (`test_google_oauth.py`)
- strategies, sessions, middleware pipeline, health, logging and db setup
"""
