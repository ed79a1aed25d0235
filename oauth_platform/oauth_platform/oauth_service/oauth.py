"""
Google OAuth 2.0 configuration and client.
"""
from authlib.integrations.starlette_client import OAuth

from .config import settings

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_JWKS_URI = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUER = "https://accounts.google.com"

# Create OAuth registry
oauth = OAuth()

# Endpoints are given explicitly instead of the discovery URL so the
# consent redirect can be built without fetching provider metadata.
oauth.register(
    name="google",
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    authorize_url=GOOGLE_AUTHORIZE_URL,
    access_token_url=GOOGLE_TOKEN_URL,
    userinfo_endpoint=GOOGLE_USERINFO_URL,
    jwks_uri=GOOGLE_JWKS_URI,
    issuer=GOOGLE_ISSUER,
    client_kwargs={
        "scope": "openid email profile",
    },
)
