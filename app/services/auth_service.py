import logging
from typing import Optional

from pydantic import BaseModel
from supabase import Client

from app.db.database import new_auth_client

logger = logging.getLogger(__name__)


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None


class RefreshedSession(BaseModel):
    user: AuthUser
    access_token: str
    refresh_token: str


def _to_user(user) -> Optional[AuthUser]:
    if user is None or not getattr(user, "id", None):
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


def get_current_user(client: Client, access_token: Optional[str]) -> Optional[AuthUser]:
    """Resolve an access token to its user, or None if it is missing or rejected."""
    if not access_token:
        return None
    try:
        response = client.auth.get_user(access_token)
    except Exception as e:
        # expired and malformed tokens both surface as auth errors
        logger.info("Access token rejected: %s", e)
        return None
    return _to_user(getattr(response, "user", None))


def refresh_session(refresh_token: Optional[str]) -> Optional[RefreshedSession]:
    """Exchange a refresh token for a new session, once. None on failure."""
    if not refresh_token:
        return None
    try:
        response = new_auth_client().auth.refresh_session(refresh_token)
    except Exception as e:
        logger.info("Session refresh failed: %s", e)
        return None

    session = getattr(response, "session", None)
    user = _to_user(getattr(response, "user", None) or getattr(session, "user", None))
    if session is None or user is None:
        return None
    return RefreshedSession(
        user=user,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )
