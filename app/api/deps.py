import logging
from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException
from supabase import Client

from app.core.exceptions import DependencyConfigError
from app.db.database import get_supabase
from app.services.auth_service import AuthUser, get_current_user

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


def get_db() -> Client:
    try:
        return get_supabase()
    except DependencyConfigError:
        raise HTTPException(status_code=500, detail="Service configuration error")


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_user(
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
    db: Client = Depends(get_db),
) -> AuthUser:
    """Authenticate an API request from the Bearer header or the session cookie."""
    token = _bearer_token(authorization) or access_token
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    user = get_current_user(db, token)
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user
