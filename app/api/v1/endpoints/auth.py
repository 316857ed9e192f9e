import logging
from typing import Optional

from fastapi import APIRouter, Cookie
from fastapi.responses import JSONResponse

from app.api.deps import ACCESS_TOKEN_COOKIE
from app.core.exceptions import DependencyConfigError
from app.db.database import get_supabase
from app.middleware.session import clear_session_cookies

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/logout")
def logout(access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE)):
    """Revoke the session if possible and always clear the session cookies."""
    if access_token:
        try:
            get_supabase().auth.admin.sign_out(access_token)
        except DependencyConfigError as e:
            logger.warning("Logout without revoking session: %s", e)
        except Exception as e:
            logger.warning("Session revoke failed: %s", e)

    response = JSONResponse({"status": 200, "message": "Logged out successfully", "data": None})
    clear_session_cookies(response)
    return response
