"""Session guard for page routes.

API routes authenticate themselves (see app.api.deps.require_user) and are
passed through untouched, as are the public pages.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from app.api.deps import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from app.core.config import settings
from app.core.exceptions import DependencyConfigError
from app.db.database import get_supabase
from app.services.auth_service import AuthUser, RefreshedSession, get_current_user, refresh_session

logger = logging.getLogger(__name__)

PUBLIC_ROUTES = frozenset({
    "/",
    "/login",
    "/signup",
    "/auth/callback",
    "/auth/error",
    "/privacy",
    "/terms",
    "/support",
    "/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/redoc",
    "/openapi.json",
})
BYPASS_PREFIXES = ("/api/",)


def is_public_path(path: str) -> bool:
    if path in PUBLIC_ROUTES or path == "/api":
        return True
    return path.startswith(BYPASS_PREFIXES)


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    for name, value in ((ACCESS_TOKEN_COOKIE, access_token), (REFRESH_TOKEN_COOKIE, refresh_token)):
        response.set_cookie(name, value, httponly=True, secure=True, samesite="lax", path="/")


def clear_session_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, path="/")


def login_redirect(request: Request) -> RedirectResponse:
    query = urlencode({"redirectTo": request.url.path})
    return RedirectResponse(f"{settings.LOGIN_PATH}?{query}", status_code=307)


class SessionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if is_public_path(request.url.path):
            return await call_next(request)

        refreshed: Optional[RefreshedSession] = None
        user: Optional[AuthUser] = None
        try:
            client = await run_in_threadpool(get_supabase)
            user = await run_in_threadpool(get_current_user, client, request.cookies.get(ACCESS_TOKEN_COOKIE))
        except DependencyConfigError as e:
            logger.error("Cannot validate session: %s", e)

        if user is None:
            refreshed = await run_in_threadpool(refresh_session, request.cookies.get(REFRESH_TOKEN_COOKIE))
            if refreshed is not None:
                user = refreshed.user

        if user is None:
            return login_redirect(request)

        request.state.user = user
        response = await call_next(request)
        if refreshed is not None:
            set_session_cookies(response, refreshed.access_token, refreshed.refresh_token)
        return response
