"""
Tests for the page-route session guard, logout and health endpoints
"""
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db
from app.core.config import ConfigCheck
from app.middleware.session import is_public_path
from app.services.auth_service import AuthUser, RefreshedSession
from main import app

SESSION = "app.middleware.session"
PRINT_PATH = "/resumes/resume-1/print"


@pytest.fixture
def page_client(db):
    app.dependency_overrides[get_db] = lambda: db
    with patch(f"{SESSION}.get_supabase", return_value=MagicMock()):
        yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.parametrize("path", ["/", "/login", "/auth/callback", "/health", "/docs", "/api/scrape-job", "/api/health"])
def test_public_paths(path):
    assert is_public_path(path) is True


@pytest.mark.parametrize("path", ["/dashboard", "/resumes/1/print", "/login/extra", "/apis"])
def test_protected_paths(path):
    assert is_public_path(path) is False


def test_unauthenticated_page_redirects_to_login(page_client):
    with patch(f"{SESSION}.get_current_user", return_value=None), \
            patch(f"{SESSION}.refresh_session", return_value=None):
        response = page_client.get(PRINT_PATH, follow_redirects=False)

    assert response.status_code == 307
    location = urlsplit(response.headers["location"])
    assert location.path == "/login"
    assert parse_qs(location.query) == {"redirectTo": [PRINT_PATH]}


def test_authenticated_page_renders(page_client, stored_resume):
    user = AuthUser(id="user-1", email="jane.doe@example.com")
    with patch(f"{SESSION}.get_current_user", return_value=user) as mock_user, \
            patch("app.api.v1.endpoints.pages.crud_resume.get_resume", return_value=stored_resume) as mock_get:
        response = page_client.get(
            f"{PRINT_PATH}?templateId=minimalist",
            headers={"Cookie": "sb-access-token=valid-token"},
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Jane Doe" in response.text
    assert mock_user.call_args.args[1] == "valid-token"
    assert mock_get.call_args.args[2] == "user-1"


def test_expired_session_is_refreshed_once(page_client, stored_resume):
    refreshed = RefreshedSession(
        user=AuthUser(id="user-1"),
        access_token="new-access",
        refresh_token="new-refresh",
    )
    with patch(f"{SESSION}.get_current_user", return_value=None), \
            patch(f"{SESSION}.refresh_session", return_value=refreshed) as mock_refresh, \
            patch("app.api.v1.endpoints.pages.crud_resume.get_resume", return_value=stored_resume):
        response = page_client.get(
            PRINT_PATH,
            headers={"Cookie": "sb-access-token=expired; sb-refresh-token=old-refresh"},
        )

    assert response.status_code == 200
    mock_refresh.assert_called_once_with("old-refresh")
    cookies = response.headers.get_list("set-cookie")
    assert any(c.startswith("sb-access-token=new-access") for c in cookies)
    assert any(c.startswith("sb-refresh-token=new-refresh") for c in cookies)


def test_print_page_unknown_template(page_client):
    with patch(f"{SESSION}.get_current_user", return_value=AuthUser(id="user-1")):
        response = page_client.get(f"{PRINT_PATH}?templateId=fancy", headers={"Cookie": "sb-access-token=t"})
    assert response.status_code == 404


def test_public_route_skips_session_lookup(page_client):
    with patch(f"{SESSION}.get_current_user") as mock_user:
        response = page_client.get("/health")
    assert response.status_code in (200, 503)
    mock_user.assert_not_called()


def test_logout_clears_cookies():
    client = TestClient(app)
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    cookies = response.headers.get_list("set-cookie")
    assert len(cookies) == 2
    for name, cookie in zip(("sb-access-token", "sb-refresh-token"), cookies):
        assert cookie.startswith(f"{name}=")
        assert "Max-Age=0" in cookie


def test_health_reports_configuration():
    client = TestClient(app)
    ok = ConfigCheck(ok=True)
    with patch("app.api.v1.endpoints.health.validate_supabase_config", return_value=ok), \
            patch("app.api.v1.endpoints.health.validate_ai_config", return_value=ok), \
            patch("app.api.v1.endpoints.health.validate_analytics_config", return_value=ConfigCheck(ok=False)):
        response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "healthy"
    assert response.json()["data"]["services"]["analytics"]["ok"] is False


def test_health_unhealthy_without_database():
    client = TestClient(app)
    missing = ConfigCheck(ok=False, error="Supabase configuration incomplete")
    with patch("app.api.v1.endpoints.health.validate_supabase_config", return_value=missing):
        response = client.get("/api/health")

    assert response.status_code == 503
    data = response.json()["data"]
    assert data["status"] == "unhealthy"
    assert data["services"]["supabase"]["error"] == "Supabase configuration incomplete"
