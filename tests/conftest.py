"""
Shared fixtures: sample resume data, job posting pages and an API client
with auth and database dependencies overridden.
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db, require_user
from app.schemas.ResumeSchemas import Resume, ResumeContent
from app.services.auth_service import AuthUser
from main import app

LONG_DESCRIPTION = (
    "We are hiring a backend engineer to design and build Python services. "
    "You will own FastAPI microservices, PostgreSQL schemas and AWS deployments, "
    "and mentor other engineers on the platform team."
)


@pytest.fixture(autouse=True)
def public_dns():
    """Resolve every scraped host to a public address; no real DNS in tests."""
    with patch("app.tools.get_url_contents.resolve_host", return_value=["93.184.216.34"]) as mock_resolve:
        yield mock_resolve


@pytest.fixture
def resume_content_dict():
    return {
        "personal": {
            "fullName": "Jane Doe",
            "email": "jane.doe@example.com",
            "phone": "555-1234",
            "location": "San Francisco, CA",
            "summary": "Backend engineer with eight years of Python and cloud experience.",
        },
        "experience": [
            {
                "title": "Senior Developer",
                "company": "Test Corp",
                "duration": "2021 - Present",
                "description": "Led development of Python APIs on AWS.",
            }
        ],
        "education": [
            {"degree": "BS Computer Science", "school": "Test University", "year": "2017"}
        ],
        "skills": ["Python", "FastAPI", "PostgreSQL"],
    }


@pytest.fixture
def resume_content(resume_content_dict):
    return ResumeContent.model_validate(resume_content_dict)


@pytest.fixture
def stored_resume(resume_content_dict):
    return Resume(
        id="resume-1",
        user_id="user-1",
        title="Backend Resume",
        content=resume_content_dict,
        is_public=False,
    )


@pytest.fixture
def user():
    return AuthUser(id="user-1", email="jane.doe@example.com")


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def client(user, db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[require_user] = lambda: user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(db):
    """Client with a database but no user: require_user runs for real."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def html_response(text, status_code=200, content_type="text/html; charset=utf-8", reason="OK", headers=None):
    """A streamed requests.Response stand-in."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.headers = {"content-type": content_type, **(headers or {})}
    response.encoding = "utf-8"
    response.iter_content.return_value = [text.encode("utf-8")]
    return response


def linkedin_page():
    return f"""
    <html><body>
      <h1 class="top-card-layout__title">Senior Python Engineer</h1>
      <a class="topcard__org-name-link">Acme Corp</a>
      <span class="topcard__flavor--bullet">Remote, US</span>
      <div class="description__text"><p>{LONG_DESCRIPTION}</p></div>
    </body></html>
    """
