"""
API tests through FastAPI's TestClient with auth and database overridden
"""
from unittest.mock import patch

import requests

from app.core.exceptions import DependencyConfigError
from app.schemas.ResumeSchemas import Profile
from app.services.rate_limit import RateLimiter
from conftest import html_response, linkedin_page

GET = "app.tools.get_url_contents.requests.get"
SCRAPE = "app.api.v1.endpoints.scrape_job"
EXPORT = "app.api.v1.endpoints.export_pdf"
RESUMES = "app.api.v1.endpoints.resumes"
REGENERATE = "app.api.v1.endpoints.regenerate_section"


# --- scrape-job ---

def test_scrape_job_requires_auth(anon_client):
    response = anon_client.post("/api/scrape-job", json={"url": "https://www.linkedin.com/jobs/view/1"})
    assert response.status_code == 401


def test_scrape_job_rejects_bad_url(client):
    response = client.post("/api/scrape-job", json={"url": "not-a-url"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request data"
    assert body["errors"]


def test_scrape_job_rejects_missing_body(client):
    response = client.post("/api/scrape-job", json={})
    assert response.status_code == 400


def test_scrape_job_unreachable_host(client, db):
    with patch(GET, side_effect=requests.ConnectionError("Name or service not known")), \
            patch(f"{SCRAPE}.capture_event"):
        response = client.post("/api/scrape-job", json={"url": "https://unreachable.example.invalid/job"})

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Failed to scrape job posting")
    db.table.assert_not_called()


def test_scrape_job_success_even_when_recording_fails(client, db):
    db.table.return_value.insert.return_value.execute.side_effect = Exception("insert failed")
    url = "https://www.linkedin.com/jobs/view/1"

    with patch(GET, return_value=html_response(linkedin_page())), \
            patch(f"{SCRAPE}.capture_event") as mock_capture:
        response = client.post("/api/scrape-job", json={"url": url})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == 200
    data = body["data"]
    assert data["title"] == "Senior Python Engineer"
    assert data["company"] == "Acme Corp"
    assert data["location"] == "Remote, US"
    assert len(data["jobDescription"]) >= 100
    assert data["source"] == "linkedin"
    assert data["url"] == url

    db.table.assert_called_with("job_scrapings")
    mock_capture.assert_called_once()


# --- export-pdf ---

def test_export_pdf_unknown_template(client):
    response = client.post("/api/export-pdf", json={"resumeId": "resume-1", "templateId": "fancy"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Template not found"


def test_export_pdf_unknown_resume(client):
    with patch(f"{EXPORT}.crud_resume.get_resume", return_value=None):
        response = client.post("/api/export-pdf", json={"resumeId": "missing", "templateId": "modern"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Resume not found"


def test_export_pdf_malformed_content(client, stored_resume):
    broken = stored_resume.model_copy(update={"content": {"personal": {"fullName": {"first": "Jane"}}}})
    with patch(f"{EXPORT}.crud_resume.get_resume", return_value=broken):
        response = client.post("/api/export-pdf", json={"resumeId": "resume-1", "templateId": "modern"})
    assert response.status_code == 422


def test_export_pdf_returns_html_and_validation(client, stored_resume):
    with patch(f"{EXPORT}.crud_resume.get_resume", return_value=stored_resume) as mock_get, \
            patch(f"{EXPORT}.capture_event"):
        response = client.post(
            "/api/export-pdf",
            json={
                "resumeId": "resume-1",
                "templateId": "minimalist",
                "customizations": {"colors": {"primary": "#ff0000"}},
            },
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert "Jane Doe" in data["html"]
    assert "#ff0000" not in data["html"]
    assert data["validation"]["isValid"] is True
    assert data["validation"]["score"] == 100
    assert "browser print" in data["message"]
    assert mock_get.call_args.args[1:] == ("resume-1", "user-1")


def test_export_pdf_file(client, stored_resume):
    with patch(f"{EXPORT}.crud_resume.get_resume", return_value=stored_resume), \
            patch(f"{EXPORT}.create_pdf", return_value=b"%PDF-1.7 fake"):
        response = client.post("/api/export-pdf/file", json={"resumeId": "resume-1", "templateId": "professional"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content == b"%PDF-1.7 fake"


def test_export_pdf_file_render_failure(client, stored_resume):
    with patch(f"{EXPORT}.crud_resume.get_resume", return_value=stored_resume), \
            patch(f"{EXPORT}.create_pdf", return_value=None):
        response = client.post("/api/export-pdf/file", json={"resumeId": "resume-1", "templateId": "professional"})
    assert response.status_code == 500


# --- templates ---

def test_list_templates(client):
    response = client.get("/api/templates")
    assert response.status_code == 200
    assert [t["id"] for t in response.json()["data"]] == ["professional", "modern", "minimalist"]


def test_get_template(client):
    assert client.get("/api/templates/modern").json()["data"]["layout"]["columns"] == 2
    assert client.get("/api/templates/unknown").status_code == 404


# --- resumes ---

def test_list_resumes(client, stored_resume):
    with patch(f"{RESUMES}.crud_resume.get_resumes", return_value=[stored_resume]) as mock_list:
        response = client.get("/api/resumes")

    assert response.status_code == 200
    assert response.json()["data"][0]["id"] == "resume-1"
    assert mock_list.call_args.args[1] == "user-1"


def test_create_resume(client, stored_resume, resume_content_dict):
    with patch(f"{RESUMES}.crud_resume.create_resume", return_value=stored_resume) as mock_create:
        response = client.post("/api/resumes", json={"title": "Backend Resume", "content": resume_content_dict})

    assert response.status_code == 201
    assert response.json()["data"]["title"] == "Backend Resume"
    resume_in = mock_create.call_args.args[2]
    assert resume_in.content.personal.fullName == "Jane Doe"


def test_create_resume_requires_title(client):
    assert client.post("/api/resumes", json={"title": ""}).status_code == 400


def test_read_update_delete_missing_resume(client):
    with patch(f"{RESUMES}.crud_resume.get_resume", return_value=None), \
            patch(f"{RESUMES}.crud_resume.update_resume", return_value=None), \
            patch(f"{RESUMES}.crud_resume.delete_resume", return_value=False):
        assert client.get("/api/resumes/nope").status_code == 404
        assert client.patch("/api/resumes/nope", json={"title": "New"}).status_code == 404
        assert client.delete("/api/resumes/nope").status_code == 404


def test_update_resume(client, stored_resume):
    updated = stored_resume.model_copy(update={"title": "Renamed"})
    with patch(f"{RESUMES}.crud_resume.update_resume", return_value=updated):
        response = client.patch("/api/resumes/resume-1", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Renamed"


def test_match_resume(client, stored_resume):
    with patch(f"{RESUMES}.crud_resume.get_resume", return_value=stored_resume):
        response = client.post(
            "/api/resumes/resume-1/match",
            json={"jobDescription": "Python engineer with Kubernetes. Required: Kubernetes."},
        )

    assert response.status_code == 200
    report = response.json()["data"]
    assert "python" in report["foundKeywords"]
    assert "kubernetes" in report["skillsGap"]["missing"]


# --- regenerate-section ---

def test_regenerate_section(client, stored_resume):
    payload = {
        "resumeId": "resume-1",
        "sectionType": "summary",
        "currentContent": "Backend engineer",
        "jobDescription": "Senior Python engineer",
    }
    with patch(f"{REGENERATE}.crud_resume.get_owned_resume", return_value=stored_resume), \
            patch(f"{REGENERATE}.regenerate_section", return_value="<p>Senior backend engineer</p>") as mock_ai:
        response = client.post("/api/regenerate-section", json=payload)

    assert response.status_code == 200
    assert response.json()["content"] == "<p>Senior backend engineer</p>"
    mock_ai.assert_called_once_with("summary", "Backend engineer", "Senior Python engineer")


def test_regenerate_section_errors(client, stored_resume):
    payload = {"resumeId": "resume-1", "sectionType": "summary", "jobDescription": "Python"}

    with patch(f"{REGENERATE}.crud_resume.get_owned_resume", return_value=None):
        assert client.post("/api/regenerate-section", json=payload).status_code == 404

    with patch(f"{REGENERATE}.crud_resume.get_owned_resume", return_value=stored_resume), \
            patch(f"{REGENERATE}.regenerate_section", side_effect=DependencyConfigError("no key")):
        response = client.post("/api/regenerate-section", json=payload)
    assert response.status_code == 500
    assert response.json()["detail"] == "Service configuration error"

    assert client.post("/api/regenerate-section", json={"resumeId": "resume-1"}).status_code == 400


# --- profile ---

def test_profile(client):
    profile = Profile(id="user-1", email="jane.doe@example.com", full_name="Jane Doe")
    with patch("app.api.v1.endpoints.profile.get_profile", return_value=profile):
        response = client.get("/api/profile")
    assert response.status_code == 200
    assert response.json()["data"]["full_name"] == "Jane Doe"

    with patch("app.api.v1.endpoints.profile.get_profile", return_value=None):
        assert client.get("/api/profile").status_code == 404


def test_profile_requires_auth(anon_client):
    assert anon_client.get("/api/profile").status_code == 401


def test_bearer_token_is_checked(anon_client, db):
    db.auth.get_user.side_effect = Exception("invalid JWT")
    response = anon_client.get("/api/profile", headers={"Authorization": "Bearer bad-token"})
    assert response.status_code == 401
    db.auth.get_user.assert_called_once_with("bad-token")


# --- upload ---

UPLOAD = "app.api.v1.endpoints.upload"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_upload_requires_auth(anon_client):
    response = anon_client.post("/api/upload", files={"file": ("cv.pdf", b"%PDF", "application/pdf")})
    assert response.status_code == 401


def test_upload_rejects_unsupported_type(client):
    response = client.post("/api/upload", files={"file": ("cv.txt", b"Jane Doe", "text/plain")})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please upload a DOCX or PDF file."


def test_upload_rejects_large_files(client):
    with patch(f"{UPLOAD}.MAX_UPLOAD_BYTES", 8):
        response = client.post("/api/upload", files={"file": ("cv.pdf", b"%PDF-1.7 too big", "application/pdf")})
    assert response.status_code == 400
    assert response.json()["detail"] == "File size must be less than 10MB."


def test_upload_rejects_unreadable_and_empty_files(client):
    response = client.post("/api/upload", files={"file": ("cv.docx", b"not a zip", DOCX)})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Could not read DOCX file")

    with patch(f"{UPLOAD}.extract_text", return_value="  \n "):
        response = client.post("/api/upload", files={"file": ("cv.pdf", b"%PDF-1.7", "application/pdf")})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Could not extract text")


def test_upload_creates_resume(client, stored_resume):
    text = "Jane Doe\njane.doe@example.com\n\nSkills\nPython, Docker"
    with patch(f"{UPLOAD}.extract_text", return_value=text), \
            patch(f"{UPLOAD}.crud_resume.create_resume", return_value=stored_resume) as mock_create, \
            patch(f"{UPLOAD}.capture_event") as mock_capture:
        response = client.post("/api/upload", files={"file": ("cv.pdf", b"%PDF-1.7", "application/pdf")})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["resumeId"] == "resume-1"
    assert data["filename"] == "cv.pdf"
    assert data["parsed"]["content"]["personal"]["fullName"] == "Jane Doe"
    assert data["parsed"]["content"]["skills"] == ["Python", "Docker"]

    user_id, resume_in = mock_create.call_args.args[1:]
    assert user_id == "user-1"
    assert resume_in.title.startswith("Resume uploaded on ")
    assert mock_capture.call_args.args[:2] == ("resume_uploaded", "user-1")


# --- generate ---

GENERATE = "app.api.v1.endpoints.generate"
GENERATE_BODY = {
    "resume": "Backend engineer. Python, Django and PostgreSQL for six years.",
    "jobDescription": "We need a Python engineer. Required: Python, Kubernetes.",
}


def test_generate_requires_auth(anon_client):
    assert anon_client.post("/api/generate", json=GENERATE_BODY).status_code == 401


def test_generate_returns_content_and_analysis(client):
    with patch(f"{GENERATE}.limiter", RateLimiter(5, 60)), \
            patch(f"{GENERATE}.optimize_resume", return_value="Optimized resume") as mock_ai:
        response = client.post("/api/generate", json=GENERATE_BODY)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["optimizedContent"] == "Optimized resume"
    assert "python" in data["analysis"]["keywords"]
    assert "python" in data["analysis"]["relevantSections"]
    assert 0 < data["analysis"]["relevanceScore"] < 100
    assert data["analysis"]["suggestions"]
    assert mock_ai.call_args.args[:2] == (GENERATE_BODY["resume"], GENERATE_BODY["jobDescription"])


def test_generate_is_rate_limited_per_user(client):
    with patch(f"{GENERATE}.limiter", RateLimiter(1, 60)), \
            patch(f"{GENERATE}.optimize_resume", return_value="Optimized resume"):
        assert client.post("/api/generate", json=GENERATE_BODY).status_code == 200
        response = client.post("/api/generate", json=GENERATE_BODY)

    assert response.status_code == 429
    assert response.json()["detail"] == "Rate limit exceeded. Please try again later."
    assert response.headers["Retry-After"] == "60"


def test_generate_limits_input_size(client):
    too_long = dict(GENERATE_BODY, resume="x" * 10001)
    assert client.post("/api/generate", json=too_long).status_code == 400
    assert client.post("/api/generate", json=dict(GENERATE_BODY, jobDescription="")).status_code == 400


def test_generate_model_failures(client):
    with patch(f"{GENERATE}.limiter", RateLimiter(5, 60)):
        with patch(f"{GENERATE}.optimize_resume", side_effect=DependencyConfigError("no key")):
            response = client.post("/api/generate", json=GENERATE_BODY)
        assert response.status_code == 500
        assert response.json()["detail"] == "Service configuration error"

        with patch(f"{GENERATE}.optimize_resume", return_value=None):
            response = client.post("/api/generate", json=GENERATE_BODY)
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to generate resume content")
