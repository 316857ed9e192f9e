from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ScrapeFailure(str, Enum):
    INVALID_URL = "invalid_url"
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_ERROR = "http_error"
    BLOCKED = "blocked"
    RATE_LIMITED = "rate_limited"
    NOT_HTML = "not_html"
    NO_CONTENT = "no_content"


class UrlValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class JobScrapingResult(BaseModel):
    """Outcome of a single scrape attempt.

    On success the content fields are populated; on failure `error` carries a
    readable reason and `failure` says which kind of failure it was.
    """
    success: bool
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    jobDescription: Optional[str] = None
    source: Optional[str] = None
    error: Optional[str] = None
    failure: Optional[ScrapeFailure] = None

    @classmethod
    def failed(cls, failure: ScrapeFailure, error: str) -> "JobScrapingResult":
        return cls(success=False, failure=failure, error=error)


class ScrapeJobRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)

    @field_validator("url")
    @classmethod
    def _must_be_job_url(cls, v: str) -> str:
        # imported here to avoid a circular import with the scraper module
        from app.services.job_scraper import validate_job_url

        result = validate_job_url(v)
        if not result.valid:
            raise ValueError(result.error or "Invalid URL")
        return v.strip()


class ScrapedJob(BaseModel):
    title: str
    company: str
    location: Optional[str] = None
    jobDescription: str
    source: str
    url: str


class ScrapeJobResponse(BaseModel):
    status: int = 200
    message: str = "Job posting scraped successfully"
    data: ScrapedJob


class JobScrapingRecord(BaseModel):
    """Row written to the job_scrapings table."""
    user_id: str
    url: str
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    scraped_at: datetime
