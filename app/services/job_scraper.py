"""Job posting scraper.

Validates a URL, fetches the page once and pulls title, company, location and
description out of the HTML. Site-specific CSS selectors are tried first, then
schema.org JSON-LD, then generic selectors. Expected failures come back as a
JobScrapingResult with success=False; nothing here raises for a bad URL or an
unreachable site.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from app.core.config import settings
from app.schemas.JobSchemas import JobScrapingResult, ScrapeFailure, UrlValidationResult
from app.tools.get_url_contents import PageFetchError, fetch_page

logger = logging.getLogger(__name__)

MIN_FIELD_LENGTH = 4
MIN_DESCRIPTION_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 5000

FIELDS = ("title", "company", "location", "description")


@dataclass(frozen=True)
class SiteStrategy:
    name: str
    domains: Tuple[str, ...]
    title: str
    company: str
    location: str
    description: str

    def matches(self, hostname: str) -> bool:
        return any(hostname == d or hostname.endswith("." + d) for d in self.domains)

    def selector(self, field: str) -> str:
        return getattr(self, field)


SITE_STRATEGIES: Tuple[SiteStrategy, ...] = (
    SiteStrategy(
        name="linkedin",
        domains=("linkedin.com",),
        title='[data-automation-id="job-title"], .top-card-layout__title, .job-details-jobs-unified-top-card__job-title',
        company='[data-automation-id="job-details-company-name"], .topcard__org-name-link, .job-details-jobs-unified-top-card__company-name',
        location='[data-automation-id="job-details-location"], .topcard__flavor--bullet, .job-details-jobs-unified-top-card__bullet',
        description='[data-automation-id="job-details-description"], .description__text, .jobs-description__content',
    ),
    SiteStrategy(
        name="indeed",
        domains=("indeed.com",),
        title='[data-testid="jobsearch-JobInfoHeader-title"], .jobsearch-JobInfoHeader-title',
        company='[data-testid="inlineHeader-companyName"], [data-company-name="true"], .jobsearch-InlineCompanyRating',
        location='[data-testid="job-location"], [data-testid="inlineHeader-companyLocation"], .jobsearch-JobInfoHeader-subtitle',
        description='[data-testid="jobsearch-jobDescriptionText"], #jobDescriptionText, .jobsearch-jobDescriptionText',
    ),
    SiteStrategy(
        name="glassdoor",
        domains=("glassdoor.com",),
        title='[data-test="job-title"], .jobTitle',
        company='[data-test="employer-name"], .employerName',
        location='[data-test="location"], [data-test="job-location"], .location',
        description='[data-test="jobDescriptionContent"], .jobDescriptionContent',
    ),
    SiteStrategy(
        name="workday",
        domains=("workday.com", "myworkdayjobs.com"),
        title='[data-automation-id="jobPostingHeader"]',
        company='[data-automation-id="jobPostingCompany"]',
        location='[data-automation-id="locations"]',
        description='[data-automation-id="jobPostingDescription"]',
    ),
    SiteStrategy(
        name="lever",
        domains=("lever.co",),
        title=".posting-headline h2",
        company=".posting-headline .company-name, .main-header-logo img[alt]",
        location=".posting-categories .location",
        description=".posting-page .section-wrapper, .posting-content .section-wrapper",
    ),
    SiteStrategy(
        name="greenhouse",
        domains=("greenhouse.io",),
        title=".app-title, .job__title h1",
        company=".company-name",
        location=".location, .job__location",
        description="#content, .job-post-content, .job__description",
    ),
)

GENERIC_SELECTORS: Dict[str, List[str]] = {
    "title": ["h1", '[class*="job-title"]', '[class*="title"]', '[id*="title"]', '[data-testid*="title"]'],
    "company": ['[class*="company"]', '[class*="employer"]', '[data-testid*="company"]', '[id*="company"]'],
    "location": ['[class*="location"]', '[class*="address"]', '[data-testid*="location"]', '[id*="location"]'],
    "description": [
        ".job-description",
        "#job-description",
        '[class*="description"]',
        '[class*="details"]',
        '[class*="content"]',
        "main",
    ],
}

_WHITESPACE = re.compile(r"\s+")


def validate_job_url(url: Optional[str]) -> UrlValidationResult:
    """Check that `url` is a well-formed http(s) URL. Never raises."""
    if url is None or not isinstance(url, str) or not url.strip():
        return UrlValidationResult(valid=False, error="URL is required")

    candidate = url.strip()
    if any(ch.isspace() for ch in candidate):
        return UrlValidationResult(valid=False, error="Invalid URL format")

    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        # accessing .port validates the port number
        parts.port
    except ValueError:
        return UrlValidationResult(valid=False, error="Invalid URL format")

    if parts.scheme.lower() not in ("http", "https"):
        return UrlValidationResult(valid=False, error="Only HTTP and HTTPS URLs are supported")
    if not hostname:
        return UrlValidationResult(valid=False, error="Invalid URL format")
    if "." not in hostname and hostname != "localhost":
        return UrlValidationResult(valid=False, error="URL host is not a valid domain")
    return UrlValidationResult(valid=True)


def strategy_for_url(url: str) -> Optional[SiteStrategy]:
    hostname = (urlsplit(url).hostname or "").lower()
    for strategy in SITE_STRATEGIES:
        if strategy.matches(hostname):
            return strategy
    return None


def clean_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _element_text(element: Any) -> str:
    if element.name == "img":
        return clean_text(element.get("alt", ""))
    return clean_text(element.get_text(" ", strip=True))


def extract_text_with_selectors(soup: BeautifulSoup, selectors: Iterable[str]) -> str:
    """Return the text of the first element matching a selector, in order."""
    for selector in selectors:
        try:
            element = soup.select_one(selector)
        except ValueError:
            logger.debug("Skipping unsupported selector %r", selector)
            continue
        if element is None:
            continue
        text = _element_text(element)
        if len(text) >= MIN_FIELD_LENGTH:
            return text
    return ""


def _iter_json_ld(soup: BeautifulSoup) -> Iterable[Dict[str, Any]]:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue
        stack = [data]
        while stack:
            item = stack.pop()
            if isinstance(item, list):
                stack.extend(item)
            elif isinstance(item, dict):
                if "@graph" in item:
                    stack.append(item["@graph"])
                yield item


def extract_json_ld(soup: BeautifulSoup) -> Dict[str, str]:
    """Read fields from a schema.org JobPosting block if the page has one."""
    for item in _iter_json_ld(soup):
        kind = item.get("@type")
        kinds = kind if isinstance(kind, list) else [kind]
        if "JobPosting" not in kinds:
            continue

        fields: Dict[str, str] = {}
        if isinstance(item.get("title"), str):
            fields["title"] = clean_text(item["title"])

        org = item.get("hiringOrganization")
        if isinstance(org, dict) and isinstance(org.get("name"), str):
            fields["company"] = clean_text(org["name"])
        elif isinstance(org, str):
            fields["company"] = clean_text(org)

        location = item.get("jobLocation")
        if isinstance(location, list) and location:
            location = location[0]
        if isinstance(location, dict):
            address = location.get("address")
            if isinstance(address, dict):
                parts = [address.get(k) for k in ("addressLocality", "addressRegion", "addressCountry")]
                fields["location"] = ", ".join(p for p in parts if isinstance(p, str) and p)

        description = item.get("description")
        if isinstance(description, str):
            # JSON-LD descriptions are usually HTML fragments
            fields["description"] = clean_text(BeautifulSoup(description, "html.parser").get_text(" "))
        return {k: v for k, v in fields.items() if v}
    return {}


def extract_meta_fields(soup: BeautifulSoup) -> Dict[str, str]:
    """Last-resort title and company from Open Graph tags or <title>."""
    fields: Dict[str, str] = {}
    for field, prop in (("title", "og:title"), ("company", "og:site_name")):
        tag = soup.find("meta", attrs={"property": prop})
        if tag is not None and tag.get("content"):
            fields[field] = clean_text(tag["content"])
    if not fields.get("title") and soup.title is not None:
        fields["title"] = clean_text(soup.title.get_text(" "))
    return {k: v for k, v in fields.items() if len(v) >= MIN_FIELD_LENGTH}


def normalize_description(description: str) -> str:
    description = clean_text(description)
    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH] + "..."
    return description


def extract_job_info(html: str, url: str) -> JobScrapingResult:
    """Pull job fields out of `html`. Pure: no network access."""
    soup = BeautifulSoup(html, "html.parser")
    strategy = strategy_for_url(url)
    source = strategy.name if strategy else "generic"

    found: Dict[str, str] = {}
    if strategy is not None:
        for field in FIELDS:
            found[field] = extract_text_with_selectors(soup, [strategy.selector(field)])

    structured = extract_json_ld(soup)
    for field in FIELDS:
        if not found.get(field) and structured.get(field):
            found[field] = structured[field]

    for field in FIELDS:
        if not found.get(field):
            found[field] = extract_text_with_selectors(soup, GENERIC_SELECTORS[field])

    meta = extract_meta_fields(soup)
    for field in ("title", "company"):
        if not found.get(field) and meta.get(field):
            found[field] = meta[field]

    description = normalize_description(found.get("description", ""))
    if len(description) < MIN_DESCRIPTION_LENGTH:
        return JobScrapingResult.failed(
            ScrapeFailure.NO_CONTENT,
            "Could not extract meaningful job description from the page",
        )
    if not found.get("title") or not found.get("company"):
        return JobScrapingResult.failed(
            ScrapeFailure.NO_CONTENT,
            "Could not find the job title and company on the page",
        )

    return JobScrapingResult(
        success=True,
        title=found["title"],
        company=found["company"],
        location=found.get("location") or None,
        jobDescription=description,
        source=source,
    )


async def scrape_job_description(url: str, timeout: Optional[float] = None) -> JobScrapingResult:
    """Validate, fetch (once) and parse a job posting."""
    validation = validate_job_url(url)
    if not validation.valid:
        return JobScrapingResult.failed(ScrapeFailure.INVALID_URL, validation.error or "Invalid URL")

    url = url.strip()
    try:
        html = await fetch_page(url, timeout=timeout or settings.SCRAPER_TIMEOUT_SECONDS)
    except PageFetchError as e:
        logger.info("Scrape of %s failed (%s): %s", url, e.kind.value, e)
        return JobScrapingResult.failed(e.kind, f"Failed to scrape job posting: {e}")

    result = extract_job_info(html, url)
    if result.success:
        logger.info(
            "Scraped %s via %s strategy (%d chars)", url, result.source, len(result.jobDescription or "")
        )
    else:
        logger.info("No job content found at %s", url)
    return result
