import asyncio
import ipaddress
import logging
import socket
import time
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlsplit

import requests

from app.schemas.JobSchemas import ScrapeFailure

logger = logging.getLogger(__name__)

BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

# LinkedIn answers scrapers with a non-standard 999
BLOCKED_STATUSES = {401, 403, 999}
RATE_LIMITED_STATUSES = {429}
REDIRECT_STATUSES = {301, 302, 303, 307, 308}

MAX_REDIRECTS = 5
MAX_PAGE_BYTES = 2 * 1024 * 1024
CHUNK_SIZE = 16 * 1024


class PageFetchError(Exception):
    """Raised when a page cannot be fetched; `kind` classifies the failure."""

    def __init__(self, kind: ScrapeFailure, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


def _is_public_address(address: str) -> bool:
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return ip.is_global and not ip.is_multicast


def resolve_host(hostname: str) -> List[str]:
    infos = socket.getaddrinfo(hostname, None, proto=socket.IPPROTO_TCP)
    return [info[4][0] for info in infos]


def ensure_public_host(url: str) -> None:
    """Refuse hosts that are, or resolve to, loopback/private/link-local/reserved addresses."""
    hostname = (urlsplit(url).hostname or "").lower()
    if not hostname or hostname == "localhost" or hostname.endswith(".localhost"):
        raise PageFetchError(ScrapeFailure.INVALID_URL, "URL host is not a public address")

    try:
        literal = ipaddress.ip_address(hostname)
    except ValueError:
        literal = None
    if literal is not None:
        if not _is_public_address(hostname):
            raise PageFetchError(ScrapeFailure.INVALID_URL, "URL host is not a public address")
        return

    try:
        addresses = resolve_host(hostname)
    except socket.gaierror as e:
        raise PageFetchError(ScrapeFailure.NETWORK, f"Could not resolve host: {hostname}") from e
    if not addresses or not all(_is_public_address(a) for a in addresses):
        raise PageFetchError(ScrapeFailure.INVALID_URL, "URL host is not a public address")


def _read_body(r: requests.Response, deadline: float, timeout: float) -> str:
    declared = r.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_PAGE_BYTES:
        raise PageFetchError(ScrapeFailure.TIMEOUT, "Page is larger than the download limit", r.status_code)

    body = bytearray()
    try:
        for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
            body.extend(chunk)
            if len(body) > MAX_PAGE_BYTES:
                raise PageFetchError(ScrapeFailure.TIMEOUT, "Page is larger than the download limit", r.status_code)
            if time.monotonic() > deadline:
                raise PageFetchError(ScrapeFailure.TIMEOUT, f"Request timed out after {timeout:g}s", r.status_code)
    except requests.Timeout as e:
        raise PageFetchError(ScrapeFailure.TIMEOUT, f"Request timed out after {timeout:g}s") from e
    except requests.RequestException as e:
        raise PageFetchError(ScrapeFailure.NETWORK, f"Connection failed: {e.__class__.__name__}") from e

    encoding = r.encoding or "utf-8"
    try:
        return bytes(body).decode(encoding, errors="replace")
    except LookupError:
        return bytes(body).decode("utf-8", errors="replace")


def _check_status(r: requests.Response) -> None:
    if r.status_code in RATE_LIMITED_STATUSES:
        raise PageFetchError(ScrapeFailure.RATE_LIMITED, "The job site is rate limiting requests", r.status_code)
    if r.status_code in BLOCKED_STATUSES:
        raise PageFetchError(ScrapeFailure.BLOCKED, f"The job site blocked the request (HTTP {r.status_code})", r.status_code)
    if not 200 <= r.status_code < 300:
        raise PageFetchError(ScrapeFailure.HTTP_ERROR, f"HTTP {r.status_code}: {r.reason or 'error'}", r.status_code)

    content_type = r.headers.get("content-type", "")
    if "html" not in content_type.lower():
        raise PageFetchError(ScrapeFailure.NOT_HTML, "Response is not HTML content", r.status_code)


def _get_html(url: str, timeout: float) -> str:
    deadline = time.monotonic() + timeout
    for _ in range(MAX_REDIRECTS + 1):
        ensure_public_host(url)
        remaining = max(deadline - time.monotonic(), 0.1)
        try:
            r = requests.get(url, headers=BROWSER_HEADERS, timeout=remaining, allow_redirects=False, stream=True)
        except requests.Timeout as e:
            raise PageFetchError(ScrapeFailure.TIMEOUT, f"Request timed out after {timeout:g}s") from e
        except requests.RequestException as e:
            raise PageFetchError(ScrapeFailure.NETWORK, f"Could not reach host: {e.__class__.__name__}") from e

        try:
            location = r.headers.get("location")
            if r.status_code in REDIRECT_STATUSES and location:
                next_url = urljoin(url, location)
                if urlsplit(next_url).scheme.lower() not in ("http", "https"):
                    raise PageFetchError(ScrapeFailure.HTTP_ERROR, "Redirected to a non-HTTP URL", r.status_code)
                logger.debug("Following redirect %s -> %s", url, next_url)
                url = next_url
                continue

            _check_status(r)
            return _read_body(r, deadline, timeout)
        finally:
            r.close()

    raise PageFetchError(ScrapeFailure.HTTP_ERROR, f"Too many redirects (more than {MAX_REDIRECTS})")


async def fetch_page(url: str, timeout: float = 10.0) -> str:
    """Fetch a page once, off the event loop, and return its HTML.

    The whole fetch (every redirect hop and the body) is capped at `timeout`
    seconds and MAX_PAGE_BYTES. Redirects are followed by hand so each hop's
    host is checked. No retries: callers decide whether to try again.
    """
    logger.debug("Fetching %s (timeout=%ss)", url, timeout)
    try:
        return await asyncio.wait_for(asyncio.to_thread(_get_html, url, timeout), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise PageFetchError(ScrapeFailure.TIMEOUT, f"Request timed out after {timeout:g}s") from e
