"""Page fetcher and meta tag extractor.

Fetches a single URL and extracts the tags the analyzer needs: title,
meta description, canonical, robots, Open Graph, Twitter Card and JSON-LD
blocks. Does NOT crawl subpages or execute JavaScript.
"""

import logging

import requests
from bs4 import BeautifulSoup

from config import FETCH_TIMEOUT_SECONDS, FETCH_USER_AGENT
from models import TagRecord

logger = logging.getLogger(__name__)

_REQUEST_HEADERS = {
    "User-Agent": FETCH_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class ScrapeError(Exception):
    """Base class for failures before analysis can start."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FetchError(ScrapeError):
    """The page could not be downloaded."""


class PageUnreachableError(FetchError):
    """Network level failure: DNS, connection, TLS or timeout."""


class PageStatusError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"Failed to fetch the URL: {status_code} {reason}".strip())
        self.status_code = status_code


class MarkupParseError(ScrapeError):
    """The downloaded markup could not be parsed."""


def fetch_page(url: str) -> str:
    """Download `url` and return its markup as text."""
    logger.info("Fetching %s", url)
    try:
        response = requests.get(url, timeout=FETCH_TIMEOUT_SECONDS, headers=_REQUEST_HEADERS)
    except requests.RequestException as exc:
        logger.warning("Fetch failed for %s: %s", url, exc)
        raise PageUnreachableError(f"Could not reach {url}. Check the address and try again.") from exc

    if not 200 <= response.status_code < 300:
        logger.warning("Fetch for %s returned HTTP %s", url, response.status_code)
        raise PageStatusError(response.status_code, response.reason or "")

    response.encoding = response.apparent_encoding or "utf-8"
    return response.text


def _meta_content(tag) -> str:
    return (tag.get("content") or "").strip() if tag else ""


def extract_tags(markup: str) -> TagRecord:
    """Parse `markup` and return the SEO tags found in it."""
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except Exception as exc:
        raise MarkupParseError("Could not parse the page markup.") from exc

    # --- Title ---
    title = soup.title.get_text().strip() if soup.title else ""

    # --- Meta description / robots ---
    meta_description = _meta_content(soup.find("meta", attrs={"name": "description"}))
    robots_directive = _meta_content(soup.find("meta", attrs={"name": "robots"}))

    # --- Canonical URL ---
    canonical_url = ""
    canonical_tag = soup.find("link", attrs={"rel": "canonical"})
    if canonical_tag and canonical_tag.get("href"):
        canonical_url = (canonical_tag["href"] or "").strip()

    # --- Open Graph ---
    og_tags: dict[str, str] = {}
    for tag in soup.find_all("meta", attrs={"property": True}):
        prop = (tag.get("property") or "").strip()
        content = _meta_content(tag)
        if prop.startswith("og:") and content:
            og_tags[prop] = content

    # --- Twitter Card ---
    twitter_tags: dict[str, str] = {}
    for tag in soup.find_all("meta", attrs={"name": True}):
        name = (tag.get("name") or "").strip()
        content = _meta_content(tag)
        if name.startswith("twitter:") and content:
            twitter_tags[name] = content

    # --- Structured data (raw JSON-LD, not validated) ---
    structured_data_blocks: list[str] = []
    for script_tag in soup.find_all("script", attrs={"type": "application/ld+json"}):
        block = (script_tag.string or "").strip()
        if block:
            structured_data_blocks.append(block)

    return TagRecord(
        title=title or None,
        meta_description=meta_description or None,
        og_tags=og_tags,
        twitter_tags=twitter_tags,
        canonical_url=canonical_url or None,
        robots_directive=robots_directive or None,
        structured_data_blocks=tuple(structured_data_blocks),
    )
