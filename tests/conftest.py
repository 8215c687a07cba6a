"""
conftest.py — shared pytest fixtures.

Every test gets its own SQLite file; HTTP fetches are never real.
"""

import pytest
from fastapi.testclient import TestClient

import database
import scraper
from main import app
from models import TagRecord


class FakeResponse:
    """Just enough of requests.Response for fetch_page()."""

    def __init__(self, text: str = "", status_code: int = 200, reason: str = "OK"):
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.apparent_encoding = "utf-8"
        self.encoding = None


@pytest.fixture(autouse=True)
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "analyses.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    database.init_db()
    return path


@pytest.fixture
def client(db_path):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def serve_page(monkeypatch):
    """Make scraper.requests.get answer with the given markup/status."""

    def _serve(text: str = "", status_code: int = 200, reason: str = "OK"):
        calls = []

        def fake_get(url, **kwargs):
            calls.append(url)
            return FakeResponse(text=text, status_code=status_code, reason=reason)

        monkeypatch.setattr(scraper.requests, "get", fake_get)
        return calls

    return _serve


@pytest.fixture
def complete_record():
    """A page with every analyzed tag present and well sized."""
    return TagRecord(
        title="T" * 50,
        meta_description="D" * 140,
        og_tags={
            "og:title": "Example title",
            "og:description": "An Open Graph description that is comfortably over sixty characters.",
            "og:image": "https://example.com/card.png",
            "og:url": "https://example.com/",
            "og:type": "website",
        },
        twitter_tags={
            "twitter:card": "summary_large_image",
            "twitter:title": "Twitter title",
            "twitter:description": "Twitter description",
            "twitter:image": "https://example.com/tw.png",
            "twitter:image:alt": "A card",
            "twitter:site": "@example",
        },
        canonical_url="https://example.com/",
        robots_directive="index, follow",
        structured_data_blocks=['{"@type": "Organization"}'],
    )
