"""Tests for analysis storage."""

import pytest

from analyzer import analyze_tags
from database import get_analysis, get_analysis_by_url, list_recent_analyses, normalize_url, save_analysis
from models import TagRecord


def store(url, record=None):
    record = record or TagRecord()
    return save_analysis(record, analyze_tags(url, record))


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://Example.com/Path/", "https://example.com/path"),
        ("https://example.com/", "https://example.com"),
        ("https://example.com/a?Q=1", "https://example.com/a?Q=1"),
        ("not a url", "not a url"),
        ("NOT A URL", "not a url"),
        ("https://example.com:443/a", "https://example.com/a"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
        ("https://user:pw@example.com/a", "https://example.com/a"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


class TestAnalysisStore:
    def test_save_and_get(self, complete_record):
        analysis_id = store("https://example.com/", complete_record)
        row = get_analysis(analysis_id)

        assert row["url"] == "https://example.com/"
        assert row["title"] == complete_record.title
        assert row["og_tags"]["og:type"] == "website"
        assert row["robots_tags"] == "index, follow"
        assert row["schema_data"] == ['{"@type": "Organization"}']
        assert row["overall_score"] == 100
        assert row["essential_score"] == 6
        assert [r["category"] for r in row["recommendations"]] == ["good", "good", "good"]
        assert row["result_json"]["score_data"]["overall"] == 100

    def test_reanalysis_overwrites_same_page(self):
        first = store("https://example.com/page")
        second = store("https://EXAMPLE.com/page/", TagRecord(title="x" * 40))

        assert first == second
        assert len(list_recent_analyses()) == 1
        assert get_analysis(first)["title"] == "x" * 40
        assert get_analysis(first)["url"] == "https://EXAMPLE.com/page/"

    def test_lookup_by_url(self):
        analysis_id = store("https://example.com/a")
        assert get_analysis_by_url("https://example.com/a/")["id"] == analysis_id
        assert get_analysis_by_url("https://example.com/b") is None

    def test_unknown_id(self):
        assert get_analysis(999) is None

    def test_recent_newest_first_and_limited(self):
        ids = [store(f"https://example.com/{n}") for n in range(5)]
        recent = list_recent_analyses(limit=3)
        assert [row["id"] for row in recent] == list(reversed(ids))[:3]
        assert len(list_recent_analyses(limit=0)) == 1

    def test_default_port_and_credentials_share_a_row(self):
        first = store("https://example.com/a")
        assert store("https://example.com:443/a") == first
        assert store("https://user:pw@example.com/a/") == first
        assert len(list_recent_analyses()) == 1
