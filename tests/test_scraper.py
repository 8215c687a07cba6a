"""Tests for page fetching and tag extraction."""

import pytest
import requests

import scraper
from scraper import MarkupParseError, PageStatusError, PageUnreachableError, extract_tags, fetch_page

SAMPLE_HTML = """
<html>
  <head>
    <title>  Example Domain - Home  </title>
    <meta name="description" content="An example page used in tests.">
    <meta name="robots" content="index, follow">
    <link rel="canonical" href="https://example.com/">
    <meta property="og:title" content="Example OG">
    <meta property="og:image" content="https://example.com/og.png">
    <meta property="og:description" content="">
    <meta property="article:author" content="Someone">
    <meta name="twitter:card" content="summary">
    <meta name="twitter:site" content="@example">
    <meta name="viewport" content="width=device-width">
    <script type="application/ld+json">
      {"@context": "https://schema.org", "@type": "Organization"}
    </script>
    <script type="application/ld+json">not json at all</script>
    <script type="application/ld+json">   </script>
  </head>
  <body><h1>Hello</h1></body>
</html>
"""


class TestExtractTags:
    def test_extracts_all_tag_families(self):
        record = extract_tags(SAMPLE_HTML)

        assert record.title == "Example Domain - Home"
        assert record.meta_description == "An example page used in tests."
        assert record.robots_directive == "index, follow"
        assert record.canonical_url == "https://example.com/"
        assert record.og_tags == {"og:title": "Example OG", "og:image": "https://example.com/og.png"}
        assert record.twitter_tags == {"twitter:card": "summary", "twitter:site": "@example"}

    def test_structured_data_kept_raw_in_document_order(self):
        record = extract_tags(SAMPLE_HTML)
        assert record.structured_data_blocks == (
            '{"@context": "https://schema.org", "@type": "Organization"}',
            "not json at all",
        )

    def test_absent_tags_are_none(self):
        record = extract_tags("<html><head></head><body></body></html>")
        assert record.title is None
        assert record.meta_description is None
        assert record.canonical_url is None
        assert record.robots_directive is None
        assert record.og_tags == {}
        assert record.twitter_tags == {}
        assert record.structured_data_blocks == ()

    def test_parser_failure_raises(self, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(scraper, "BeautifulSoup", broken)
        with pytest.raises(MarkupParseError):
            extract_tags("<html></html>")


class TestFetchPage:
    def test_returns_markup(self, serve_page):
        calls = serve_page("<html><title>ok</title></html>")
        assert fetch_page("https://example.com") == "<html><title>ok</title></html>"
        assert calls == ["https://example.com"]

    def test_non_2xx_raises_status_error(self, serve_page):
        serve_page(status_code=404, reason="Not Found")
        with pytest.raises(PageStatusError) as excinfo:
            fetch_page("https://example.com/missing")
        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Failed to fetch the URL: 404 Not Found"

    def test_network_error_raises_unreachable(self, monkeypatch):
        def fake_get(url, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(scraper.requests, "get", fake_get)
        with pytest.raises(PageUnreachableError) as excinfo:
            fetch_page("https://down.example.com")
        assert "Could not reach https://down.example.com" in excinfo.value.message
