"""Static SEO rule tables: length limits, scoring weights, icon hints.

Everything here is read-only configuration consulted by analyzer.py.
"""

from types import MappingProxyType
from typing import NamedTuple

from models import RecommendationCategory, TagFamily


class LengthRange(NamedTuple):
    min: int
    max: int
    ideal: int

    def contains(self, length: int) -> bool:
        return self.min <= length <= self.max


TITLE_LENGTH = LengthRange(min=30, max=60, ideal=50)
META_DESCRIPTION_LENGTH = LengthRange(min=120, max=158, ideal=150)
OG_DESCRIPTION_LENGTH = LengthRange(min=60, max=200, ideal=150)

# Essential weights only count toward the total when the tag exists.
ESSENTIAL_WEIGHTS = MappingProxyType({
    "title": 2,
    "meta-description": 2,
    "canonical": 1,
    "robots": 1,
})

# Social and advanced weights always count toward the total.
OPEN_GRAPH_WEIGHTS = MappingProxyType({
    "og:title": 1,
    "og:description": 1,
    "og:image": 1,
    "og:url": 0.5,
    "og:type": 0.5,
})
TWITTER_WEIGHTS = MappingProxyType({
    "twitter:card": 0.5,
    "twitter:title": 0.5,
    "twitter:description": 0.5,
    "twitter:image": 0.5,
    "twitter:site": 0.5,
})
ADVANCED_WEIGHTS = MappingProxyType({
    "schema": 2,
})

CATEGORY_WEIGHTS = MappingProxyType({
    "essential": 0.5,
    "social": 0.3,
    "advanced": 0.2,
})

# Inventory status is "good" only when every one of these is present.
OPEN_GRAPH_REQUIRED = ("og:title", "og:description", "og:image", "og:url")
TWITTER_REQUIRED = ("twitter:card", "twitter:title", "twitter:description", "twitter:image")

TAG_ICONS = MappingProxyType({
    TagFamily.TITLE: "ri-heading",
    TagFamily.META_DESCRIPTION: "ri-file-text-line",
    TagFamily.OPEN_GRAPH: "ri-facebook-circle-line",
    TagFamily.TWITTER_CARD: "ri-twitter-line",
    TagFamily.CANONICAL: "ri-link",
    TagFamily.ROBOTS: "ri-robot-line",
    TagFamily.STRUCTURED_DATA: "ri-code-line",
})

RECOMMENDATION_ICONS = MappingProxyType({
    RecommendationCategory.CRITICAL: "ri-close-circle-line",
    RecommendationCategory.IMPROVEMENT: "ri-error-warning-line",
    RecommendationCategory.GOOD: "ri-check-line",
})

SCHEMA_DOCS_URL = "https://schema.org/docs/gs.html"

NO_TITLE = "No title found"
NO_DESCRIPTION = "No description found"
