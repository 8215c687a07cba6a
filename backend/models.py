"""Data models and types used across the backend.

Database table definitions are in database.py.
API request/response and analysis report shapes live in schemas.py.
The scraper output (TagRecord) and the closed vocabularies used by the
analyzer live here.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class TagStatus(str, Enum):
    """Verdict attached to a single tag or tag family.

    ``ERROR`` is reserved for upstream parse failures; the analyzer never
    produces it.
    """

    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    MISSING = "missing"
    ERROR = "error"


class TagFamily(str, Enum):
    """The seven tag families reported in the tag inventory, in display order."""

    TITLE = "Title Tag"
    META_DESCRIPTION = "Meta Description"
    OPEN_GRAPH = "Open Graph Tags"
    TWITTER_CARD = "Twitter Card Tags"
    CANONICAL = "Canonical URL"
    ROBOTS = "Robots Meta"
    STRUCTURED_DATA = "Schema.org Structured Data"


class RecommendationCategory(str, Enum):
    """Recommendation priority. Declaration order is output order."""

    CRITICAL = "critical"
    IMPROVEMENT = "improvement"
    GOOD = "good"


class TagRecord(BaseModel):
    """Meta-tag values extracted from one page.

    Absent tags are ``None`` (or missing map keys); empty strings are
    normalized to absent so every consumer can rely on truthiness.
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    meta_description: str | None = None
    og_tags: Mapping[str, str] = Field(default_factory=dict)
    twitter_tags: Mapping[str, str] = Field(default_factory=dict)
    canonical_url: str | None = None
    robots_directive: str | None = None
    structured_data_blocks: tuple[str, ...] = ()

    @field_validator("title", "meta_description", "canonical_url", "robots_directive", mode="before")
    @classmethod
    def empty_text_is_absent(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if text else None

    @field_validator("og_tags", "twitter_tags", mode="before")
    @classmethod
    def drop_empty_tags(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        return {key: content for key, content in value.items() if key and content}

    @field_validator("og_tags", "twitter_tags", mode="after")
    @classmethod
    def read_only_tags(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("og_tags", "twitter_tags")
    def serialize_tags(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @field_validator("structured_data_blocks", mode="before")
    @classmethod
    def drop_empty_blocks(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(str(block) for block in value if block)


class StoredAnalysis(TypedDict):
    """One row of the seo_analyses table, JSON columns decoded."""

    id: int
    url: str
    title: str | None
    meta_description: str | None
    og_tags: dict[str, str]
    twitter_tags: dict[str, str]
    canonical_url: str | None
    robots_tags: str | None
    schema_data: list[str]
    essential_score: int
    social_score: int
    advanced_score: int
    overall_score: int
    recommendations: list[dict]
    result_json: dict
    created_at: str
