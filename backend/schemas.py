"""Pydantic schemas for API request/response and the analysis report."""

from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import SplitResult, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from models import RecommendationCategory, TagFamily, TagStatus


DEFAULT_PORTS = {"http": 80, "https": 443}
INVALID_URL_MESSAGE = "Invalid URL. Please provide a valid http(s) URL."


def host_with_port(parsed: SplitResult) -> str:
    """Lowercased host of `parsed`, with its port unless it is the scheme default.

    Raises ValueError when the port is not a number in range.
    """
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parsed.port
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        host += f":{port}"
    return host


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    url: str

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, value: object) -> str:
        try:
            parsed = urlsplit(str(value or "").strip())
            netloc = host_with_port(parsed)
        except ValueError as exc:
            raise ValueError(INVALID_URL_MESSAGE) from exc
        if parsed.scheme not in DEFAULT_PORTS or not parsed.hostname:
            raise ValueError(INVALID_URL_MESSAGE)
        userinfo, at, _ = parsed.netloc.rpartition("@")
        if at:
            netloc = f"{userinfo}@{netloc}"
        return urlunsplit((parsed.scheme, netloc, parsed.path or "/", parsed.query, parsed.fragment))


class Finding(BaseModel):
    """One evaluative statement about a single tag, shown under a preview."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: str
    status: TagStatus


class SearchPreview(BaseModel):
    """How the page would render as a search engine result."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    description: str
    findings: tuple[Finding, ...]


class SocialPreview(BaseModel):
    """How the page would render as a social network link card."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    image: str
    url: str
    type: str | None = None
    findings: tuple[Finding, ...]


class InventoryEntry(BaseModel):
    """Status of one tag family plus its serialized markup for display."""

    model_config = ConfigDict(frozen=True)

    tag_family: TagFamily
    icon_hint: str
    status: TagStatus
    raw_values: tuple[str, ...]


class CategoryScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    total: int = Field(ge=0)


class ScoreData(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall: int = Field(ge=0, le=100)
    essential: CategoryScore
    social: CategoryScore
    advanced: CategoryScore


class RecommendationLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    url: str


class Recommendation(BaseModel):
    """Actionable finding shown in the recommendations panel."""

    model_config = ConfigDict(frozen=True)

    category: RecommendationCategory
    icon_hint: str
    title: str
    description: str
    link: RecommendationLink | None = None


class AnalysisResult(BaseModel):
    """Full report for one analyzed page. Returned by POST /api/analyze."""

    model_config = ConfigDict(frozen=True)

    url: str
    search_preview: SearchPreview
    social_preview: Mapping[str, SocialPreview]
    tag_inventory: tuple[InventoryEntry, ...]
    score_data: ScoreData
    recommendations: tuple[Recommendation, ...]

    @field_validator("social_preview", mode="after")
    @classmethod
    def read_only_previews(cls, value: Mapping[str, SocialPreview]) -> Mapping[str, SocialPreview]:
        return MappingProxyType(dict(value))

    @field_serializer("social_preview")
    def serialize_previews(self, value: Mapping[str, SocialPreview]) -> dict[str, SocialPreview]:
        return dict(value)


class AnalysisHistoryItem(BaseModel):
    """Summary row for the recent analyses list."""

    id: int
    url: str
    overall_score: int
    essential_score: int
    social_score: int
    advanced_score: int
    created_at: str
