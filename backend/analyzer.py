"""Meta tag analysis: previews, tag inventory, scores, recommendations.

Pure functions only. Everything is computed from the url and TagRecord
passed in; nothing here touches the network, the database or the clock,
so analyze_tags() returns identical output for identical input.
"""

import math
from collections.abc import Mapping

from models import RecommendationCategory, TagFamily, TagRecord, TagStatus
from schemas import (
    AnalysisResult,
    CategoryScore,
    Finding,
    InventoryEntry,
    Recommendation,
    RecommendationLink,
    ScoreData,
    SearchPreview,
    SocialPreview,
)
from seo_rules import (
    ADVANCED_WEIGHTS,
    CATEGORY_WEIGHTS,
    ESSENTIAL_WEIGHTS,
    META_DESCRIPTION_LENGTH,
    NO_DESCRIPTION,
    NO_TITLE,
    OG_DESCRIPTION_LENGTH,
    OPEN_GRAPH_REQUIRED,
    OPEN_GRAPH_WEIGHTS,
    RECOMMENDATION_ICONS,
    SCHEMA_DOCS_URL,
    TAG_ICONS,
    TITLE_LENGTH,
    TWITTER_REQUIRED,
    TWITTER_WEIGHTS,
    LengthRange,
)

_CATEGORY_ORDER = {category: index for index, category in enumerate(RecommendationCategory)}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _length_status(text: str, limits: LengthRange) -> TagStatus:
    return TagStatus.GOOD if limits.contains(len(text)) else TagStatus.NEEDS_IMPROVEMENT


# ---------------------------------------------------------------------------
# Previews
# ---------------------------------------------------------------------------


def build_search_preview(url: str, record: TagRecord) -> SearchPreview:
    """Search engine result preview.

    Title and description findings are only emitted when the tag exists;
    the URL structure finding is always emitted.
    """
    findings: list[Finding] = []

    if record.title:
        length = len(record.title)
        if TITLE_LENGTH.contains(length):
            content = (
                f"Good length ({length} characters). "
                f"Google displays up to {TITLE_LENGTH.max} characters."
            )
        elif length < TITLE_LENGTH.min:
            content = (
                f"Too short ({length} characters). "
                f"Aim for {TITLE_LENGTH.min}-{TITLE_LENGTH.max} characters."
            )
        else:
            content = (
                f"Too long ({length} characters). "
                f"Google may truncate to {TITLE_LENGTH.max} characters."
            )
        findings.append(Finding(name="Title Tag", content=content, status=_length_status(record.title, TITLE_LENGTH)))

    if record.meta_description:
        length = len(record.meta_description)
        if META_DESCRIPTION_LENGTH.contains(length):
            content = f"Good length ({length} characters). Optimal for search results."
        elif length < META_DESCRIPTION_LENGTH.min:
            content = (
                f"A bit short ({length} characters). "
                f"Aim for {META_DESCRIPTION_LENGTH.min}-{META_DESCRIPTION_LENGTH.max} characters."
            )
        else:
            content = (
                f"Too long ({length} characters). "
                f"Google may truncate after {META_DESCRIPTION_LENGTH.max} characters."
            )
        findings.append(
            Finding(
                name="Meta Description",
                content=content,
                status=_length_status(record.meta_description, META_DESCRIPTION_LENGTH),
            )
        )

    # Placeholder: the URL itself is not evaluated.
    findings.append(
        Finding(
            name="URL Structure",
            content="Clean and readable. Contains relevant keywords.",
            status=TagStatus.GOOD,
        )
    )

    return SearchPreview(
        title=record.title or NO_TITLE,
        url=url,
        description=record.meta_description or NO_DESCRIPTION,
        findings=tuple(findings),
    )


def build_facebook_preview(url: str, record: TagRecord) -> SocialPreview:
    """Open Graph link card preview with exactly four findings."""
    og = record.og_tags
    findings: list[Finding] = []

    if og.get("og:title"):
        findings.append(Finding(name="og:title", content="Present and matches page title.", status=TagStatus.GOOD))
    else:
        findings.append(
            Finding(
                name="og:title",
                content="Missing. Facebook will use page title as fallback.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )

    if og.get("og:image"):
        findings.append(
            Finding(
                name="og:image",
                content="Present with good dimensions (1200x630px recommended).",
                status=TagStatus.GOOD,
            )
        )
    else:
        findings.append(
            Finding(
                name="og:image",
                content="Missing. Facebook shares will have no image preview.",
                status=TagStatus.MISSING,
            )
        )

    og_description = og.get("og:description")
    if og_description and len(og_description) < OG_DESCRIPTION_LENGTH.min:
        findings.append(
            Finding(
                name="og:description",
                content="Present but shorter than recommended (minimum 2 sentences).",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )
    elif og_description:
        findings.append(Finding(name="og:description", content="Present with good length.", status=TagStatus.GOOD))
    else:
        findings.append(
            Finding(
                name="og:description",
                content="Missing. Facebook will use meta description as fallback.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )

    og_type = og.get("og:type")
    if og_type:
        findings.append(Finding(name="og:type", content=f'Present and set to "{og_type}"', status=TagStatus.GOOD))
    else:
        findings.append(
            Finding(
                name="og:type",
                content='Missing. Should specify content type (e.g., "website").',
                status=TagStatus.MISSING,
            )
        )

    return SocialPreview(
        title=og.get("og:title") or record.title or NO_TITLE,
        description=og_description or record.meta_description or NO_DESCRIPTION,
        image=og.get("og:image") or "",
        url=og.get("og:url") or url,
        type=og_type or None,
        findings=tuple(findings),
    )


def build_twitter_preview(url: str, record: TagRecord) -> SocialPreview:
    """Twitter Card preview with exactly four findings.

    Missing twitter:* values fall back to og:* and then to the page tags.
    """
    og = record.og_tags
    tw = record.twitter_tags
    findings: list[Finding] = []

    card = tw.get("twitter:card")
    if card:
        findings.append(Finding(name="twitter:card", content=f'Present and set to "{card}"', status=TagStatus.GOOD))
    else:
        findings.append(
            Finding(
                name="twitter:card",
                content="Missing. Twitter will not display a card preview.",
                status=TagStatus.MISSING,
            )
        )

    if tw.get("twitter:title"):
        findings.append(
            Finding(name="twitter:title", content="Present and matches page title.", status=TagStatus.GOOD)
        )
    elif og.get("og:title"):
        findings.append(
            Finding(
                name="twitter:title",
                content="Missing but will use og:title as fallback.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )
    else:
        findings.append(
            Finding(
                name="twitter:title",
                content="Missing. Twitter will use page title as fallback.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )

    if tw.get("twitter:site"):
        findings.append(Finding(name="twitter:site", content="Present with Twitter handle.", status=TagStatus.GOOD))
    else:
        findings.append(
            Finding(
                name="twitter:site",
                content="Missing. Should include your Twitter handle.",
                status=TagStatus.MISSING,
            )
        )

    if tw.get("twitter:image") and tw.get("twitter:image:alt"):
        findings.append(
            Finding(
                name="twitter:image",
                content="Present with alt text for accessibility.",
                status=TagStatus.GOOD,
            )
        )
    elif tw.get("twitter:image"):
        findings.append(
            Finding(
                name="twitter:image",
                content="Present but missing alt text for accessibility.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )
    elif og.get("og:image"):
        findings.append(
            Finding(
                name="twitter:image",
                content="Missing but will use og:image as fallback.",
                status=TagStatus.NEEDS_IMPROVEMENT,
            )
        )
    else:
        findings.append(
            Finding(
                name="twitter:image",
                content="Missing. Twitter cards will have no image.",
                status=TagStatus.MISSING,
            )
        )

    return SocialPreview(
        title=tw.get("twitter:title") or og.get("og:title") or record.title or NO_TITLE,
        description=(
            tw.get("twitter:description")
            or og.get("og:description")
            or record.meta_description
            or NO_DESCRIPTION
        ),
        image=tw.get("twitter:image") or og.get("og:image") or "",
        url=url,
        findings=tuple(findings),
    )


# ---------------------------------------------------------------------------
# Tag inventory
# ---------------------------------------------------------------------------


def _title_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    if not record.title:
        return TagStatus.MISSING, []
    return _length_status(record.title, TITLE_LENGTH), [f"<title>{record.title}</title>"]


def _meta_description_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    if not record.meta_description:
        return TagStatus.MISSING, []
    return (
        _length_status(record.meta_description, META_DESCRIPTION_LENGTH),
        [f'<meta name="description" content="{record.meta_description}">'],
    )


def _tag_group_status(tags: Mapping[str, str], required: tuple[str, ...]) -> TagStatus:
    if all(tags.get(name) for name in required):
        return TagStatus.GOOD
    if tags:
        return TagStatus.NEEDS_IMPROVEMENT
    return TagStatus.MISSING


def _open_graph_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    markup = [f'<meta property="{key}" content="{value}">' for key, value in record.og_tags.items()]
    return _tag_group_status(record.og_tags, OPEN_GRAPH_REQUIRED), markup


def _twitter_card_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    markup = [f'<meta name="{key}" content="{value}">' for key, value in record.twitter_tags.items()]
    return _tag_group_status(record.twitter_tags, TWITTER_REQUIRED), markup


def _canonical_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    if not record.canonical_url:
        return TagStatus.MISSING, []
    return TagStatus.GOOD, [f'<link rel="canonical" href="{record.canonical_url}">']


def _robots_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    if not record.robots_directive:
        return TagStatus.MISSING, []
    return TagStatus.GOOD, [f'<meta name="robots" content="{record.robots_directive}">']


def _structured_data_entry(record: TagRecord) -> tuple[TagStatus, list[str]]:
    if not record.structured_data_blocks:
        return TagStatus.MISSING, []
    return TagStatus.GOOD, list(record.structured_data_blocks)


_INVENTORY_BUILDERS = {
    TagFamily.TITLE: _title_entry,
    TagFamily.META_DESCRIPTION: _meta_description_entry,
    TagFamily.OPEN_GRAPH: _open_graph_entry,
    TagFamily.TWITTER_CARD: _twitter_card_entry,
    TagFamily.CANONICAL: _canonical_entry,
    TagFamily.ROBOTS: _robots_entry,
    TagFamily.STRUCTURED_DATA: _structured_data_entry,
}


def build_tag_inventory(record: TagRecord) -> tuple[InventoryEntry, ...]:
    """One entry per TagFamily, in TagFamily declaration order."""
    entries: list[InventoryEntry] = []
    for family in TagFamily:
        status, raw_values = _INVENTORY_BUILDERS[family](record)
        entries.append(
            InventoryEntry(
                tag_family=family,
                icon_hint=TAG_ICONS[family],
                status=status,
                raw_values=tuple(raw_values),
            )
        )
    return tuple(entries)


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------


def _length_credit(text: str, limits: LengthRange, weight: float) -> float:
    """Full weight inside the range, half outside it, nothing when empty."""
    if limits.contains(len(text)):
        return weight
    if len(text) > 0:
        return weight * 0.5
    return 0


def _percentage(score: float, total: float) -> int:
    if not total:
        return 0
    return _round_half_up(score / total * 100)


def calculate_scores(record: TagRecord) -> ScoreData:
    """Weighted category scores and the overall 0-100 score.

    Essential totals only include tags that exist on the page; social and
    advanced totals always include every weighted tag.
    """
    essential_score = essential_total = 0.0
    social_score = social_total = 0.0
    advanced_score = advanced_total = 0.0

    if record.title is not None:
        weight = ESSENTIAL_WEIGHTS["title"]
        essential_total += weight
        essential_score += _length_credit(record.title, TITLE_LENGTH, weight)

    if record.meta_description is not None:
        weight = ESSENTIAL_WEIGHTS["meta-description"]
        essential_total += weight
        essential_score += _length_credit(record.meta_description, META_DESCRIPTION_LENGTH, weight)

    if record.canonical_url:
        essential_total += ESSENTIAL_WEIGHTS["canonical"]
        essential_score += ESSENTIAL_WEIGHTS["canonical"]

    if record.robots_directive:
        essential_total += ESSENTIAL_WEIGHTS["robots"]
        essential_score += ESSENTIAL_WEIGHTS["robots"]

    for tags, weights in ((record.og_tags, OPEN_GRAPH_WEIGHTS), (record.twitter_tags, TWITTER_WEIGHTS)):
        for name, weight in weights.items():
            social_total += weight
            if tags.get(name):
                social_score += weight

    advanced_total += ADVANCED_WEIGHTS["schema"]
    if record.structured_data_blocks:
        advanced_score += ADVANCED_WEIGHTS["schema"]

    overall = _round_half_up(
        _percentage(essential_score, essential_total) * CATEGORY_WEIGHTS["essential"]
        + _percentage(social_score, social_total) * CATEGORY_WEIGHTS["social"]
        + _percentage(advanced_score, advanced_total) * CATEGORY_WEIGHTS["advanced"]
    )

    return ScoreData(
        overall=max(0, min(100, overall)),
        essential=CategoryScore(score=_round_half_up(essential_score), total=_round_half_up(essential_total)),
        social=CategoryScore(score=_round_half_up(social_score), total=_round_half_up(social_total)),
        advanced=CategoryScore(score=_round_half_up(advanced_score), total=_round_half_up(advanced_total)),
    )


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def _recommendation(
    category: RecommendationCategory,
    title: str,
    description: str,
    link: RecommendationLink | None = None,
) -> Recommendation:
    return Recommendation(
        category=category,
        icon_hint=RECOMMENDATION_ICONS[category],
        title=title,
        description=description,
        link=link,
    )


def generate_recommendations(record: TagRecord) -> tuple[Recommendation, ...]:
    """Independent checks grouped as critical, improvement, good."""
    recommendations: list[Recommendation] = []

    if not record.structured_data_blocks:
        recommendations.append(
            _recommendation(
                RecommendationCategory.CRITICAL,
                "Add Schema.org Structured Data:",
                "Implementing structured data can enhance your search results with rich snippets. "
                "Consider adding Organization, WebSite, or other relevant schemas.",
                RecommendationLink(text="Learn more about Schema.org", url=SCHEMA_DOCS_URL),
            )
        )

    if not record.og_tags.get("og:type"):
        recommendations.append(
            _recommendation(
                RecommendationCategory.CRITICAL,
                "Add Missing og:type Tag:",
                "Facebook Open Graph requires a type property. "
                'Add <meta property="og:type" content="website"> to your head section.',
            )
        )

    if record.meta_description and len(record.meta_description) < META_DESCRIPTION_LENGTH.min:
        recommendations.append(
            _recommendation(
                RecommendationCategory.IMPROVEMENT,
                "Expand Meta Description:",
                f"Your description is {len(record.meta_description)} characters. "
                f"Aim for {META_DESCRIPTION_LENGTH.min}-{META_DESCRIPTION_LENGTH.max} characters "
                "to maximize visibility in search results.",
            )
        )

    if not record.twitter_tags.get("twitter:site"):
        recommendations.append(
            _recommendation(
                RecommendationCategory.IMPROVEMENT,
                "Add Twitter Account Info:",
                'Add <meta name="twitter:site" content="@yourusername"> to improve Twitter Card integration.',
            )
        )

    if record.twitter_tags.get("twitter:image") and not record.twitter_tags.get("twitter:image:alt"):
        recommendations.append(
            _recommendation(
                RecommendationCategory.IMPROVEMENT,
                "Add Alt Text to Twitter Image:",
                'Include <meta name="twitter:image:alt" content="Description of image"> '
                "for improved accessibility.",
            )
        )

    if record.title and TITLE_LENGTH.contains(len(record.title)):
        recommendations.append(
            _recommendation(
                RecommendationCategory.GOOD,
                "Title Tag Length:",
                f"Your title is {len(record.title)} characters, "
                "which is an ideal length for search engine display.",
            )
        )

    if record.canonical_url:
        recommendations.append(
            _recommendation(
                RecommendationCategory.GOOD,
                "Canonical URL:",
                "Properly implemented canonical URL helps prevent duplicate content issues.",
            )
        )

    if record.robots_directive:
        recommendations.append(
            _recommendation(
                RecommendationCategory.GOOD,
                "Robots Meta:",
                "Correctly configured to allow search engines to index and follow links on the page.",
            )
        )

    recommendations.sort(key=lambda item: _CATEGORY_ORDER[item.category])
    return tuple(recommendations)


def analyze_tags(url: str, record: TagRecord) -> AnalysisResult:
    """Build the full report for `url` from its extracted tags."""
    return AnalysisResult(
        url=url,
        search_preview=build_search_preview(url, record),
        social_preview={
            "facebook": build_facebook_preview(url, record),
            "twitter": build_twitter_preview(url, record),
        },
        tag_inventory=build_tag_inventory(record),
        score_data=calculate_scores(record),
        recommendations=generate_recommendations(record),
    )
