"""Multi-factor relevance scoring.

Components are each in [0, 1]:

- textual: field-weighted phrase/term match (title > description > tags)
- recency: exponential decay on age with a configurable half-life, zero past max age
- popularity: trailing-window clicks, min-max normalized over the candidate set
- quality: lookup on entity status

final is the weighted sum of the components; weights come from Settings.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import datetime

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.application.dtos.search import NormalizedQuery, ScoreBreakdown, ScoredResult
from catalog_search.core.config import Settings
from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.enums import SortBy, SortOrder
from catalog_search.shared.utils.datetime import age_in_days

# Share of the textual component contributed by each field.
_FIELD_WEIGHTS = {"title": 0.6, "description": 0.25, "tags": 0.15}
_EXACT_PHRASE = 1.0
_CONTAINS_PHRASE = 0.8
_TERM_OVERLAP = 0.6

QUALITY_BY_STATUS: dict[str, float] = {
    "PUBLISHED": 1.0,
    "APPROVED": 0.9,
    "ACTIVE": 0.9,
    "VERIFIED": 0.9,
    "COMPLETED": 0.8,
    "PENDING": 0.6,
    "IN_PROGRESS": 0.6,
    "DRAFT": 0.4,
    "PROCESSING": 0.4,
    "EXPIRED": 0.3,
    "ARCHIVED": 0.2,
    "REJECTED": 0.1,
}
_DEFAULT_QUALITY = 0.5

_SNIPPET_RADIUS = 60


@dataclass(frozen=True)
class ScoringConfig:
    """Weights and decay constants (validated by Settings)."""

    textual_weight: float = 0.5
    recency_weight: float = 0.2
    popularity_weight: float = 0.15
    quality_weight: float = 0.15
    half_life_days: float = 30.0
    max_age_days: float = 730.0

    @classmethod
    def from_settings(cls, settings: Settings) -> ScoringConfig:
        textual, recency, popularity, quality = settings.score_weights
        return cls(
            textual_weight=textual,
            recency_weight=recency,
            popularity_weight=popularity,
            quality_weight=quality,
            half_life_days=settings.recency_half_life_days,
            max_age_days=settings.recency_max_age_days,
        )


def _field_match(text: str, phrase: str, terms: tuple[str, ...]) -> float:
    if not text or not terms:
        return 0.0
    lowered = text.lower()
    if lowered == phrase:
        return _EXACT_PHRASE
    if phrase in lowered:
        return _CONTAINS_PHRASE
    matched = sum(1 for term in terms if term in lowered)
    return _TERM_OVERLAP * matched / len(terms)


def textual_score(entity: SearchableEntity, query: NormalizedQuery) -> float:
    phrase = query.normalized_text
    terms = query.terms
    title = _field_match(entity.title, phrase, terms)
    description = _field_match(entity.description or "", phrase, terms)
    tags = max((_field_match(tag, phrase, terms) for tag in entity.tags), default=0.0)
    score = (
        _FIELD_WEIGHTS["title"] * title
        + _FIELD_WEIGHTS["description"] * description
        + _FIELD_WEIGHTS["tags"] * tags
    )
    return min(max(score, 0.0), 1.0)


def recency_score(updated_at: datetime, now: datetime, config: ScoringConfig) -> float:
    age = age_in_days(updated_at, now)
    if age > config.max_age_days:
        return 0.0
    return 0.5 ** (age / config.half_life_days)


def quality_score(status: str) -> float:
    return QUALITY_BY_STATUS.get(status.upper(), _DEFAULT_QUALITY)


def normalize_popularity(
    entities: list[SearchableEntity], snapshot: PopularitySnapshot
) -> dict[str, float]:
    """Min-max normalize click counts across entities; all 0 when there is no spread."""
    counts = {e.id: snapshot.count_for(e.id) for e in entities}
    if not counts:
        return {}
    low, high = min(counts.values()), max(counts.values())
    if high == low:
        return dict.fromkeys(counts, 0.0)
    span = high - low
    return {entity_id: (count - low) / span for entity_id, count in counts.items()}


def highlight(text: str | None, terms: tuple[str, ...]) -> str | None:
    """Return an HTML-escaped snippet with matched terms wrapped in <mark>, or None."""
    if not text or not terms:
        return None
    alternatives = "|".join(re.escape(t) for t in sorted(terms, key=len, reverse=True))
    pattern = re.compile(alternatives, re.IGNORECASE)
    first = pattern.search(text)
    if first is None:
        return None
    start = max(first.start() - _SNIPPET_RADIUS, 0)
    end = min(first.end() + _SNIPPET_RADIUS, len(text))
    snippet = text[start:end]
    parts: list[str] = []
    cursor = 0
    for match in pattern.finditer(snippet):
        parts.append(html.escape(snippet[cursor : match.start()]))
        parts.append(f"<mark>{html.escape(match.group(0))}</mark>")
        cursor = match.end()
    parts.append(html.escape(snippet[cursor:]))
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{''.join(parts)}{suffix}"


def build_highlights(entity: SearchableEntity, terms: tuple[str, ...]) -> dict[str, str]:
    highlights: dict[str, str] = {}
    for name, text in (("title", entity.title), ("description", entity.description)):
        snippet = highlight(text, terms)
        if snippet is not None:
            highlights[name] = snippet
    matched_tags = [t for t in entity.tags if any(term in t.lower() for term in terms)]
    if matched_tags:
        highlights["tags"] = ", ".join(html.escape(t) for t in matched_tags)
    return highlights


class RelevanceScorer:
    """Scores and orders a candidate set for one query."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def combine(self, textual: float, recency: float, popularity: float, quality: float) -> float:
        c = self.config
        return (
            c.textual_weight * textual
            + c.recency_weight * recency
            + c.popularity_weight * popularity
            + c.quality_weight * quality
        )

    def score(
        self,
        candidates: list[SearchableEntity],
        query: NormalizedQuery,
        snapshot: PopularitySnapshot,
        now: datetime,
    ) -> list[ScoredResult]:
        """Score every candidate and return them in the requested order."""
        popularity = normalize_popularity(candidates, snapshot)
        scored: list[ScoredResult] = []
        for entity in candidates:
            textual = textual_score(entity, query)
            recency = recency_score(entity.updated_at, now, self.config)
            pop = popularity.get(entity.id, 0.0)
            quality = quality_score(entity.status)
            breakdown = ScoreBreakdown(
                textual=textual,
                recency=recency,
                popularity=pop,
                quality=quality,
                final=self.combine(textual, recency, pop, quality),
            )
            scored.append(
                ScoredResult(
                    entity=entity,
                    breakdown=breakdown,
                    highlights=build_highlights(entity, query.terms),
                )
            )
        return sort_results(scored, query.sort_by, query.sort_order)


def sort_results(
    results: list[ScoredResult], sort_by: SortBy, sort_order: SortOrder
) -> list[ScoredResult]:
    """Order results; ties always fall back to id ascending.

    Relevance: final desc, updated_at desc, id asc (sort_order ignored).
    Other keys: the field in the requested direction, then id asc.
    """
    if sort_by == SortBy.RELEVANCE:
        return sorted(
            results,
            key=lambda r: (-r.breakdown.final, -r.entity.updated_at.timestamp(), r.entity.id),
        )

    # Stable sorts: id asc first, then the primary key in the requested direction.
    ordered = sorted(results, key=lambda r: r.entity.id)
    reverse = sort_order == SortOrder.DESC
    if sort_by == SortBy.TITLE:
        return sorted(ordered, key=lambda r: r.entity.title.lower(), reverse=reverse)
    attr = "created_at" if sort_by == SortBy.CREATED_AT else "updated_at"
    return sorted(ordered, key=lambda r: getattr(r.entity, attr), reverse=reverse)
