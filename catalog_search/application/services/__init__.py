"""Application services: validation, permission filtering, scoring, facets, assembly."""

from catalog_search.application.services.facet_aggregator import FacetAggregator
from catalog_search.application.services.permission_filter import PermissionFilter
from catalog_search.application.services.relevance_scorer import RelevanceScorer, ScoringConfig
from catalog_search.application.services.spelling import SpellingSuggester

__all__ = [
    "FacetAggregator",
    "PermissionFilter",
    "RelevanceScorer",
    "ScoringConfig",
    "SpellingSuggester",
]
