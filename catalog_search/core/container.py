"""Composition root: builds the long-lived services held on app.state.

Built synchronously inside create_app() so the app is usable without running
its lifespan (ASGI test transports). Background work (tracker worker,
popularity refresh, Redis connection) is started by the lifespan.

With database_backend 'memory' every store lives in-process (optionally
seeded from seed_data_path). With 'postgres' the index, analytics log and
principal directory use session factories; saved searches are bound to the
request session in the API dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalog_search.application.services.permission_filter import PermissionFilter
from catalog_search.application.services.relevance_scorer import RelevanceScorer, ScoringConfig
from catalog_search.application.services.spelling import SpellingSuggester
from catalog_search.application.use_cases.analytics import SearchAnalyticsService
from catalog_search.application.use_cases.autocomplete import AutocompleteService
from catalog_search.application.use_cases.related import RelatedContentService
from catalog_search.application.use_cases.search import SearchService
from catalog_search.core.config import Settings
from catalog_search.core.limiter import IdentityRateLimiter
from catalog_search.infrastructure.security.identity import IdentityResolver
from catalog_search.infrastructure.services.analytics_tracker import AnalyticsTracker
from catalog_search.infrastructure.services.popularity_aggregator import PopularityAggregator

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import (
        IAnalyticsEventLog,
        IEntityIndex,
        IPrincipalDirectory,
        ISavedSearchRepository,
    )

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    index: IEntityIndex
    event_log: IAnalyticsEventLog
    directory: IPrincipalDirectory
    # None for postgres: the repository is bound to the request session.
    saved_searches: ISavedSearchRepository | None
    tracker: AnalyticsTracker
    popularity: PopularityAggregator
    rate_limiter: IdentityRateLimiter
    identity: IdentityResolver
    search: SearchService
    autocomplete: AutocompleteService
    related: RelatedContentService
    analytics: SearchAnalyticsService


def _memory_stores(settings: Settings):
    from catalog_search.infrastructure.memory import (
        InMemoryAnalyticsEventLog,
        InMemoryEntityIndex,
        InMemoryPrincipalDirectory,
        InMemorySavedSearchRepository,
        load_seed,
    )

    index = InMemoryEntityIndex()
    directory = InMemoryPrincipalDirectory()
    if settings.seed_data_path:
        load_seed(settings.seed_data_path, index, directory)
    return index, InMemoryAnalyticsEventLog(), directory, InMemorySavedSearchRepository()


def _postgres_stores():
    from catalog_search.infrastructure.persistence.database import get_session_factory
    from catalog_search.infrastructure.persistence.repositories import (
        AnalyticsEventRepository,
        PrincipalRepository,
        SqlEntityIndex,
    )

    factory = get_session_factory()
    return (
        SqlEntityIndex(factory),
        AnalyticsEventRepository(factory),
        PrincipalRepository(factory),
        None,
    )


def build_container(settings: Settings) -> ServiceContainer:
    """Wire stores and use cases for the configured backend."""
    if settings.database_backend == "postgres":
        index, event_log, directory, saved_searches = _postgres_stores()
    else:
        index, event_log, directory, saved_searches = _memory_stores(settings)

    tracker = AnalyticsTracker(event_log, maxsize=settings.analytics_queue_size)
    popularity = PopularityAggregator(
        event_log,
        window_days=settings.popularity_window_days,
        cache_ttl=settings.cache_ttl_popularity,
    )
    scoring = ScoringConfig.from_settings(settings)
    permission_filter = PermissionFilter()
    search = SearchService(
        index,
        popularity,
        scorer=RelevanceScorer(scoring),
        tracker=tracker,
        permission_filter=permission_filter,
        max_candidates=settings.max_candidates,
        spelling=SpellingSuggester(index),
    )
    logger.info("Services wired for %s backend", settings.database_backend)
    return ServiceContainer(
        settings=settings,
        index=index,
        event_log=event_log,
        directory=directory,
        saved_searches=saved_searches,
        tracker=tracker,
        popularity=popularity,
        rate_limiter=IdentityRateLimiter.from_settings(settings),
        identity=IdentityResolver(directory, settings),
        search=search,
        autocomplete=AutocompleteService(
            index, popularity, permission_filter=permission_filter, scoring=scoring
        ),
        related=RelatedContentService(
            index, permission_filter=permission_filter, max_candidates=settings.max_candidates
        ),
        analytics=SearchAnalyticsService(event_log, tracker=tracker),
    )
