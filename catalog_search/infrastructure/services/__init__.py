"""Infrastructure services: analytics tracking and popularity aggregation."""

from catalog_search.infrastructure.services.analytics_tracker import AnalyticsTracker
from catalog_search.infrastructure.services.popularity_aggregator import PopularityAggregator

__all__ = ["AnalyticsTracker", "PopularityAggregator"]
