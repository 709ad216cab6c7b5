"""Query engine over the converted corpus."""

from unigalaxy.query.engine import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    ListRequest,
    QueryEngine,
    QueryResult,
    SearchRequest,
)
from unigalaxy.query.filters import FilterSet
from unigalaxy.query.projections import ComponentDetail, ComponentSummary
from unigalaxy.query.stats import compute_statistics

__all__ = [
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_SEARCH_LIMIT",
    "ComponentDetail",
    "ComponentSummary",
    "FilterSet",
    "ListRequest",
    "QueryEngine",
    "QueryResult",
    "SearchRequest",
    "compute_statistics",
]
