"""Core functionality for the news aggregator."""

from newsagg.core.config import settings
from newsagg.core.exceptions import (
    AggregationTimeoutError,
    ArticleRepositoryError,
    DatabaseError,
    DuplicateArticleError,
    ExternalApiError,
    NewsAggregatorError,
    UnknownSourceError,
)

__all__ = [
    "settings",
    "NewsAggregatorError",
    "ExternalApiError",
    "UnknownSourceError",
    "AggregationTimeoutError",
    "DatabaseError",
    "ArticleRepositoryError",
    "DuplicateArticleError",
]
