"""Domain models."""

from newsagg.models.domain.aggregation import (
    AggregationFilters,
    AggregationOutcome,
    AggregationRunResult,
    SourceStats,
)
from newsagg.models.domain.article import (
    Category,
    NormalizedArticle,
    Source,
    StoredArticle,
)

__all__ = [
    "AggregationFilters",
    "AggregationOutcome",
    "AggregationRunResult",
    "SourceStats",
    "NormalizedArticle",
    "Source",
    "Category",
    "StoredArticle",
]
