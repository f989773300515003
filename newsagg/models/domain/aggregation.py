"""Models describing aggregation requests and their outcomes."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from newsagg.models.domain.article import NormalizedArticle


class AggregationFilters(BaseModel):
    """Generic filters understood by every source adapter.

    ``from``/``to`` are Python keywords, so they are exposed as
    ``from_date``/``to_date`` and accept the short names as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    limit: int | None = Field(default=None, ge=1)
    page: int | None = Field(default=None, ge=0)
    category: str | None = None
    q: str | None = None
    from_date: date | datetime | None = Field(default=None, alias="from")
    to_date: date | datetime | None = Field(default=None, alias="to")
    country: str | None = None

    def cache_payload(self) -> dict[str, Any]:
        """Canonical, JSON-safe view of the filters used for cache keys."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class SourceStats(BaseModel):
    """Per-source counters for one aggregation run."""

    fetched: int = 0
    dropped: int = 0
    accepted: int = 0
    skipped: bool = False
    error: str | None = None


class AggregationOutcome(BaseModel):
    """Surviving articles plus per-source statistics."""

    articles: list[NormalizedArticle] = Field(default_factory=list)
    by_source: dict[str, SourceStats] = Field(default_factory=dict)


class AggregationRunResult(BaseModel):
    """Summary returned to the external trigger.

    ``articles`` holds the accepted records so callers can report on them.
    """

    accepted_count: int
    source_counts: dict[str, int]
    stored_count: int = 0
    duplicates_rejected: int = 0
    errors: dict[str, str] = Field(default_factory=dict)
    duration_seconds: float = 0.0
    started_at: datetime = Field(default_factory=datetime.now)
    articles: list[NormalizedArticle] = Field(default_factory=list)
