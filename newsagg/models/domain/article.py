"""Article domain models.

``NormalizedArticle`` is the common currency of the pipeline. Instances are
frozen; every stage returns a new copy through ``model_copy(update=...)``
instead of mutating the record it received.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class NormalizedArticle(BaseModel):
    """Provider-independent article record.

    Adapters produce these straight from provider payloads, so before the
    normalizer runs ``published_at`` may still be a raw string or missing and
    ``external_id`` may be empty. ``category`` stays unset until the
    categorizer assigns it.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str | None = None
    summary: str | None = None
    url: str = ""
    image_url: str | None = None
    published_at: datetime | str | None = None
    author: str | None = None
    source_identifier: str
    source_display_name: str | None = None
    external_id: str = ""
    category: str | None = None
    provider_category: str | None = None

    @property
    def published_date(self) -> date | None:
        """Calendar day of publication, once the timestamp is parsed."""
        if isinstance(self.published_at, datetime):
            return self.published_at.date()
        return None


class Source(BaseModel):
    """Persisted news source, keyed by its unique ``name``."""

    id: int
    name: str
    display_name: str | None = None
    is_active: bool = True


class Category(BaseModel):
    """Persisted article category, keyed by its unique ``slug``."""

    id: int
    name: str
    slug: str


class StoredArticle(BaseModel):
    """Article as persisted; unique by ``url`` and by ``external_id``."""

    id: int
    title: str
    content: str | None = None
    summary: str | None = None
    url: str
    image_url: str | None = None
    published_at: datetime
    author: str | None = None
    source_id: int
    category_id: int
    external_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
