"""Article normalization.

Brings a validated provider record into canonical shape: trimmed text,
a timezone-aware UTC publication time, a stable external id and an author
name without byline noise.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from newsagg.models.domain import NormalizedArticle
from newsagg.utils.hashing import md5_hex
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)

AUTHOR_PREFIX_RE = re.compile(r"^(by\s+|author:\s*)", re.IGNORECASE)


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def clean_author(author: Optional[str]) -> Optional[str]:
    """Trim the author and drop a leading "By " or "Author:" prefix."""
    if not author:
        return None
    cleaned = AUTHOR_PREFIX_RE.sub("", author.strip()).strip()
    return cleaned or None


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_published_at(value: datetime | str | None, now: datetime) -> datetime:
    """Parse the publication time, falling back to ``now``.

    Args:
        value: Provider timestamp as string or datetime, or None
        now: Ingestion time used when the value is absent or unparseable

    Returns:
        Timezone-aware UTC datetime
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if not value or not value.strip():
        return now

    try:
        return to_utc(date_parser.parse(value.strip()))
    except (ValueError, OverflowError) as e:
        logger.warning(f"Unparseable published_at {value!r}, using ingestion time: {e}")
        return now


def normalize_article(
    article: NormalizedArticle,
    source_identifier: Optional[str] = None,
    now: Optional[datetime] = None,
) -> NormalizedArticle:
    """Return a normalized copy of ``article``.

    Args:
        article: Validated record produced by an adapter
        source_identifier: Overrides the record's source key when given
        now: Ingestion time (defaults to the current UTC time)

    Returns:
        New record; the input is left untouched
    """
    now = now or datetime.now(timezone.utc)

    title = article.title.strip()
    url = article.url.strip()
    external_id = article.external_id.strip() or md5_hex(url, title)

    return article.model_copy(
        update={
            "title": title,
            "content": _strip(article.content),
            "summary": _strip(article.summary),
            "url": url,
            "image_url": _strip(article.image_url) or None,
            "published_at": parse_published_at(article.published_at, now),
            "author": clean_author(article.author),
            "external_id": external_id,
            "source_identifier": source_identifier or article.source_identifier,
        }
    )
