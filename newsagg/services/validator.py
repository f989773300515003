"""Drop transformed records that miss a mandatory field."""

from collections.abc import Iterable

from newsagg.models.domain import NormalizedArticle
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)


def is_valid(article: NormalizedArticle) -> bool:
    """A record is valid iff title, url and published_at are all present."""
    if not article.title.strip() or not article.url.strip():
        return False
    if article.published_at is None:
        return False
    if isinstance(article.published_at, str) and not article.published_at.strip():
        return False
    return True


def validate_articles(articles: Iterable[NormalizedArticle]) -> list[NormalizedArticle]:
    """Keep the valid records; invalid ones are logged and dropped."""
    valid = []
    for article in articles:
        if is_valid(article):
            valid.append(article)
        else:
            logger.debug(
                f"Dropping invalid article from {article.source_identifier}: "
                f"title={article.title!r}, url={article.url!r}"
            )
    return valid
