"""Duplicate detection against already-stored articles.

Checks run in a fixed order and stop at the first hit: exact URL, exact
external id, then a fuzzy title match restricted to articles published on
the same calendar day as the candidate.
"""

from typing import Optional

from rapidfuzz.distance import Levenshtein

from newsagg.core.constants import SUBSTRING_TITLE_SIMILARITY, TITLE_SIMILARITY_THRESHOLD
from newsagg.models.domain import NormalizedArticle, StoredArticle
from newsagg.repositories.base import ArticleStore
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)


def title_similarity(first: str, second: str) -> float:
    """Similarity of two titles in [0, 1].

    Identical titles (after lowercasing and trimming) score 1.0. When one
    non-empty title contains the other the score is 0.9; otherwise it is
    ``1 - levenshtein / max(len)``.
    """
    a = first.strip().lower()
    b = second.strip().lower()

    if a == b:
        return 1.0
    # An empty title is not treated as contained in every other title
    if a and b and (a in b or b in a):
        return SUBSTRING_TITLE_SIMILARITY

    longest = max(len(a), len(b))
    return 1.0 - Levenshtein.distance(a, b) / longest


class DuplicateDetector:
    """Finds a stored article that the candidate duplicates.

    Attributes:
        store: Lookup over already-stored articles
        threshold: Similarity a title pair must exceed to match
    """

    def __init__(self, store: ArticleStore, threshold: float = TITLE_SIMILARITY_THRESHOLD):
        self.store = store
        self.threshold = threshold

    async def find_duplicate(self, candidate: NormalizedArticle) -> Optional[StoredArticle]:
        """First stored article matching ``candidate``, or None.

        Detection stops at the first match; it does not look for the best.
        """
        if candidate.url:
            existing = await self.store.find_article_by_url(candidate.url)
            if existing:
                logger.debug(f"URL duplicate: {candidate.url}")
                return existing

        if candidate.external_id:
            existing = await self.store.find_article_by_external_id(candidate.external_id)
            if existing:
                logger.debug(f"External id duplicate: {candidate.external_id}")
                return existing

        day = candidate.published_date
        if day is None or not candidate.title.strip():
            return None

        for existing in await self.store.find_articles_published_on(day):
            similarity = title_similarity(candidate.title, existing.title)
            if similarity > self.threshold:
                logger.debug(
                    f"Title duplicate ({similarity:.2f}): {candidate.title!r} ~ {existing.title!r}"
                )
                return existing

        return None

    async def is_duplicate(self, candidate: NormalizedArticle) -> bool:
        return await self.find_duplicate(candidate) is not None
