"""Keyword-frequency categorizer.

The category table is an explicit, ordered, immutable value handed to the
``Categorizer`` at construction. Scoring counts case-insensitive substring
occurrences of every keyword in the lowercased title, content and summary.
The single highest-scoring category wins; a tie for the top score, or a top
score of zero, yields the fallback category.
"""

from dataclasses import dataclass

from newsagg.core.constants import FALLBACK_CATEGORY
from newsagg.models.domain import NormalizedArticle


@dataclass(frozen=True)
class CategoryRule:
    """One category label and the keywords that vote for it."""

    name: str
    keywords: tuple[str, ...]

    def score(self, text: str) -> int:
        """Total non-overlapping occurrences of the keywords in ``text``."""
        return sum(text.count(keyword) for keyword in self.keywords)


CategoryTable = tuple[CategoryRule, ...]


DEFAULT_CATEGORY_TABLE: CategoryTable = (
    CategoryRule(
        "technology",
        ("tech", "technology", "software", "ai", "artificial intelligence",
         "computer", "digital", "internet", "cyber"),
    ),
    CategoryRule(
        "business",
        ("business", "economy", "finance", "market", "stock", "trade",
         "company", "corporate", "investment"),
    ),
    CategoryRule(
        "politics",
        ("politics", "government", "election", "policy", "congress", "senate",
         "president", "political"),
    ),
    CategoryRule(
        "health",
        ("health", "medical", "medicine", "hospital", "doctor", "disease",
         "treatment", "healthcare"),
    ),
    CategoryRule(
        "science",
        ("science", "research", "study", "scientist", "discovery", "experiment",
         "scientific"),
    ),
    CategoryRule(
        "sports",
        ("sports", "football", "basketball", "baseball", "soccer", "tennis",
         "game", "team", "player"),
    ),
    CategoryRule(
        "entertainment",
        ("entertainment", "movie", "film", "music", "celebrity", "actor",
         "actress", "show"),
    ),
    CategoryRule(
        "world",
        ("world", "international", "global", "country", "nation", "foreign",
         "diplomatic"),
    ),
)


class Categorizer:
    """Assigns one category label per article.

    Attributes:
        table: Ordered category rules
        fallback: Label used for ties and texts without any keyword hit
    """

    def __init__(
        self,
        table: CategoryTable = DEFAULT_CATEGORY_TABLE,
        fallback: str = FALLBACK_CATEGORY,
    ) -> None:
        names = [rule.name for rule in table]
        if len(names) != len(set(names)):
            raise ValueError("Category table contains duplicate category names")

        self.table: CategoryTable = tuple(
            CategoryRule(rule.name, tuple(keyword.lower() for keyword in rule.keywords))
            for rule in table
        )
        self.fallback = fallback

    def scores(self, text: str) -> dict[str, int]:
        """Score of every category for ``text``, in table order."""
        lowered = text.lower()
        return {rule.name: rule.score(lowered) for rule in self.table}

    def categorize_text(self, text: str) -> str:
        scores = self.scores(text)
        if not scores:
            return self.fallback

        best = max(scores.values())
        if best == 0:
            return self.fallback

        winners = [name for name, score in scores.items() if score == best]
        if len(winners) > 1:
            return self.fallback
        return winners[0]

    def category_for(self, article: NormalizedArticle) -> str:
        text = " ".join(
            part for part in (article.title, article.content, article.summary) if part
        )
        return self.categorize_text(text)

    def categorize(self, article: NormalizedArticle) -> NormalizedArticle:
        """Return a copy of ``article`` with its category assigned."""
        return article.model_copy(update={"category": self.category_for(article)})
