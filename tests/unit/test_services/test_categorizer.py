"""Unit tests for the keyword categorizer."""

import pytest

from newsagg.models.domain import NormalizedArticle
from newsagg.services.categorizer import DEFAULT_CATEGORY_TABLE, Categorizer, CategoryRule


@pytest.fixture
def categorizer() -> Categorizer:
    return Categorizer()


def test_highest_score_wins(categorizer):
    assert categorizer.categorize_text("Senate passes election bill") == "politics"


def test_scoring_is_case_insensitive_substring_count(categorizer):
    scores = categorizer.scores("FOOTBALL team beats rival team")

    assert scores["sports"] == 3


def test_zero_hits_fall_back_to_general(categorizer):
    assert categorizer.categorize_text("Quiet weekend") == "general"
    assert categorizer.categorize_text("") == "general"


def test_tie_falls_back_to_general(categorizer):
    # health: doctor, entertainment: movie
    assert categorizer.categorize_text("doctor movie") == "general"


def test_categorizer_is_pure(categorizer):
    text = "Stock market rally lifts investment firms"

    assert categorizer.categorize_text(text) == categorizer.categorize_text(text) == "business"


def test_uses_title_content_and_summary(categorizer):
    article = NormalizedArticle(
        title="Weekly roundup",
        content="The hospital opened a new wing.",
        summary="Doctors welcomed the treatment center.",
        source_identifier="guardian",
    )

    categorized = categorizer.categorize(article)

    assert categorized.category == "health"
    assert article.category is None


def test_custom_table_is_used():
    categorizer = Categorizer(
        table=(CategoryRule("weather", ("Storm", "rain")), CategoryRule("traffic", ("jam",))),
        fallback="misc",
    )

    assert categorizer.categorize_text("storm and rain") == "weather"
    assert categorizer.categorize_text("nothing here") == "misc"


def test_duplicate_category_names_are_rejected():
    with pytest.raises(ValueError):
        Categorizer(table=(CategoryRule("a", ("x",)), CategoryRule("a", ("y",))))


def test_default_table_is_immutable():
    assert isinstance(DEFAULT_CATEGORY_TABLE, tuple)
    assert [rule.name for rule in DEFAULT_CATEGORY_TABLE] == [
        "technology", "business", "politics", "health",
        "science", "sports", "entertainment", "world",
    ]
