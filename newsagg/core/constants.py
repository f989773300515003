"""System constants and enumerations.

This module defines constants used throughout the application for consistency
and maintainability.
"""

from enum import Enum


class NewsSource(str, Enum):
    """Supported news providers."""

    NEWSAPI = "newsapi"
    GUARDIAN = "guardian"
    NYTIMES = "nytimes"


# Display names used when a provider does not name itself
SOURCE_DISPLAY_NAMES: dict[str, str] = {
    NewsSource.NEWSAPI.value: "NewsAPI.org",
    NewsSource.GUARDIAN.value: "The Guardian",
    NewsSource.NYTIMES.value: "The New York Times",
}

# Category assigned when no keyword table entry wins outright
FALLBACK_CATEGORY = "general"

# Duplicate detection
TITLE_SIMILARITY_THRESHOLD = 0.8
SUBSTRING_TITLE_SIMILARITY = 0.9

# HTML tags kept in rich-text fields
ALLOWED_HTML_TAGS = frozenset(
    {
        "p", "br", "strong", "b", "em", "i", "u", "a",
        "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6",
    }
)

# Tags removed together with their content before any other pass
DANGEROUS_HTML_TAGS = ("script", "style")

ALLOWED_URL_SCHEMES = frozenset({"http", "https", "ftp"})

# Default page size when the caller gives no limit
DEFAULT_PAGE_SIZE = 20
