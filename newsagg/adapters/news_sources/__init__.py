"""News source adapters."""

from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.adapters.news_sources.guardian import GuardianAdapter
from newsagg.adapters.news_sources.newsapi import NewsApiAdapter
from newsagg.adapters.news_sources.nytimes import NYTimesAdapter

__all__ = [
    "NewsSourceAdapter",
    "NewsApiAdapter",
    "GuardianAdapter",
    "NYTimesAdapter",
]
