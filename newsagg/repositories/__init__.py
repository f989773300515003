"""Repositories package.

This package contains the storage contract and its SQLite implementation.
"""

from newsagg.repositories.article_repository import SQLiteArticleStore
from newsagg.repositories.base import ArticleStore

__all__ = [
    "ArticleStore",
    "SQLiteArticleStore",
]
