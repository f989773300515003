"""Custom exception hierarchy for the news aggregation pipeline.

This module defines all custom exceptions used throughout the application,
organized in a clear hierarchy for better error handling and reporting.

Per-record exclusions (validation drops, duplicate drops) are deliberately not
exceptions: they are counted and logged by the pipeline stages instead.
"""


class NewsAggregatorError(Exception):
    """Base exception for all news aggregator errors.

    All custom exceptions in the system should inherit from this base class
    to allow for consistent error handling at the trigger boundary.
    """

    pass


class ExternalApiError(NewsAggregatorError):
    """Upstream HTTP or transport failure.

    Raised by the fetcher once the retry budget for a provider call is spent,
    or immediately when the provider is not configured.

    Attributes:
        source: Identifier of the provider that failed
        status_code: HTTP status code (0 for transport errors)
        body: Response body returned by the provider, if any
    """

    def __init__(
        self,
        message: str = "",
        source: str = "",
        status_code: int = 0,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.status_code = status_code
        self.body = body

    def context(self) -> dict[str, str | int]:
        """Return structured error details for logging."""
        return {
            "source": self.source,
            "status_code": self.status_code,
            "response_body": self.body,
            "message": self.message,
        }


class UnknownSourceError(NewsAggregatorError):
    """Caller requested a source identifier that is not registered."""

    def __init__(self, source: str) -> None:
        super().__init__(f"Unknown news source: {source}")
        self.source = source


class AggregationTimeoutError(NewsAggregatorError):
    """An aggregation run exceeded its wall-clock budget."""

    pass


class DatabaseError(NewsAggregatorError):
    """Database operation errors.

    Raised when there are issues with database connections, queries,
    or transactions.
    """

    pass


class ArticleRepositoryError(DatabaseError):
    """Errors specific to article store operations.

    Raised when there are issues creating or retrieving articles, sources
    or categories in the database.
    """

    pass


class DuplicateArticleError(ArticleRepositoryError):
    """The store rejected an article because its URL or external id exists."""

    pass
