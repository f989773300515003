"""News Aggregation Pipeline.

Pulls articles from third-party news APIs, normalizes, sanitizes, categorizes
and de-duplicates them, and hands clean records to storage.
"""

__version__ = "1.0.0"
