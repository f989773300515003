"""Short-lived response cache for provider fetches.

Entries expire after their TTL. Writes always overwrite: two concurrent
fetches for the same key simply race and the last writer wins.
"""

import json
import time
from collections.abc import Callable
from typing import Any, Optional, Protocol

from newsagg.models.domain import AggregationFilters
from newsagg.utils.hashing import md5_hex


class ResponseCache(Protocol):
    """Minimal cache contract consumed by the fetcher."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def put(self, key: str, value: Any, ttl: float) -> None:
        ...


def make_cache_key(source_identifier: str, filters: AggregationFilters) -> str:
    """Build a cache key from the source and its request filters.

    Args:
        source_identifier: Adapter key, e.g. "newsapi"
        filters: Filters the fetch was made with

    Returns:
        Key of the form ``news_<source>_<md5 of canonical filters>``
    """
    canonical = json.dumps(filters.cache_payload(), sort_keys=True, separators=(",", ":"))
    return f"news_{source_identifier}_{md5_hex(canonical)}"


class InMemoryTTLCache:
    """Process-local cache with per-entry expiry.

    Attributes:
        clock: Callable returning the current monotonic time in seconds
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self.clock() >= expires_at:
            # Clean up expired entry
            self._entries.pop(key, None)
            return None
        return value

    def put(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        if ttl <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (self.clock() + ttl, value)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
