"""Stable hashing helpers for identifiers and cache keys."""

import hashlib


def md5_hex(*parts: str) -> str:
    """Hex MD5 digest of the concatenated parts."""
    return hashlib.md5("".join(parts).encode("utf-8")).hexdigest()
