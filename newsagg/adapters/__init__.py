"""Adapters for external systems: HTTP, cache, database and news providers."""
