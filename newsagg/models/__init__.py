"""Data models for the news aggregator."""
