"""Configuration management using Pydantic Settings.

This module provides centralized configuration management for the entire application,
loading settings from environment variables with validation and type safety.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All configuration parameters are defined here with type hints, default values,
    and validation. Settings are loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///data/news_aggregator.db",
        description="SQLite database URL",
    )

    # Provider Configuration
    newsapi_base_url: str = Field(
        default="https://newsapi.org/v2/",
        description="NewsAPI.org base URL",
    )
    newsapi_api_key: str | None = Field(default=None, description="NewsAPI.org API key")
    newsapi_rate_limit_per_hour: int = Field(default=1000, description="NewsAPI hourly quota")

    guardian_base_url: str = Field(
        default="https://content.guardianapis.com/",
        description="Guardian Open Platform base URL",
    )
    guardian_api_key: str | None = Field(default=None, description="Guardian API key")
    guardian_rate_limit_per_hour: int = Field(default=5000, description="Guardian hourly quota")

    nytimes_base_url: str = Field(
        default="https://api.nytimes.com/svc/",
        description="New York Times API base URL",
    )
    nytimes_api_key: str | None = Field(default=None, description="New York Times API key")
    nytimes_rate_limit_per_hour: int = Field(default=4000, description="NYT hourly quota")

    # Fetch Configuration
    news_fetch_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request HTTP timeout in seconds",
    )
    news_cache_ttl: int = Field(
        default=300,
        ge=0,
        description="Seconds a provider response stays in the cache",
    )

    # Retry Configuration
    retry_max_attempts: int = Field(default=3, ge=1, description="Maximum attempts per provider call")
    retry_base_delay: float = Field(
        default=60.0,
        ge=0,
        description=(
            "Backoff unit in seconds; attempt n waits base * n. "
            "With 3 attempts a failing source spends 3 * base seconds of the run timeout"
        ),
    )

    # Aggregation Run Configuration
    aggregation_default_limit: int = Field(
        default=50,
        ge=1,
        description="Articles requested per source when no limit is given",
    )
    aggregation_run_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Wall-clock budget for a whole aggregation run in seconds",
    )
    aggregation_run_tries: int = Field(default=3, ge=1, description="Attempts per aggregation run")
    aggregation_run_backoff: float = Field(
        default=60.0,
        ge=0,
        description="Fixed delay in seconds between aggregation run attempts",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: str = Field(default="logs/news_aggregator.log", description="Log file path")
    log_max_bytes: int = Field(default=10485760, description="Max log file size in bytes")
    log_backup_count: int = Field(default=5, description="Number of backup log files")

    # Environment
    environment: str = Field(default="development", description="Environment name")


# Global settings instance
settings = Settings()
