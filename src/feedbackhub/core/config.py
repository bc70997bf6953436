"""Configuration management for FeedbackHub."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field

from .constants import FileConstants, MockDataConstants, OrchestrationConstants, SourceConstants


class Settings(BaseSettings):
    """Application settings."""

    # Bright Data API
    bright_data_api_key: str = Field("", description="Bright Data API key")
    bright_data_customer_id: str = Field("", description="Bright Data customer ID")
    bright_data_base_url: str = Field("https://api.brightdata.com", description="Bright Data API base URL")

    # Reddit API
    reddit_client_id: str = Field("", description="Reddit client ID")
    reddit_client_secret: str = Field("", description="Reddit client secret")
    reddit_user_agent: str = Field("FeedbackHub/1.0", description="Reddit user agent")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Collection settings
    default_limit: int = Field(SourceConstants.DEFAULT_LIMIT, description="Default number of items per source")
    max_retries: int = Field(OrchestrationConstants.MAX_RETRY_ATTEMPTS, description="Maximum real fetch attempts per source")
    retry_delay: float = Field(OrchestrationConstants.RETRY_BASE_DELAY, description="Base retry delay in seconds")
    retry_backoff: float = Field(OrchestrationConstants.RETRY_BACKOFF, description="Retry backoff factor; waits are capped at ten times this value")
    attempt_timeout: float = Field(OrchestrationConstants.ATTEMPT_TIMEOUT, description="Timeout per adapter call in seconds")
    request_timeout: int = Field(OrchestrationConstants.REQUEST_TIMEOUT, description="Timeout per vendor HTTP request in seconds")
    run_deadline: float = Field(OrchestrationConstants.RUN_DEADLINE, description="Deadline for a whole collection run in seconds")
    max_workers: int = Field(OrchestrationConstants.MAX_WORKERS, description="Maximum concurrent source fetches")

    # Fallback settings
    fallback_on_empty: bool = Field(True, description="Substitute synthetic data when a source returns nothing")
    synthetic_seed: Optional[int] = Field(None, description="Seed for reproducible synthetic data")
    synthetic_items_per_source: int = Field(MockDataConstants.MOCK_ITEM_COUNT, description="Synthetic items per failed source")

    # Analysis settings
    rating_rule: str = Field("threshold", description="Rating-to-sentiment rule: 'threshold' or 'banded'")
    dedupe: bool = Field(True, description="Drop duplicate (source, text) items")
    analysis_rules_file: str = Field(FileConstants.ANALYSIS_RULES_FILE, description="YAML overrides for correlation thresholds")

    # Storage
    output_dir: str = Field(FileConstants.OUTPUT_DIR, description="Directory for raw payloads and reports")
    cache_dir: str = Field(FileConstants.CACHE_DIR, description="Directory for the raw payload cache")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
