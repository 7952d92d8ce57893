"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream booking site
    target_base_url: str = "https://center.tennis.org.il"

    # Browser origins allowed to call the gateway. The first entry is the
    # default origin echoed back to non-browser callers.
    allowed_origins: list[str] = ["https://adielbm.github.io"]

    # Redis (optional; caching is disabled when empty)
    redis_url: str = ""
    cache_ttl: int = 600

    # Court search batching
    search_batch_size: int = 2
    search_batch_delay_ms: int = 50
    probe_max_retries: int = 0

    # Scraping settings
    scrape_timeout: int = 30

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000


# Global settings instance
settings = Settings()
