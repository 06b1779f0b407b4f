"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_name: str = "CyberPulse"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    # Local record store
    database_url: str = "sqlite+aiosqlite:///./cyberpulse.db"

    # Remote sources
    news_api_base_url: str = "https://api.newsapi.org/v2/"
    news_api_key: str = ""
    hibp_base_url: str = "https://haveibeenpwned.com/api/v3/"
    hibp_api_key: str = ""
    nvd_base_url: str = "https://services.nvd.nist.gov/rest/json/"
    nvd_api_key: str = ""
    ctftime_base_url: str = "https://ctftime.org/api/v1/"
    github_api_base_url: str = "https://api.github.com/"
    reddit_base_url: str = "https://www.reddit.com/"

    # HTTP transport
    user_agent: str = "CyberPulse/0.1"
    http_timeout_seconds: float = 30.0
    http_max_connections: int = 10
    http_retry_attempts: int = 3

    # Cache policy
    cache_retention_size: int = 50
    cve_retention_size: int = 500
    recent_breach_days: int = 30
    omni_search_branch_limit: int = 3

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
