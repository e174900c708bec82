"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "Sovereign Shield Reconciliation Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Remote compliance API (in-memory sources when unset)
    api_base_url: str | None = None
    api_token: str | None = None
    request_timeout_seconds: float = 10.0

    # Evaluation cycle
    enable_poller: bool = False
    poll_interval_seconds: float = 5.0
    staleness_days: int = 7
    metrics_window_hours: int = 24
    expiry_warning_days: int = 30

    # Paths
    countries_file: str | None = None

    model_config = {"env_prefix": "SHIELD_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
