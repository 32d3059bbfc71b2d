"""Configuration management for wastewise."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: str = "info"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # OpenAI
    openai_api_key: str | None = None
    ai_model: str = "gpt-4o-mini"
    ai_recipe_model: str = "gpt-4o"
    ai_timeout_seconds: float = 60

    # Cron
    cron_secret: str | None = None

    # Requests carrying "test_mode": true may skip auth on recipe suggestions
    test_mode_enabled: bool = True

    # Expiration
    expiring_soon_days: int = 3
    expiration_jitter: bool = True
    confidence_exact_match: float = 0.95
    confidence_partial_match: float = 0.75
    confidence_default: float = 0.6
    confidence_storage_bonus: float = 0.05
    confidence_cap: float = 0.99

    # Analytics
    analytics_default_period_days: int = 30

    # Background jobs
    scheduler_enabled: bool = True
    status_refresh_hour: int = 3

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def ai_enabled(self) -> bool:
        """Check if the generative AI service is configured."""
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
