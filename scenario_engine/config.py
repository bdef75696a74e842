"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_ENV: str = "development"
    API_V1_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Scenario cache
    SCENARIO_CACHE_TTL_SECONDS: float = 60 * 60 * 24
    SCENARIO_CACHE_MAX_SIZE: int = 500
    SCENARIO_CACHE_CLEANUP_SECONDS: float = 60 * 10

    # Related scenarios
    RELATED_MAX_RESULTS: int = 6

    # Rate limiting
    RATE_LIMIT_DEFAULT: str = "120/minute"
    RATE_LIMIT_SCENARIO: str = "30/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )


settings = Settings()
