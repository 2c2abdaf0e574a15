"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/nepse-portfolio.db"

    # Application
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Upstream live quote feed
    NEPSE_API_URL: str = "https://sharepulse.qzz.io/api/nepse/live-data"
    NEPSE_API_TIMEOUT: float = 15.0

    # In-process read cache (seconds)
    QUOTE_CACHE_TTL_SECONDS: int = 30
    READ_CACHE_TTL_SECONDS: int = 10

    # Business rules
    MAX_PORTFOLIOS_PER_USER: int = 5
    DEMO_STARTING_BALANCE: float = 10_000_000.0

    # Token verification. Tokens are issued by the auth service, not this API.
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
