"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "MarketPulse"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./marketpulse.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # HTTP
    HTTP_TIMEOUT_SEC: float = 30.0

    # Price quotes
    QUOTE_BASE_URL: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    QUOTE_SEARCH_URL: str = "https://query1.finance.yahoo.com/v1/finance/search"
    QUOTE_PROVIDER: str = "yahoo"
    QUOTE_MAX_CONCURRENCY: int = 4
    QUOTE_MAX_RETRIES: int = 1  # 1 = single attempt
    QUOTE_RETRY_BACKOFF_SEC: float = 1.0

    # Local inference
    INFERENCE_PROVIDER: str = "ollama"
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_DEFAULT_MODEL: str = "llama3"

    # Watch-list
    WATCHLIST: list[str] = ["AAPL", "MSFT", "GOOGL", "AMZN", "META"]

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"
    CELERY_TIMEZONE: str = "America/New_York"
    REFRESH_INTERVAL_MINUTES: int = Field(15, ge=1)

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:4200", "http://localhost:8000"]

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite (no connection pool sizing)."""
        return self.DATABASE_URL.startswith("sqlite")


# Global settings instance
settings = Settings()
