"""Application configuration from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./duplex_tracker.db",
        description="Async SQLAlchemy connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Authentication
    auth_secret: str = Field(
        default="change-me", description="Shared secret used to sign bearer tokens"
    )
    auth_token_max_age_seconds: int = Field(
        default=12 * 60 * 60, description="Maximum age of a bearer token auth_date in seconds"
    )

    # Ledger
    duplex_count: int = Field(
        default=20, ge=1, description="Number of duplex units reported by the cost aggregator"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file path")

    # API
    api_title: str = Field(default="Duplex Tracker API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    cors_origin: str = Field(default="http://localhost:5173", description="Allowed CORS origin")


# Global settings instance
settings = Settings()
