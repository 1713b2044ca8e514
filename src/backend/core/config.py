"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "GranteeTrack"
    APP_ENV: str = "development"
    DEBUG: bool = False
    SECRET_KEY: str = ""  # Required - signs session cookies
    API_PREFIX: str = "/api"

    # Database - PostgreSQL (DATABASE_URL wins when set, e.g. sqlite+aiosqlite for local dev)
    DATABASE_URL: str | None = None
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "granteetrack"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "granteetrack"
    DATABASE_ECHO: bool = False

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_required_secrets(cls, v: str, info: Any) -> str:
        """Validate that required secrets are set."""
        if not v:
            raise ValueError(f"{info.field_name} must be set in environment")
        return v

    @property
    def POSTGRES_URL(self) -> str:
        """Construct PostgreSQL connection URL with SSL required."""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}?ssl=require"
        )

    @property
    def database_url(self) -> str:
        """The URL the engine connects to."""
        return self.DATABASE_URL or self.POSTGRES_URL

    # Session cookie
    SESSION_COOKIE_NAME: str = "auth-session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7  # 1 week
    JWT_ALGORITHM: str = "HS256"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() in ("prod", "production")

    @property
    def SESSION_COOKIE_SECURE(self) -> bool:
        """Only send the session cookie over HTTPS in production."""
        return self.is_production

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Profile defaults
    DEFAULT_AVATAR_URL: str = "/most-logo.png"

    # Polls
    POLL_MAX_OPTIONS: int = 10
    POLL_QUESTION_MAX_LENGTH: int = 500

    # CORS - stored as comma-separated string to avoid pydantic-settings JSON parsing issues
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        import json

        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
