"""Configuration management for Helpful.

Settings are loaded with Pydantic Settings from environment variables
(prefixed with ``HELPFUL_``) and an optional ``.env`` file. They are read
once and cached for the lifetime of the process.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HELPFUL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Helpful"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/helpful.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Incoming Mail
    incoming_email_domain: str = Field(
        default="helpful.io",
        description="Domain part of every account mailbox address",
    )

    # Chargify Billing Settings
    chargify_subdomain: str | None = Field(
        default=None,
        description="Chargify site subdomain (<subdomain>.chargify.com)",
    )
    chargify_api_key: str | None = Field(
        default=None,
        description="Chargify API key used as the basic auth username",
    )
    chargify_timeout_seconds: float = 10.0

    @field_validator("incoming_email_domain")
    @classmethod
    def validate_incoming_email_domain(cls, v: str) -> str:
        """Normalize the incoming mail domain and reject obvious mistakes."""
        v = v.strip().lower().lstrip("@")
        if not v or "@" in v or " " in v:
            raise ValueError("incoming_email_domain must be a bare domain name")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def chargify_enabled(self) -> bool:
        """Whether enough Chargify configuration is present to call the API."""
        return bool(self.chargify_subdomain and self.chargify_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
