"""Configuration management using Pydantic settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from BYPASS_PERM_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="BYPASS_PERM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Org connection, used when no --target-org is given
    instance_url: Optional[str] = None
    access_token: Optional[str] = None

    api_version: str = "59.0"
    request_timeout_seconds: float = 30.0
    retrieve_timeout_seconds: float = 120.0

    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()
