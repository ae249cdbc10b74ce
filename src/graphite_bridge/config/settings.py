"""
Application settings using Pydantic.

Provides environment-based configuration loading with GRAPHITE_BRIDGE_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Rules file (YAML)
    config_file: str | None = None

    # Used when the rules file does not set them
    default_prefix: str = ""
    default_format: str = "carbon"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "GRAPHITE_BRIDGE_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
