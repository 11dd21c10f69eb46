"""
Behaviour configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database holding per-question free-text field settings
    database_url: str = "sqlite:///./qbehaviour.db"

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Response capture
    file_answer_field: str = "answer"
    freetext_filename_template: str = "File{index}.txt"  # index is 1-based


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
