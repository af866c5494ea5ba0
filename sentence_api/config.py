"""
Configuration settings for the Sentences API Service.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Sentences API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./sentences.db"

    # Random selection
    random_max_attempts: int = 5  # ID guesses before falling back to the first sentence

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # CORS
    allowed_origins: str = "http://localhost:8000,http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    log_sql: bool = False  # Log every statement at DEBUG level

    class Config:
        env_file = ".env"
        env_prefix = "SA_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
