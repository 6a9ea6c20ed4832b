"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database (PostgreSQL in production, any SQLAlchemy URL works)
    database_url: Optional[str] = None

    # "memory" or "database"; empty means pick from database_url
    storage_backend: str = ""

    # Sessions
    session_secret: str = "harmony-ai-secret"
    session_max_age_seconds: int = 7 * 24 * 60 * 60

    # OpenAI
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["*"]

    # Uploads
    upload_dir: str = "uploads"
    max_image_size_mb: int = 5
    max_video_size_mb: int = 200

    # App
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def resolved_storage_backend(self) -> str:
        """Storage backend to use, defaulting to the database when one is configured"""
        if self.storage_backend:
            return self.storage_backend.lower()
        return "database" if self.database_url else "memory"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
