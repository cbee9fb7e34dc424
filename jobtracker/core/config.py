"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.

``STORAGE_PLATFORM`` is the runtime signal the backend selector reads to pick
a storage adapter; every other field only parameterizes the chosen adapter.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Storage selection: native -> SQLite, web -> key-value, cloud -> Supabase
    STORAGE_PLATFORM: Literal["native", "web", "cloud"] = "native"

    # Embedded relational store
    SQLITE_PATH: str = "jobtracker.db"

    # Flat key-value store (one file per collection)
    KV_STORE_DIR: str = ".jobtracker"

    # Supabase (remote document store)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
