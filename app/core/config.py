# app/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - DB connection
    - Logging verbosity
    - Upload limits for a single batch
    - Content classifier probe sizes
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    APP_NAME: str = "Attendance Upload Service"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./attendance.db",
        description="SQLAlchemy-compatible database URL",
    )

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

    # --- Upload limits ---
    MAX_UPLOAD_FILES: int = Field(
        default=20,
        description="Maximum number of files accepted in one upload batch.",
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum size of a single uploaded file, in bytes.",
    )

    # --- Content classifier ---
    CLASSIFIER_PREFIX_BYTES: int = Field(
        default=8192,
        description="Number of leading bytes decoded and inspected by the content classifier.",
    )
    JSON_PROBE_CHARS: int = Field(
        default=4096,
        description="Number of decoded characters handed to the JSON parser when sniffing JSON.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
