from functools import lru_cache
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # Photo record store (SQLite database owned by the gallery app)
    db_path: str = "data/app.sqlite3"
    photos_table: str = "photos"
    date_column: str = "date_taken"
    size_column: str = "file_size"

    # Bearer token required by GET /api/system/stats (empty string means auth disabled)
    api_token: str = ""

    # Worker pool stats endpoint (optional, empty string means not configured)
    worker_pool_url: str = ""

    # Upper bound for any single host probe
    probe_timeout_seconds: float = 5.0

    # Host introspection paths
    docker_marker_path: str = "/.dockerenv"
    cgroup_path: str = "/proc/1/cgroup"
    meminfo_path: str = "/proc/meminfo"

    log_level: str = "INFO"

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lazily load and cache settings. Fails at first call, not at import time."""
    return Settings()
