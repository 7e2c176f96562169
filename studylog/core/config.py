"""
Configuration helpers for the study tracker backend.

Routers/services never read os.environ directly; they call get_settings().
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    database_url: str
    log_level: str
    public_base_url: str
    feedback_rate_limit: int
    feedback_rate_window_seconds: int

    @property
    def storage_backend(self) -> str:
        return "sql" if self.database_url else "json"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("DATA_DIR") or "data"),
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        feedback_rate_limit=_int(os.getenv("FEEDBACK_RATE_LIMIT", "10"), 10),
        feedback_rate_window_seconds=_int(os.getenv("FEEDBACK_RATE_WINDOW_SECONDS", "60"), 60),
    )
