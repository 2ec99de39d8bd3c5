"""Environment-driven settings and logging setup."""

import logging
import os

from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


class Settings(BaseModel):
    """Runtime settings for the listing layer."""
    dsn: str | None = None
    log_level: str = "INFO"
    slow_query_threshold_ms: int = Field(default=1000, ge=0)
    default_page_limit: int = Field(default=20, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Read settings from the process environment."""
        return cls(
            dsn=os.getenv("DSN") or None,
            log_level=os.getenv("LOGLEVEL", "INFO").upper(),
            slow_query_threshold_ms=_env_int("SLOW_QUERY_THRESHOLD_MS", 1000),
            default_page_limit=_env_int("DEFAULT_PAGE_LIMIT", 20),
            max_page_limit=_env_int("MAX_PAGE_LIMIT", 100),
        )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging; unknown level names fall back to INFO."""
    level = (level or os.getenv("LOGLEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT
    )
