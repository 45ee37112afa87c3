"""
Service configuration

Typed view of the environment variables the blog service reads, so routers
and the database layer never touch os.environ directly.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_DATABASE_URL = "postgresql+psycopg2://blog_user:changeme@db:5432/blog_db"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for one service process."""

    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    environment: str = "development"
    frontend_url: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT"), 8080),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        environment=(os.getenv("ENVIRONMENT") or "development").lower(),
        frontend_url=os.getenv("FRONTEND_URL") or None,
    )
