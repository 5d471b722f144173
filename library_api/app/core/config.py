"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration; override them via environment
variables in a real deployment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Library API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Host and port used by ``run.py`` when serving with uvicorn.
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Path to the SQLite database.  A relative path is resolved
    # relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "library.db")

    # Seconds a connection waits on a locked database before giving up.
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "30"))

    # Length of a loan; ``due_back`` is ``borrowed_at`` plus this many days.
    loan_period_days: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))

    # Optional in‑memory cache for search results.  Off by default; the
    # service layer is correct with or without it.
    cache_enabled: bool = _env_flag("CACHE_ENABLED")
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "3600"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
