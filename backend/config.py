"""
Pagesmith configuration - all environment variables in one place.

Read from environment at runtime.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # Editing sessions
    HISTORY_LIMIT: int = int(os.environ.get("HISTORY_LIMIT", "100"))  # 0 = unbounded
    RECENT_KINDS_LIMIT: int = int(os.environ.get("RECENT_KINDS_LIMIT", "5"))
    MAX_SESSIONS: int = int(os.environ.get("MAX_SESSIONS", "100"))


# Singleton instance
settings = Settings()

if settings.RECENT_KINDS_LIMIT < 1:
    raise RuntimeError("RECENT_KINDS_LIMIT must be at least 1")
if settings.HISTORY_LIMIT < 0:
    raise RuntimeError("HISTORY_LIMIT must not be negative")
