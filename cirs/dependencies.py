"""FastAPI dependency providers."""

from __future__ import annotations

from functools import lru_cache

from cirs.config import Settings, get_settings
from cirs.db.engine import get_db
from cirs.services.notifier import get_notifier

__all__ = ["get_db", "get_notifier", "get_settings_dep"]


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()
