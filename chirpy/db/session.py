"""Process-wide repository bound to the configured database path."""
from __future__ import annotations

from functools import lru_cache

from chirpy.core.config import get_settings
from chirpy.repositories.json_storage import Repository


@lru_cache
def get_repository() -> Repository:
    settings = get_settings()
    path = (settings.database_path or "").strip()
    if not path:
        raise RuntimeError("DATABASE_PATH must be configured to use the JSON store.")
    return Repository(path)
