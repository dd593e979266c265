"""
Configuration helpers for the Chirpy backend.

Exposes a Settings object read from environment variables (database path,
JWT secret, webhook key, token lifetimes, etc.) so that routers/services do
not fetch os.environ directly. A local .env file is honoured.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_path: str
    jwt_secret: str
    polka_key: str
    access_token_ttl_seconds: int
    refresh_token_ttl_seconds: int
    max_chirp_length: int
    static_dir: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    load_dotenv()

    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_path=os.getenv("DATABASE_PATH", "database.json"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        polka_key=os.getenv("POLKA_KEY", ""),
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"), 3600),
        refresh_token_ttl_seconds=_int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", "86400"), 86400),
        max_chirp_length=_int(os.getenv("MAX_CHIRP_LENGTH", "140"), 140),
        static_dir=os.getenv("STATIC_DIR", "web"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
