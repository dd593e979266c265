from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the chirpy package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.core import config as core_config  # noqa: E402
from chirpy.db import session as db_session  # noqa: E402

JWT_SECRET = "test-secret-with-enough-bytes-for-hs256"
POLKA_KEY = "polka-test-key"


@pytest.fixture()
def app_env(tmp_path, monkeypatch):
    """Point settings at a temporary database and reset the settings/repository caches."""
    db_file = tmp_path / "database.json"
    static_dir = tmp_path / "web"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Welcome to Chirpy</h1>", encoding="utf-8")

    monkeypatch.setenv("DATABASE_PATH", str(db_file))
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("POLKA_KEY", POLKA_KEY)
    monkeypatch.setenv("STATIC_DIR", str(static_dir))
    monkeypatch.setenv("MAX_CHIRP_LENGTH", "140")
    core_config.get_settings.cache_clear()
    db_session.get_repository.cache_clear()

    yield db_file

    core_config.get_settings.cache_clear()
    db_session.get_repository.cache_clear()
