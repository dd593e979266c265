"""
Run the Chirpy API server.

Usage:
  python -m chirpy [--host 127.0.0.1] [--port 8080] [--debug]
"""
from __future__ import annotations

import argparse
import logging
import os

import uvicorn

from chirpy.app import create_app
from chirpy.core.config import get_settings
from chirpy.core.logging_config import setup_logging
from chirpy.db.session import get_repository
from chirpy.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Chirpy API server")
    ap.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    ap.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    ap.add_argument("--debug", action="store_true", help="Start from an empty database and log at DEBUG")
    args = ap.parse_args(argv)

    settings = get_settings()
    setup_logging("DEBUG" if args.debug else settings.log_level)

    if args.debug and os.path.exists(settings.database_path):
        logger.warning("debug mode: removing %s", settings.database_path)
        try:
            os.remove(settings.database_path)
        except OSError as exc:
            logger.critical("cannot remove database %s: %s", settings.database_path, exc)
            raise SystemExit(1) from exc

    try:
        get_repository()
    except RepositoryError as exc:
        logger.critical("cannot open database %s: %s", settings.database_path, exc)
        raise SystemExit(1) from exc

    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
