#!/usr/bin/env python3
"""
Reset the JSON store: delete the database file and recreate an empty document.

Usage:
  python scripts/reset_db.py [--yes]
"""
from __future__ import annotations

import argparse
import os
import sys

from chirpy.core.config import get_settings
from chirpy.repositories.json_storage import Repository


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset the Chirpy database")
    ap.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    args = ap.parse_args()

    path = get_settings().database_path
    if not args.yes:
        answer = input(f"Delete every chirp, user and revoked token in {path}? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            raise SystemExit("Aborted")

    if os.path.exists(path):
        os.remove(path)
    repo = Repository(path)
    print("OK: database reset")
    print(f"  Path: {repo.path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
