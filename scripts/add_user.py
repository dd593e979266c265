#!/usr/bin/env python3
"""
Create a user directly in the JSON store.

Usage:
  python scripts/add_user.py --email someone@example.com --password secret [--red]
"""
from __future__ import annotations

import argparse
import sys

from chirpy.core.security import hash_password
from chirpy.db.session import get_repository


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a Chirpy user")
    ap.add_argument("--email", required=True, help="E-mail used to log in")
    ap.add_argument("--password", required=True, help="Cleartext password (hashed before storage)")
    ap.add_argument("--red", action="store_true", help="Grant Chirpy Red right away")
    args = ap.parse_args()

    email = (args.email or "").strip()
    if not email:
        raise SystemExit("Invalid e-mail")
    if not args.password:
        raise SystemExit("Password must not be empty")

    repo = get_repository()
    user = repo.create_user(email, hash_password(args.password))
    if args.red:
        user = repo.set_chirpy_red(user.id, True)
    print("OK: user created")
    print(f"  ID: {user.id}")
    print(f"  E-mail: {user.email}")
    print(f"  Chirpy Red: {'yes' if user.is_chirpy_red else 'no'}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
