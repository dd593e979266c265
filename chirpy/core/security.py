"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()


def hash_password(password: str) -> bytes:
    """Create an Argon2 hash, encoded as bytes for storage."""
    return _ph.hash(password).encode("utf-8")


def verify_password(password: str, stored_hash: bytes | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash.decode("utf-8"), password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError, UnicodeDecodeError):
        return False
