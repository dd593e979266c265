"""Typed records and the codec for the JSON document they are stored in.

The on-disk form keys every collection by string (JSON has no integer keys);
in memory the keys are ints. ``decode_document`` rejects anything that is not
exactly the three-collection shape written by ``encode_document``.
"""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from chirpy.repositories.errors import CorruptDocumentError

CHIRPS_KEY = "chirps"
USERS_KEY = "users"
REVOKED_TOKENS_KEY = "revoked_tokens"
DOCUMENT_KEYS = frozenset({CHIRPS_KEY, USERS_KEY, REVOKED_TOKENS_KEY})
_KEY_PATTERN = re.compile(r"0|[1-9][0-9]*")


@dataclass(frozen=True)
class Post:
    id: int
    body: str
    author_id: int

    def to_dict(self) -> dict:
        return {"id": self.id, "body": self.body, "author_id": self.author_id}


@dataclass(frozen=True)
class User:
    id: int
    email: str
    password_hash: bytes = field(repr=False)
    is_chirpy_red: bool = False

    def to_dict(self) -> dict:
        """Stored form; the hash is base64 encoded."""
        return {
            "id": self.id,
            "email": self.email,
            "password": base64.b64encode(self.password_hash).decode("ascii"),
            "is_chirpy_red": self.is_chirpy_red,
        }


@dataclass
class Document:
    chirps: Dict[int, Post] = field(default_factory=dict)
    users: Dict[int, User] = field(default_factory=dict)
    revoked_tokens: Dict[str, datetime] = field(default_factory=dict)


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise CorruptDocumentError(message)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _record_key(raw_key: str, where: str) -> int:
    _expect(bool(_KEY_PATTERN.fullmatch(raw_key)), f"{where}: key {raw_key!r} is not a canonical decimal integer")
    return int(raw_key)


def _decode_post(key: int, raw: Any) -> Post:
    _expect(isinstance(raw, dict) and set(raw) == {"id", "body", "author_id"}, f"chirps[{key}]: unexpected fields")
    _expect(_is_int(raw["id"]) and raw["id"] == key, f"chirps[{key}]: id does not match key")
    _expect(isinstance(raw["body"], str), f"chirps[{key}]: body must be a string")
    _expect(_is_int(raw["author_id"]), f"chirps[{key}]: author_id must be an integer")
    return Post(id=raw["id"], body=raw["body"], author_id=raw["author_id"])


def _decode_user(key: int, raw: Any) -> User:
    _expect(
        isinstance(raw, dict) and set(raw) == {"id", "email", "password", "is_chirpy_red"},
        f"users[{key}]: unexpected fields",
    )
    _expect(_is_int(raw["id"]) and raw["id"] == key, f"users[{key}]: id does not match key")
    _expect(isinstance(raw["email"], str), f"users[{key}]: email must be a string")
    _expect(isinstance(raw["password"], str), f"users[{key}]: password must be a base64 string")
    _expect(isinstance(raw["is_chirpy_red"], bool), f"users[{key}]: is_chirpy_red must be a boolean")
    try:
        password_hash = base64.b64decode(raw["password"], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CorruptDocumentError(f"users[{key}]: password is not valid base64") from exc
    return User(id=raw["id"], email=raw["email"], password_hash=password_hash, is_chirpy_red=raw["is_chirpy_red"])


def _decode_timestamp(token: str, raw: Any) -> datetime:
    _expect(isinstance(raw, str), f"revoked_tokens[{token!r}]: timestamp must be a string")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise CorruptDocumentError(f"revoked_tokens[{token!r}]: invalid ISO-8601 timestamp") from exc


def decode_document(raw: Any) -> Document:
    """Build a Document from parsed JSON, failing on any other shape."""
    _expect(isinstance(raw, dict), "document must be a JSON object")
    _expect(set(raw) == DOCUMENT_KEYS, f"document keys must be exactly {sorted(DOCUMENT_KEYS)}")
    for name in DOCUMENT_KEYS:
        _expect(isinstance(raw[name], dict), f"{name} must be a JSON object")

    doc = Document()
    for raw_key, raw_post in raw[CHIRPS_KEY].items():
        key = _record_key(raw_key, CHIRPS_KEY)
        doc.chirps[key] = _decode_post(key, raw_post)
    for raw_key, raw_user in raw[USERS_KEY].items():
        key = _record_key(raw_key, USERS_KEY)
        doc.users[key] = _decode_user(key, raw_user)
    for token, raw_ts in raw[REVOKED_TOKENS_KEY].items():
        doc.revoked_tokens[token] = _decode_timestamp(token, raw_ts)
    return doc


def encode_document(doc: Document) -> dict:
    """Inverse of decode_document: integer keys become decimal strings."""
    return {
        CHIRPS_KEY: {str(key): post.to_dict() for key, post in sorted(doc.chirps.items())},
        USERS_KEY: {str(key): user.to_dict() for key, user in sorted(doc.users.items())},
        REVOKED_TOKENS_KEY: {token: ts.isoformat() for token, ts in doc.revoked_tokens.items()},
    }
