"""
JSON-document persistence adapter.

The whole store lives in one JSON file. Every operation loads a fresh copy,
applies one change and rewrites the file, all while holding a lock shared by
every Repository bound to the same path, so concurrent request handlers can
neither lose updates nor hand out duplicate IDs.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import stat
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from chirpy.db.models import Document, Post, User, decode_document, encode_document
from chirpy.repositories.errors import (
    AuthFailedError,
    CorruptDocumentError,
    ForbiddenError,
    NotFoundError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

_LOCKS: Dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(path)
        if lock is None:
            lock = _LOCKS[path] = threading.Lock()
        return lock


def _next_id(records: Dict[int, object]) -> int:
    # max+1 rather than len+1: a deletion must not make the next ID collide with a live one.
    # Deleting the highest record frees its ID for the next insert.
    return max(records, default=0) + 1


class Repository:
    """CRUD operations over the chirps/users/revoked_tokens document."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path).resolve()
        self._lock = _lock_for(self.path)
        with self._lock:
            self._ensure_document()

    # -------------------------- storage --------------------------
    def _ensure_document(self) -> None:
        try:
            self._load()
            return
        except StorageUnavailableError as exc:
            if not isinstance(exc.__cause__, FileNotFoundError):
                raise
        logger.info("no database at %s, creating an empty one", self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("cannot create database directory %s: %s", self.path.parent, exc)
            raise StorageUnavailableError(f"cannot create {self.path.parent}: {exc}") from exc
        self._persist(Document())

    def _load(self) -> Document:
        logger.debug("loading db from %s", self.path)
        try:
            data = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            if not isinstance(exc, FileNotFoundError):
                logger.error("cannot read %s: %s", self.path, exc)
            raise StorageUnavailableError(f"cannot read {self.path}: {exc}") from exc
        try:
            raw = json.loads(data)
        except ValueError as exc:
            logger.error("database %s is not valid JSON: %s", self.path, exc)
            raise CorruptDocumentError(f"{self.path} is not valid JSON: {exc}") from exc
        try:
            return decode_document(raw)
        except CorruptDocumentError as exc:
            logger.error("database %s has an unexpected shape: %s", self.path, exc)
            raise

    def _persist(self, doc: Document) -> None:
        payload = json.dumps(encode_document(doc), ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("cannot write %s: %s", self.path, exc)
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageUnavailableError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("database written to %s", self.path)

    # -------------------------- chirps --------------------------
    def create_chirp(self, body: str, author_id: int) -> Post:
        with self._lock:
            doc = self._load()
            chirp = Post(id=_next_id(doc.chirps), body=body, author_id=author_id)
            doc.chirps[chirp.id] = chirp
            self._persist(doc)
        logger.info("created chirp %s for author %s", chirp.id, author_id)
        return chirp

    def list_chirps(self, author_id: Optional[int] = None, order: str = "asc") -> List[Post]:
        if order not in ("asc", "desc"):
            raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")
        with self._lock:
            doc = self._load()
        chirps = [c for c in doc.chirps.values() if author_id is None or c.author_id == author_id]
        return sorted(chirps, key=lambda c: c.id, reverse=(order == "desc"))

    def get_chirp(self, chirp_id: int) -> Post:
        with self._lock:
            doc = self._load()
        chirp = doc.chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError(f"chirp {chirp_id} not found")
        return chirp

    def delete_chirp(self, chirp_id: int, requester_id: int) -> bool:
        """Remove a chirp owned by ``requester_id``.

        Returns False when the chirp is already gone. Raises ForbiddenError,
        leaving the store untouched, when someone else wrote it.
        """
        with self._lock:
            doc = self._load()
            chirp = doc.chirps.get(chirp_id)
            if chirp is None:
                return False
            if chirp.author_id != requester_id:
                logger.warning("user %s tried to delete chirp %s owned by %s", requester_id, chirp_id, chirp.author_id)
                raise ForbiddenError(f"chirp {chirp_id} belongs to another user")
            del doc.chirps[chirp_id]
            self._persist(doc)
        logger.info("deleted chirp %s", chirp_id)
        return True

    # -------------------------- users --------------------------
    def create_user(self, email: str, password_hash: bytes) -> User:
        with self._lock:
            doc = self._load()
            user = User(id=_next_id(doc.users), email=email, password_hash=password_hash, is_chirpy_red=False)
            doc.users[user.id] = user
            self._persist(doc)
        logger.info("created user %s", user.id)
        return user

    def get_user(self, user_id: int) -> User:
        with self._lock:
            doc = self._load()
        user = doc.users.get(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def authenticate_user(self, email: str, verify: Callable[[bytes], bool]) -> User:
        """Return the first user with ``email`` whose stored hash ``verify`` accepts.

        Unknown e-mail and rejected credentials raise the same AuthFailedError.
        """
        with self._lock:
            doc = self._load()
        user = next((u for u in doc.users.values() if u.email == email), None)
        if user is None or not verify(user.password_hash):
            raise AuthFailedError("invalid credentials")
        return user

    def update_user(self, user_id: int, email: str, password_hash: bytes) -> User:
        with self._lock:
            doc = self._load()
            current = doc.users.get(user_id)
            if current is None:
                raise NotFoundError(f"user {user_id} not found")
            user = User(id=user_id, email=email, password_hash=password_hash, is_chirpy_red=current.is_chirpy_red)
            doc.users[user_id] = user
            self._persist(doc)
        logger.info("updated user %s", user_id)
        return user

    def set_chirpy_red(self, user_id: int, flag: bool) -> User:
        with self._lock:
            doc = self._load()
            current = doc.users.get(user_id)
            if current is None:
                raise NotFoundError(f"user {user_id} not found")
            user = User(id=user_id, email=current.email, password_hash=current.password_hash, is_chirpy_red=flag)
            doc.users[user_id] = user
            self._persist(doc)
        logger.info("set is_chirpy_red=%s for user %s", flag, user_id)
        return user

    # -------------------------- revoked tokens --------------------------
    def is_token_revoked(self, token: str) -> bool:
        with self._lock:
            doc = self._load()
        return token in doc.revoked_tokens

    def revoke_token(self, token: str) -> datetime:
        with self._lock:
            doc = self._load()
            revoked_at = doc.revoked_tokens.get(token)
            if revoked_at is None:
                revoked_at = doc.revoked_tokens[token] = datetime.now(timezone.utc)
                self._persist(doc)
        logger.info("token revoked at %s", revoked_at.isoformat())
        return revoked_at
