"""
Tests for the JSON-document Repository against a temporary file.
"""
from __future__ import annotations

import json
import os
import stat
import threading
from datetime import datetime

import pytest

from chirpy.db.models import Post
from chirpy.repositories.errors import (
    AuthFailedError,
    CorruptDocumentError,
    ForbiddenError,
    NotFoundError,
    StorageUnavailableError,
)
from chirpy.repositories import json_storage
from chirpy.repositories.json_storage import Repository


@pytest.fixture()
def repo(tmp_path):
    return Repository(tmp_path / "database.json")


def _read(repo: Repository) -> dict:
    return json.loads(repo.path.read_text(encoding="utf-8"))


def test_initialize_writes_empty_document(tmp_path):
    path = tmp_path / "nested" / "database.json"
    Repository(path)
    assert json.loads(path.read_text(encoding="utf-8")) == {"chirps": {}, "users": {}, "revoked_tokens": {}}


def test_initialize_keeps_existing_document(repo):
    repo.create_chirp("still here", 1)
    reopened = Repository(repo.path)
    assert [c.body for c in reopened.list_chirps()] == ["still here"]


def test_initialize_fails_on_unreadable_path(tmp_path):
    with pytest.raises(StorageUnavailableError):
        Repository(tmp_path)  # a directory cannot be read as a file


def test_initialize_fails_on_corrupt_document(tmp_path):
    path = tmp_path / "database.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptDocumentError):
        Repository(path)


def test_load_rejects_unexpected_shape(repo):
    repo.path.write_text(json.dumps({"chirps": {}}), encoding="utf-8")
    with pytest.raises(CorruptDocumentError):
        repo.list_chirps()


def test_operations_fail_when_file_disappears(repo):
    repo.path.unlink()
    with pytest.raises(StorageUnavailableError):
        repo.create_chirp("lost", 1)


def test_create_then_get_returns_equal_post(repo):
    created = repo.create_chirp("hello world", 1)
    assert created == Post(id=1, body="hello world", author_id=1)
    assert repo.get_chirp(created.id) == created


def test_ids_increase_by_one_from_one(repo):
    ids = [repo.create_chirp(f"chirp {n}", 1).id for n in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_next_id_never_collides_with_live_record_after_delete(repo):
    for n in range(3):
        repo.create_chirp(f"chirp {n}", 1)
    assert repo.delete_chirp(2, 1) is True
    new = repo.create_chirp("after delete", 1)
    assert new.id == 4
    assert repo.get_chirp(3).body == "chirp 2"


def test_deleting_highest_chirp_frees_its_id(repo):
    for n in range(3):
        repo.create_chirp(f"chirp {n}", 1)
    assert repo.delete_chirp(3, 1) is True
    assert repo.create_chirp("reuses three", 1).id == 3
    assert [c.body for c in repo.list_chirps()] == ["chirp 0", "chirp 1", "reuses three"]


def test_get_missing_chirp_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.get_chirp(42)


def test_list_filters_by_author_and_orders(repo):
    repo.create_chirp("a1", 1)
    repo.create_chirp("b1", 2)
    repo.create_chirp("a2", 1)

    assert [c.id for c in repo.list_chirps()] == [1, 2, 3]
    assert [c.id for c in repo.list_chirps(order="desc")] == [3, 2, 1]
    assert [c.body for c in repo.list_chirps(author_id=1)] == ["a1", "a2"]
    assert [c.body for c in repo.list_chirps(author_id=1, order="desc")] == ["a2", "a1"]
    assert repo.list_chirps(author_id=99) == []


def test_list_rejects_unknown_order(repo):
    with pytest.raises(ValueError):
        repo.list_chirps(order="sideways")


def test_delete_scenario(repo):
    assert repo.create_chirp("hello world", 1) == Post(id=1, body="hello world", author_id=1)
    second = repo.create_chirp("second", 2)
    assert second.id == 2 and second.author_id == 2
    assert repo.list_chirps(author_id=1) == [Post(id=1, body="hello world", author_id=1)]

    before = repo.path.read_bytes()
    with pytest.raises(ForbiddenError):
        repo.delete_chirp(2, 1)
    assert repo.path.read_bytes() == before
    assert len(repo.list_chirps()) == 2

    assert repo.delete_chirp(2, 2) is True
    assert [c.id for c in repo.list_chirps()] == [1]


def test_delete_missing_chirp_is_idempotent(repo):
    repo.create_chirp("keep", 1)
    before = repo.path.read_bytes()
    assert repo.delete_chirp(7, 1) is False
    assert repo.path.read_bytes() == before


def test_users_are_stored_with_base64_hash(repo):
    user = repo.create_user("a@example.com", b"\x00hash\xff")
    assert user.id == 1
    assert user.is_chirpy_red is False
    stored = _read(repo)["users"]["1"]
    assert stored == {"id": 1, "email": "a@example.com", "password": "AGhhc2j/", "is_chirpy_red": False}
    assert repo.get_user(1).password_hash == b"\x00hash\xff"


def test_authenticate_user(repo):
    repo.create_user("a@example.com", b"right")
    user = repo.authenticate_user("a@example.com", lambda stored: stored == b"right")
    assert user.email == "a@example.com"

    with pytest.raises(AuthFailedError) as wrong_password:
        repo.authenticate_user("a@example.com", lambda stored: False)
    with pytest.raises(AuthFailedError) as unknown_email:
        repo.authenticate_user("nobody@example.com", lambda stored: True)
    assert str(wrong_password.value) == str(unknown_email.value)


def test_authenticate_uses_first_matching_email(repo):
    repo.create_user("dup@example.com", b"first")
    repo.create_user("dup@example.com", b"second")
    seen = []
    with pytest.raises(AuthFailedError):
        repo.authenticate_user("dup@example.com", lambda stored: seen.append(stored) or False)
    assert seen == [b"first"]


def test_update_user_and_privilege(repo):
    repo.create_user("old@example.com", b"old")
    repo.set_chirpy_red(1, True)

    updated = repo.update_user(1, "new@example.com", b"new")
    assert (updated.email, updated.password_hash, updated.is_chirpy_red) == ("new@example.com", b"new", True)
    assert repo.get_user(1) == updated

    assert repo.set_chirpy_red(1, False).is_chirpy_red is False
    with pytest.raises(NotFoundError):
        repo.update_user(5, "x@example.com", b"x")
    with pytest.raises(NotFoundError):
        repo.set_chirpy_red(5, True)


def test_revoke_token(repo):
    assert repo.is_token_revoked("tok") is False
    revoked_at = repo.revoke_token("tok")
    assert isinstance(revoked_at, datetime) and revoked_at.tzinfo is not None
    assert repo.is_token_revoked("tok") is True
    assert repo.is_token_revoked("other") is False
    assert repo.revoke_token("tok") == revoked_at
    assert datetime.fromisoformat(_read(repo)["revoked_tokens"]["tok"]) == revoked_at


def test_revocation_check_propagates_storage_failure(repo):
    repo.revoke_token("tok")
    repo.path.unlink()
    with pytest.raises(StorageUnavailableError):
        repo.is_token_revoked("tok")


def test_concurrent_creates_assign_unique_ids(repo):
    # A second handle on the same file shares the lock.
    other = Repository(repo.path)
    errors = []

    def worker(store: Repository, n: int) -> None:
        try:
            for i in range(10):
                store.create_chirp(f"{n}-{i}", n)
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(repo if n % 2 else other, n)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert [c.id for c in repo.list_chirps()] == list(range(1, 81))


def test_writes_keep_file_permissions(repo):
    os.chmod(repo.path, 0o640)
    repo.create_chirp("mode", 1)
    assert stat.S_IMODE(repo.path.stat().st_mode) == 0o640


def test_failed_write_reports_storage_error_even_if_cleanup_fails(repo, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(json_storage.os, "replace", fail)
    monkeypatch.setattr(json_storage.os, "unlink", fail)
    with pytest.raises(StorageUnavailableError):
        repo.create_chirp("lost", 1)
