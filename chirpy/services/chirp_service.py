"""
Chirp-related use cases shared across routers.
"""

from __future__ import annotations

from typing import List, Optional

from chirpy.core.config import get_settings
from chirpy.db.models import Post
from chirpy.db.session import get_repository
from chirpy.domain.chirps import clean_body, is_valid_chirp
from chirpy.repositories.json_storage import Repository


class ChirpTooLongError(Exception):
    pass


class ChirpService:
    @property
    def settings(self):
        return get_settings()

    @property
    def repository(self) -> Repository:
        return get_repository()

    def post(self, body: str, author_id: int) -> Post:
        if not is_valid_chirp(body, self.settings.max_chirp_length):
            raise ChirpTooLongError("Chirp is too long")
        return self.repository.create_chirp(clean_body(body), author_id)

    def list(self, author_id: Optional[int] = None, sort: str = "asc") -> List[Post]:
        return self.repository.list_chirps(author_id=author_id, order=sort)

    def get(self, chirp_id: int) -> Post:
        return self.repository.get_chirp(chirp_id)

    def delete(self, chirp_id: int, requester_id: int) -> bool:
        return self.repository.delete_chirp(chirp_id, requester_id)
