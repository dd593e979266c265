"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chirpy.core.security import hash_password, verify_password
from chirpy.db.models import User
from chirpy.db.session import get_repository
from chirpy.repositories.json_storage import Repository
from chirpy.services.token_service import (
    ACCESS_ISSUER,
    REFRESH_ISSUER,
    TokenInvalidError,
    decode_token,
    issue_access_token,
    issue_refresh_token,
)

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class LoginSuccess:
    user: User
    token: str
    refresh_token: str


@dataclass
class AuthService:
    """Handles registration, login, account updates and token refresh/revocation."""

    @property
    def repository(self) -> Repository:
        return get_repository()

    # -------------------------------------- helpers --------------------------------------
    def _clean_credentials(self, email: str | None, password: str | None) -> tuple[str, str]:
        raw_email = (email or "").strip()
        if not raw_email:
            raise RegistrationError("email is required")
        if not password:
            raise RegistrationError("password is required")
        return raw_email, password

    # -------------------------------------- registration --------------------------------------
    def register(self, email: str, password: str) -> User:
        raw_email, password = self._clean_credentials(email, password)
        return self.repository.create_user(raw_email, hash_password(password))

    def update_account(self, user_id: int, email: str, password: str) -> User:
        raw_email, password = self._clean_credentials(email, password)
        return self.repository.update_user(user_id, raw_email, hash_password(password))

    def upgrade_to_red(self, user_id: int) -> User:
        return self.repository.set_chirpy_red(user_id, True)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginSuccess:
        """Raises AuthFailedError for unknown e-mail and wrong password alike."""
        raw_email = (email or "").strip()
        user = self.repository.authenticate_user(raw_email, lambda stored: verify_password(password or "", stored))
        logger.info("user %s logged in", user.id)
        return LoginSuccess(user=user, token=issue_access_token(user.id), refresh_token=issue_refresh_token(user.id))

    # -------------------------------------- tokens --------------------------------------
    def authenticate_access(self, token: str) -> int:
        return decode_token(token, ACCESS_ISSUER)

    def refresh(self, refresh_token: str) -> str:
        """Exchange a valid, unrevoked refresh token for a new access token.

        A storage failure while checking revocation propagates; callers must
        treat it as an authentication failure.
        """
        user_id = decode_token(refresh_token, REFRESH_ISSUER)
        if self.repository.is_token_revoked(refresh_token):
            raise TokenInvalidError("token revoked")
        return issue_access_token(user_id)

    def revoke(self, refresh_token: str) -> None:
        decode_token(refresh_token, REFRESH_ISSUER)
        self.repository.revoke_token(refresh_token)
