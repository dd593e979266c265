"""Token helpers (issue JWTs, parse bearer headers, validation)."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from chirpy.core.config import get_settings

logger = logging.getLogger(__name__)

ACCESS_ISSUER = "chirpy-access"
REFRESH_ISSUER = "chirpy-refresh"
JWT_ALGORITHM = "HS256"


class TokenInvalidError(Exception):
    """Token missing, malformed, expired, or issued for another purpose."""


def _secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        raise RuntimeError("JWT_SECRET must be configured to issue or verify tokens.")
    return secret


def _issue(user_id: int, issuer: str, ttl_seconds: int, **extra) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "iss": issuer,
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
        **extra,
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def issue_access_token(user_id: int) -> str:
    return _issue(user_id, ACCESS_ISSUER, get_settings().access_token_ttl_seconds)


def issue_refresh_token(user_id: int) -> str:
    # jti keeps two refresh tokens minted in the same second distinct.
    return _issue(user_id, REFRESH_ISSUER, get_settings().refresh_token_ttl_seconds, jti=secrets.token_hex(16))


def decode_token(token: str, issuer: str) -> int:
    """Verify signature, expiry and issuer; return the user id in ``sub``."""
    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[JWT_ALGORITHM],
            issuer=issuer,
            options={"require": ["iss", "sub", "iat", "exp"]},
        )
    except ExpiredSignatureError as exc:
        logger.debug("%s token expired", issuer)
        raise TokenInvalidError("token expired") from exc
    except InvalidTokenError as exc:
        logger.warning("invalid %s token: %s", issuer, exc)
        raise TokenInvalidError("invalid token") from exc
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise TokenInvalidError("invalid token subject") from exc


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    value = (authorization or "").strip()
    scheme, _, token = value.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise TokenInvalidError("authorization token required")
    return token.strip()
