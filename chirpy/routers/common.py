"""Helpers shared by the routers (bearer auth, response shaping)."""
from __future__ import annotations

from fastapi import HTTPException, Request

from chirpy.db.models import User
from chirpy.services.auth_service import AuthService
from chirpy.services.token_service import TokenInvalidError, bearer_token

auth_service = AuthService()


def request_token(request: Request) -> str:
    try:
        return bearer_token(request.headers.get("authorization"))
    except TokenInvalidError as exc:
        raise HTTPException(401, str(exc)) from exc


def current_user_id(request: Request) -> int:
    """Resolve the user id from a valid access token or answer 401."""
    token = request_token(request)
    try:
        return auth_service.authenticate_access(token)
    except TokenInvalidError as exc:
        raise HTTPException(401, "Unauthorized") from exc


def public_user(user: User) -> dict:
    return {"id": user.id, "email": user.email, "is_chirpy_red": user.is_chirpy_red}


def required_str(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise HTTPException(400, f"'{key}' must be a string")
    return value
