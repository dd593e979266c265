from __future__ import annotations

import logging

from fastapi import APIRouter, Body, HTTPException, Request, Response

from chirpy.repositories.errors import AuthFailedError, RepositoryError
from chirpy.routers.common import auth_service, public_user, request_token, required_str
from chirpy.services.token_service import TokenInvalidError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login")
def login(payload: dict = Body(...)):
    try:
        result = auth_service.login(required_str(payload, "email"), required_str(payload, "password"))
    except AuthFailedError as exc:
        raise HTTPException(401, "Unauthorized") from exc
    return {**public_user(result.user), "token": result.token, "refresh_token": result.refresh_token}


@router.post("/refresh")
def refresh(request: Request):
    token = request_token(request)
    try:
        access_token = auth_service.refresh(token)
    except TokenInvalidError as exc:
        raise HTTPException(401, "Unauthorized") from exc
    except RepositoryError as exc:
        # An unreadable store must never let a revoked token through.
        logger.error("revocation check failed, refusing refresh: %s", exc)
        raise HTTPException(401, "Unauthorized") from exc
    return {"token": access_token}


@router.post("/revoke", status_code=204)
def revoke(request: Request):
    token = request_token(request)
    try:
        auth_service.revoke(token)
    except TokenInvalidError as exc:
        raise HTTPException(401, "Unauthorized") from exc
    return Response(status_code=204)
