from __future__ import annotations

import secrets

from fastapi import APIRouter, Body, HTTPException, Request, Response

from chirpy.core.config import get_settings
from chirpy.routers.common import auth_service

router = APIRouter(prefix="/api/polka", tags=["hooks"])

UPGRADE_EVENT = "user.upgraded"


def _check_api_key(request: Request) -> None:
    expected = get_settings().polka_key
    scheme, _, key = (request.headers.get("authorization") or "").partition(" ")
    if not expected or scheme != "ApiKey" or not secrets.compare_digest(key.strip(), expected):
        raise HTTPException(401, "Unauthorized")


@router.post("/webhooks", status_code=204)
def polka_webhook(request: Request, payload: dict = Body(...)):
    _check_api_key(request)
    if payload.get("event") != UPGRADE_EVENT:
        return Response(status_code=204)
    data = payload.get("data")
    user_id = data.get("user_id") if isinstance(data, dict) else None
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise HTTPException(400, "'data.user_id' must be an integer")
    auth_service.upgrade_to_red(user_id)
    return Response(status_code=204)
