from __future__ import annotations

from fastapi import APIRouter, Body, HTTPException, Request

from chirpy.routers.common import auth_service, current_user_id, public_user, required_str
from chirpy.services.auth_service import RegistrationError

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", status_code=201)
def create_user(payload: dict = Body(...)):
    try:
        user = auth_service.register(required_str(payload, "email"), required_str(payload, "password"))
    except RegistrationError as exc:
        raise HTTPException(400, exc.message) from exc
    return public_user(user)


@router.put("")
def update_user(request: Request, payload: dict = Body(...)):
    user_id = current_user_id(request)
    try:
        user = auth_service.update_account(user_id, required_str(payload, "email"), required_str(payload, "password"))
    except RegistrationError as exc:
        raise HTTPException(400, exc.message) from exc
    return public_user(user)
