from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Body, HTTPException, Request, Response

from chirpy.routers.common import current_user_id, required_str
from chirpy.services.chirp_service import ChirpService, ChirpTooLongError

router = APIRouter(prefix="/api/chirps", tags=["chirps"])
chirp_service = ChirpService()


@router.post("", status_code=201)
def create_chirp(request: Request, payload: dict = Body(...)):
    author_id = current_user_id(request)
    try:
        chirp = chirp_service.post(required_str(payload, "body"), author_id)
    except ChirpTooLongError as exc:
        raise HTTPException(400, str(exc)) from exc
    return chirp.to_dict()


@router.get("")
def list_chirps(author_id: Optional[int] = None, sort: Literal["asc", "desc"] = "asc"):
    return [chirp.to_dict() for chirp in chirp_service.list(author_id=author_id, sort=sort)]


@router.get("/{chirp_id}")
def get_chirp(chirp_id: int):
    return chirp_service.get(chirp_id).to_dict()


@router.delete("/{chirp_id}", status_code=204)
def delete_chirp(chirp_id: int, request: Request):
    requester_id = current_user_id(request)
    chirp_service.delete(chirp_id, requester_id)
    return Response(status_code=204)
