"""Global exception handlers: every error leaves as ``{"error": message}``."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chirpy.repositories.errors import (
    AuthFailedError,
    CorruptDocumentError,
    ForbiddenError,
    NotFoundError,
    RepositoryError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

_REPOSITORY_STATUS = {
    NotFoundError: 404,
    ForbiddenError: 403,
    AuthFailedError: 401,
    StorageUnavailableError: 500,
    CorruptDocumentError: 500,
}


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("validation error on %s: %s", request.url.path, exc.errors())
        return _error(400, "invalid request")

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        status_code = next((code for cls, code in _REPOSITORY_STATUS.items() if isinstance(exc, cls)), 500)
        if status_code >= 500:
            logger.error("storage failure on %s: %s", request.url.path, exc)
            return _error(status_code, "something went wrong")
        return _error(status_code, str(exc))
