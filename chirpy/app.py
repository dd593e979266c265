from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from chirpy.core.config import get_settings
from chirpy.core.metrics import HitCounter
from chirpy.db.session import get_repository
from chirpy.error_handlers import register_error_handlers
from chirpy.routers import admin as admin_router
from chirpy.routers import auth as auth_router
from chirpy.routers import chirps as chirps_router
from chirpy.routers import hooks as hooks_router
from chirpy.routers import users as users_router

logger = logging.getLogger(__name__)

APP_PREFIX = "/app"


class FileserverHitsMiddleware(BaseHTTPMiddleware):
    """Count every request served under /app for the admin metrics page."""

    async def dispatch(self, request, call_next):
        path = request.url.path
        if path == APP_PREFIX or path.startswith(APP_PREFIX + "/"):
            request.app.state.hits.increment()
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails startup if the store cannot be opened or created.
    repository = get_repository()
    logger.info("using database %s", repository.path)
    yield


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    settings = get_settings()
    app = FastAPI(title="Chirpy API", lifespan=lifespan)
    app.state.hits = HitCounter()

    app.add_middleware(FileserverHitsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(admin_router.router)
    app.include_router(users_router.router)
    app.include_router(auth_router.router)
    app.include_router(chirps_router.router)
    app.include_router(hooks_router.router)

    app.mount(APP_PREFIX, StaticFiles(directory=settings.static_dir, html=True, check_dir=False), name="app")
    return app
