"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import auth, bookings, electricians, health, pages, profile
from .config import settings
from .db import get_supabase_client
from .services.auth.session import SessionRegistry

logger = logging.getLogger(__name__)


def create_app(sessions: SessionRegistry | None = None) -> FastAPI:
    logging.basicConfig(level=settings.log_level)
    registry = sessions or SessionRegistry(get_supabase_client())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        registry.start()
        try:
            yield
        finally:
            registry.stop()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.sessions = registry

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(Exception)
    async def crash_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "App crashed", "detail": "Something went wrong. Please reload the page."},
        )

    # Diagnostics; "/" itself belongs to the page router
    @app.get(settings.api_prefix)
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(profile.router, prefix=settings.api_prefix)
    app.include_router(electricians.router, prefix=settings.api_prefix)
    app.include_router(bookings.router, prefix=settings.api_prefix)
    # catch-all page route, registered last
    app.include_router(pages.router)
    return app


app = create_app()
