"""RoomCheck - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roomcheck.core.config import Settings, get_settings
from roomcheck.core.env_validation import validate_environment
from roomcheck.core.exceptions import RoomCheckError
from roomcheck.core.logging import configure_logging
from roomcheck.routers import (
    auth_router,
    homes_router,
    rooms_router,
    inspections_router,
    tenant_router,
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, validate_env: bool = True) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Hard-fails (exit 1) if required configuration is missing
        if validate_env:
            validate_environment()
        logger.info(f"[APP] {settings.app_name} started")
        yield
        logger.info(f"[APP] {settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Room-by-room rental inspections with AI photo comparison.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Wildcard (*) is blocked outside debug by env_validation.py
    logger.info(f"[APP] CORS configured with origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RoomCheckError)
    async def roomcheck_error_handler(request: Request, exc: RoomCheckError):
        if exc.status_code >= 500:
            logger.error(f"[APP] {request.method} {request.url.path} failed: {exc.name}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.name},
        )

    # API v1 routers
    app.include_router(auth_router, prefix=settings.api_v1_prefix)
    app.include_router(homes_router, prefix=settings.api_v1_prefix)
    app.include_router(rooms_router, prefix=settings.api_v1_prefix)
    app.include_router(inspections_router, prefix=settings.api_v1_prefix)
    app.include_router(tenant_router, prefix=settings.api_v1_prefix)  # link-authenticated

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.app_name}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs" if settings.debug else "Disabled in production",
        }

    return app


app = create_app()
