# src/phrase_studio/main.py
"""Main entry point for the Phrase Studio application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from phrase_studio.api import auth_router, phrases_router, usage_router
from phrase_studio.core.errors import InputValidationError, PhraseStudioError
from phrase_studio.core.logging import configure_logging
from phrase_studio.core.settings import Settings
from phrase_studio.core.settings import settings as default_settings
from phrase_studio.services.container import build_container
from phrase_studio.services.rollover import Clock

logger = logging.getLogger(__name__)


async def phrase_studio_error_handler(request: Request, exc: PhraseStudioError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InputValidationError("Request body is missing or malformed.")
    return JSONResponse(status_code=error.status_code, content=error.payload())


def create_app(
    settings: Settings | None = None,
    *,
    clock: Clock = datetime.now,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build a FastAPI application with its own ledgers and session store."""
    settings = settings or default_settings
    services = build_container(settings, clock=clock, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await services.startup()
        logger.info(
            "Phrase Studio ready (generation API key %s)",
            "set" if settings.generation_configured else "NOT set",
        )
        try:
            yield
        finally:
            await services.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Thumbnail phrase generation with session gating and usage quotas",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.services = services

    # Add CORS middleware for the browser wizard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PhraseStudioError, phrase_studio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include API routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(usage_router, prefix="/api")
    app.include_router(phrases_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, object]:
        """Root endpoint with basic information about the API."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "generation_configured": settings.generation_configured,
            "docs": "/docs",
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the default application with uvicorn."""
    import uvicorn

    configure_logging(default_settings.log_level)
    uvicorn.run(
        "phrase_studio.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    run()
