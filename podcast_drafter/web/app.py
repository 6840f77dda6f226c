"""FastAPI application factory.

Run with:
    podcast-drafter serve
    uvicorn --factory podcast_drafter.web.app:create_app  # dev server only
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app.pipeline import ServiceContainer, build_services
from ..errors import ValidationError
from ..settings import AppConfig, load_config
from .routes import router, validation_error_handler

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    *,
    services: ServiceContainer | None = None,
) -> FastAPI:
    """Build the app; ``services`` may be injected, otherwise they are built at startup."""
    app_config = services.config if services is not None else (config or load_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(app_config)
        logger.info(
            "Podcast drafter ready",
            extra={
                "event": "app.startup",
                "credentials_configured": app.state.services.credential_store.is_configured(),
            },
        )
        yield
        active = app.state.services.job_runner.active_jobs()
        if active:
            logger.warning(
                "Shutting down with jobs still running",
                extra={"event": "app.shutdown", "active_jobs": active},
            )

    app = FastAPI(
        title="Podcast Drafter",
        description="Normalise a recording, upload it to FileBrowser and draft a WordPress post.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(app_config.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.include_router(router)
    return app


__all__ = ["create_app"]
