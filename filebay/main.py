"""Filebay application factory."""

from __future__ import annotations

import logging

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from filebay import __version__
from filebay.api.v1 import router as v1_router
from filebay.config import LoggingConfig, Settings, get_settings
from filebay.services.files import FileService

logger = structlog.get_logger()


def configure_logging(config: LoggingConfig) -> None:
    """Configure structlog output format and level."""
    level = logging.getLevelName(config.level.upper())
    if config.json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.logging)

    app = FastAPI(title="Filebay API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    service = FileService(settings.storage)
    app.state.settings = settings
    app.state.file_service = service

    if not service.resolver.root.is_dir():
        logger.warning("app.storage_root_missing", root=str(service.resolver.root))

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    app.include_router(v1_router)
    logger.info("app.created", root=str(service.resolver.root))
    return app
