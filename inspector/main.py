"""Application factory, layer composition and process entry point.

Layers, innermost first:

    routes -> exception handlers -> InspectionMiddleware -> CompressMiddleware -> CORSMiddleware

Inspection sits inside compression so that captured bodies are always the
plain payload. CORS wraps the whole FastAPI application, including its
server-error responder, so every response carries the CORS headers.

Logging is configured in the application lifespan, so both ``run()`` and
``uvicorn inspector.main:app`` emit the inspection records.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp
from starlette_compress import CompressMiddleware

from inspector.config.settings import InspectorSettings
from inspector.logging_config import configure_logging
from inspector.middleware.error_handler import register_error_handlers
from inspector.middleware.inspection import InspectionMiddleware
from inspector.routers.pages import create_pages_router

logger = logging.getLogger(__name__)


def build_api(settings: InspectorSettings) -> FastAPI:
    """Create the FastAPI application with routes, error handlers and inspection."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level, settings.log_format)
        logger.info("Inspector API ready (log level %s)", settings.log_level)
        yield
        logger.info("Inspector API shutting down")

    api = FastAPI(title="Inspector API", version="0.1.0", lifespan=lifespan)

    register_error_handlers(api)
    api.include_router(create_pages_router())
    api.add_middleware(InspectionMiddleware, config=settings.inspection_config())

    return api


def compose_layers(api: ASGIApp, settings: InspectorSettings) -> ASGIApp:
    """Wrap the application in compression (zstd, br, gzip) and then CORS."""
    compressed = CompressMiddleware(api, minimum_size=settings.compression_minimum_size)
    return CORSMiddleware(
        compressed,
        allow_origins=settings.cors_allow_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )


def create_app(settings: InspectorSettings | None = None) -> ASGIApp:
    """Create the fully layered ASGI application."""
    settings = settings or InspectorSettings()
    return compose_layers(build_api(settings), settings)


def run() -> None:
    """Load settings, configure logging and serve with uvicorn."""
    settings = InspectorSettings()
    configure_logging(settings.log_level, settings.log_format)

    logger.info("Starting server on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


app = create_app()
