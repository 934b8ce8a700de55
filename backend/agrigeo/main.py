"""Agrigeo FastAPI Application.

Main entry point for the backend API server. ``create_app`` builds the
geodata services once and attaches them to ``app.state``; route handlers
reach them through dependencies, never through module globals.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agrigeo.api import router
from agrigeo.config import Settings
from agrigeo.models import ErrorResponse
from agrigeo.services import CacheService, GeodataServices

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    shared_cache: Optional[CacheService] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Defaults to ``Settings()`` read from the environment.
        transport: httpx transport handed to every upstream provider.
        shared_cache: Overrides the Redis tier configured by ``REDIS_URL``.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    services = GeodataServices.from_settings(
        settings, transport=transport, shared_cache=shared_cache
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info(
            f"Geodata caches ready (soil ttl={settings.soil_cache_ttl_seconds:g}s, "
            f"facilities ttl={settings.facilities_cache_ttl_seconds:g}s)"
        )
        yield
        await services.close()

    app = FastAPI(
        title="Agrigeo API",
        description="Soil, facilities and weather data for agricultural land listings",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.geodata = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint with cache statistics."""
        return {"status": "healthy", "caches": services.cache_stats()}

    return app


app = create_app()
