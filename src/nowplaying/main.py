"""Process bootstrap: app factory and the ``nowplaying`` console entry point."""

import logging

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nowplaying import __version__
from nowplaying.api.routers import create_api_router
from nowplaying.config import Settings, get_settings
from nowplaying.infrastructure.observability import (
    RequestLoggingMiddleware,
    configure_logging,
)

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["Content-Type", "Accept", "Authorization", "X-Requested-With"]
CORS_MAX_AGE = 86400


def create_app(settings: Settings, api_router: APIRouter) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings the app and its dependencies read from
        api_router: Router built by create_api_router()

    Returns:
        Configured application
    """
    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    # Added last so it wraps everything, preflight included
    if settings.server.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server.allowed_origins(),
            allow_methods=["GET", "OPTIONS"],
            allow_headers=CORS_ALLOW_HEADERS,
            max_age=CORS_MAX_AGE,
        )

    app.include_router(api_router)
    return app


def run() -> None:
    """Start the HTTP server (BACK_HOST / BACK_PORT, default port 1323)."""
    settings = get_settings()
    configure_logging(
        log_level=settings.logging.level,
        json_format=settings.logging.json_format,
        app_name=settings.app_name,
    )

    app = create_app(settings, create_api_router())

    if not settings.spotify.has_refresh_token:
        logger.warning(
            "SPOTIFY_REFRESH_TOKEN is not set, the first API request will wait "
            "for an interactive Spotify authorization"
        )

    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
