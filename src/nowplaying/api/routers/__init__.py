"""API router initialization."""

from fastapi import APIRouter

from nowplaying.api.routers import spotify


# Hey future me, the aggregate router is BUILT here, not kept as a module global.
# main.run() calls this once and passes the result to create_app(), so a test can
# build as many independent apps as it wants.
def create_api_router() -> APIRouter:
    """Build the /api router with all sub-routers included."""
    api_router = APIRouter(prefix="/api")
    api_router.include_router(spotify.router, tags=["Spotify"])
    return api_router


__all__ = ["create_api_router", "spotify"]
