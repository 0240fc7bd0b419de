"""API module for nowplaying.

Structure:
- routers/: the /api endpoints, aggregated by create_api_router()
- dependencies.py: Dependency Injection (settings, auth service, use cases)
"""

from nowplaying.api.routers import create_api_router

__all__ = ["create_api_router"]
