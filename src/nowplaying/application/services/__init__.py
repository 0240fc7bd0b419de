"""Application services."""

from nowplaying.application.services.spotify_auth_service import (
    SpotifyAuthService,
    generate_state,
    get_port_from_uri,
)

__all__ = ["SpotifyAuthService", "generate_state", "get_port_from_uri"]
