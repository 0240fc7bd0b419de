"""External service integrations."""

from nowplaying.infrastructure.integrations.spotify_client import (
    OAuthToken,
    SpotifyClient,
    SpotifyOAuth,
)

__all__ = ["OAuthToken", "SpotifyClient", "SpotifyOAuth"]
