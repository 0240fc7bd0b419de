"""Dependency injection for API endpoints."""

from fastapi import Depends, Request

from nowplaying.application.services.spotify_auth_service import SpotifyAuthService
from nowplaying.application.use_cases import GetLastPlayedUseCase, GetNowPlayingUseCase
from nowplaying.config import Settings


# Settings are attached to app.state by create_app(), so the app never reaches for
# a module-level singleton. Tests build the app with their own Settings instance.
def get_app_settings(request: Request) -> Settings:
    """Return the settings the running app was created with."""
    return request.app.state.settings  # type: ignore[no-any-return]


# Fresh service per request: nothing about Spotify auth is shared between requests.
def get_spotify_auth_service(
    settings: Settings = Depends(get_app_settings),
) -> SpotifyAuthService:
    """Provide the Spotify authenticator."""
    return SpotifyAuthService(settings.spotify)


def get_now_playing_use_case(
    auth_service: SpotifyAuthService = Depends(get_spotify_auth_service),
) -> GetNowPlayingUseCase:
    return GetNowPlayingUseCase(auth_service)


def get_last_played_use_case(
    auth_service: SpotifyAuthService = Depends(get_spotify_auth_service),
) -> GetLastPlayedUseCase:
    return GetLastPlayedUseCase(auth_service)
