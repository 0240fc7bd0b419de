"""Shared fixtures."""

import pytest

from nowplaying.config import LoggingSettings, ServerSettings, Settings, SpotifySettings


@pytest.fixture
def spotify_settings() -> SpotifySettings:
    """Credentials without a refresh token (interactive flow)."""
    return SpotifySettings(
        _env_file=None,
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:8888/callback",
        refresh_token=None,
        auth_timeout=None,
    )


@pytest.fixture
def refresh_settings(spotify_settings: SpotifySettings) -> SpotifySettings:
    """Credentials with a long-lived refresh token."""
    return spotify_settings.model_copy(update={"refresh_token": "stored-refresh-token"})


@pytest.fixture
def settings(refresh_settings: SpotifySettings) -> Settings:
    return Settings(
        spotify=refresh_settings,
        server=ServerSettings(_env_file=None, cors_enabled=False, cors_origins="*"),
        logging=LoggingSettings(_env_file=None, level="INFO", json_format=False),
    )
