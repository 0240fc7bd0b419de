"""Fakes shared by the use case tests."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeSpotifyClient:
    """Stands in for SpotifyClient; records calls and whether it was closed."""

    def __init__(
        self,
        *,
        currently_playing: dict[str, Any] | None = None,
        recently_played: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.currently_playing = currently_playing
        self.recently_played = recently_played or {"items": []}
        self.error = error
        self.limits: list[int] = []
        self.closed = False

    async def get_currently_playing(self, limit: int = 1) -> dict[str, Any] | None:
        self.limits.append(limit)
        if self.error:
            raise self.error
        return self.currently_playing

    async def get_recently_played(self, limit: int = 1) -> dict[str, Any]:
        self.limits.append(limit)
        if self.error:
            raise self.error
        return self.recently_played

    async def __aenter__(self) -> "FakeSpotifyClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.closed = True


@pytest.fixture
def make_auth_service():
    """Build an auth service double that hands out the given client."""

    def _make(client: FakeSpotifyClient | None = None, error: Exception | None = None):
        service = MagicMock()
        service.authenticate = AsyncMock(return_value=client, side_effect=error)
        return service

    return _make


def spotify_track(name: str = "T") -> dict[str, Any]:
    return {
        "name": name,
        "external_urls": {"spotify": "U"},
        "album": {
            "name": "A",
            "external_urls": {"spotify": "AU"},
            "images": [{"url": "X"}],
        },
        "artists": [{"name": "AR", "external_urls": {"spotify": "ARU"}}],
    }


@pytest.fixture
def fake_client():
    """The FakeSpotifyClient class, so tests can build one per scenario."""
    return FakeSpotifyClient


@pytest.fixture(name="spotify_track")
def spotify_track_fixture():
    """Factory for minimal Spotify track objects."""
    return spotify_track
