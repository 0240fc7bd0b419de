"""Use case behind GET /api/nowplaying."""

import logging

from pydantic import ValidationError

from nowplaying.application.services.spotify_auth_service import SpotifyAuthService
from nowplaying.application.use_cases import UseCase, encode_snapshot
from nowplaying.domain.dtos import NowPlaying, SnapshotResponse
from nowplaying.domain.exceptions import (
    AuthenticationError,
    DomainException,
    ExternalServiceError,
)

logger = logging.getLogger(__name__)


class GetNowPlayingUseCase(UseCase[SnapshotResponse]):
    """Fetch the currently playing track and encode it as a NowPlaying snapshot."""

    def __init__(self, auth_service: SpotifyAuthService) -> None:
        self._auth_service = auth_service

    async def execute(self) -> SnapshotResponse:
        """Return the encoded snapshot, or an empty response when nothing plays.

        Raises:
            DomainException: Auth, upstream or serialization failure (already logged)
        """
        try:
            client = await self._auth_service.authenticate()
        except DomainException as e:
            logger.error("Spotify authentication failed: %s", e.message)
            raise

        async with client:
            try:
                playing = await client.get_currently_playing(limit=1)
            except DomainException as e:
                logger.error("Failed to fetch currently playing track: %s", e.message)
                if isinstance(e, AuthenticationError) and e.requires_reauth:
                    logger.error(
                        "Spotify rejected SPOTIFY_REFRESH_TOKEN, unset it and authorize again"
                    )
                raise

        if playing is None or playing.get("item") is None:
            return SnapshotResponse()

        try:
            snapshot = NowPlaying.from_spotify_track(playing["item"])
        except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
            logger.error("Unexpected currently-playing payload: %r", e)
            raise ExternalServiceError(
                f"Malformed currently-playing response from Spotify: {e!r}"
            ) from e

        return SnapshotResponse(body=encode_snapshot(snapshot))
