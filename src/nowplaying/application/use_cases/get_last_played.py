"""Use case behind GET /api/lastplayed."""

import logging

from nowplaying.application.services.spotify_auth_service import SpotifyAuthService
from nowplaying.application.use_cases import UseCase, encode_snapshot
from nowplaying.domain.dtos import LastPlayed, SnapshotResponse
from nowplaying.domain.exceptions import (
    AuthenticationError,
    DomainException,
    ExternalServiceError,
)

logger = logging.getLogger(__name__)


class GetLastPlayedUseCase(UseCase[SnapshotResponse]):
    """Fetch the newest play-history entry and encode it as a LastPlayed snapshot.

    playedAt comes back in JST, see nowplaying.domain.dtos.to_jst.
    """

    def __init__(self, auth_service: SpotifyAuthService) -> None:
        self._auth_service = auth_service

    async def execute(self) -> SnapshotResponse:
        try:
            client = await self._auth_service.authenticate()
        except DomainException as e:
            logger.error("Spotify authentication failed: %s", e.message)
            raise

        async with client:
            try:
                history = await client.get_recently_played(limit=1)
            except DomainException as e:
                logger.error("Failed to fetch recently played tracks: %s", e.message)
                if isinstance(e, AuthenticationError) and e.requires_reauth:
                    logger.error(
                        "Spotify rejected SPOTIFY_REFRESH_TOKEN, unset it and authorize again"
                    )
                raise

        items = history.get("items") or []
        if not items:
            return SnapshotResponse()

        try:
            snapshot = LastPlayed.from_play_history(items[0])
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            # ValueError also covers an unparsable played_at
            logger.error("Unexpected recently-played payload: %r", e)
            raise ExternalServiceError(
                f"Malformed recently-played response from Spotify: {e!r}"
            ) from e

        return SnapshotResponse(body=encode_snapshot(snapshot))
