"""Spotify track endpoints.

Both routes hand back the use case's JSON bytes untouched (no re-encoding), 204
when Spotify reports nothing and a bare 400 for any failure on the way.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from nowplaying.api.dependencies import get_last_played_use_case, get_now_playing_use_case
from nowplaying.application.use_cases import (
    GetLastPlayedUseCase,
    GetNowPlayingUseCase,
    UseCase,
)
from nowplaying.domain.dtos import SnapshotResponse
from nowplaying.domain.exceptions import DomainException

logger = logging.getLogger(__name__)

router = APIRouter()


async def _snapshot_response(use_case: UseCase[SnapshotResponse]) -> Response:
    try:
        result = await use_case.execute()
    except DomainException as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    if result.body is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(
        content=result.body,
        status_code=status.HTTP_200_OK,
        media_type="application/json",
    )


@router.get("/nowplaying")
async def get_now_playing(
    use_case: GetNowPlayingUseCase = Depends(get_now_playing_use_case),
) -> Response:
    """Get the track that is playing right now."""
    return await _snapshot_response(use_case)


@router.get("/lastplayed")
async def get_last_played(
    use_case: GetLastPlayedUseCase = Depends(get_last_played_use_case),
) -> Response:
    """Get the most recently played track (playedAt in JST)."""
    return await _snapshot_response(use_case)
