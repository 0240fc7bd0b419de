"""Application use cases - one per public endpoint."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic_core import PydanticSerializationError

from nowplaying.domain.dtos import TrackSnapshot
from nowplaying.domain.exceptions import SerializationError

logger = logging.getLogger(__name__)

TResponse = TypeVar("TResponse")


class UseCase(ABC, Generic[TResponse]):
    """Base class for all use cases following command pattern."""

    @abstractmethod
    async def execute(self) -> TResponse:
        """Execute the use case."""
        pass


def encode_snapshot(snapshot: TrackSnapshot) -> bytes:
    """Serialize a snapshot, turning encoder failures into SerializationError."""
    try:
        return snapshot.to_json()
    except (PydanticSerializationError, ValueError, TypeError) as e:
        logger.error("Failed to encode %s: %s", type(snapshot).__name__, e)
        raise SerializationError(f"Failed to encode {type(snapshot).__name__}: {e}") from e


# Import concrete use cases (after UseCase definition to avoid circular imports)
from nowplaying.application.use_cases.get_last_played import (  # noqa: E402
    GetLastPlayedUseCase,
)
from nowplaying.application.use_cases.get_now_playing import (  # noqa: E402
    GetNowPlayingUseCase,
)

__all__ = [
    "UseCase",
    "GetLastPlayedUseCase",
    "GetNowPlayingUseCase",
    "encode_snapshot",
]
