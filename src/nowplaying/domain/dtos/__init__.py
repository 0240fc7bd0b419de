"""Track snapshots returned by the public API.

Hey future me - these are the ONLY shapes the frontend ever sees. Spotify's
track objects are huge; we flatten them down to names, links and one image.
Field order matters for the wire format (pydantic dumps in declaration order)
so don't shuffle the fields around.

Flow: Spotify JSON -> from_*() projection -> to_json() bytes -> HTTP body
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

JST = timezone(timedelta(hours=9), "JST")
PLAYED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


def _spotify_url(obj: dict[str, Any]) -> str:
    return (obj.get("external_urls") or {}).get("spotify", "")


def to_jst(played_at: str) -> datetime:
    """Parse a Spotify ISO-8601 UTC timestamp and move it to JST."""
    parsed = datetime.fromisoformat(played_at.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(JST)


class TrackSnapshot(BaseModel):
    """Common base: camelCase JSON keys, immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_json(self) -> bytes:
        """Encode as compact JSON using the camelCase keys."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


class NowPlaying(TrackSnapshot):
    """The track that is playing right now."""

    image_url: str
    track_name: str
    track_url: str
    album_name: str
    album_url: str
    artist_name: str
    artist_url: str

    @classmethod
    def from_spotify_track(cls, track: dict[str, Any]) -> "NowPlaying":
        """Project a Spotify track object (first image, first artist)."""
        album = track["album"]
        artist = track["artists"][0]
        return cls(
            image_url=album["images"][0]["url"],
            track_name=track["name"],
            track_url=_spotify_url(track),
            album_name=album["name"],
            album_url=_spotify_url(album),
            artist_name=artist["name"],
            artist_url=_spotify_url(artist),
        )


class LastPlayed(TrackSnapshot):
    """The most recently played track with its play time in JST."""

    image_url: str
    played_at: str
    track_name: str
    track_url: str
    album_name: str
    album_url: str
    artist_name: str
    artist_url: str

    @classmethod
    def from_play_history(cls, item: dict[str, Any]) -> "LastPlayed":
        """Project one entry of the recently-played history."""
        track = item["track"]
        album = track["album"]
        artist = track["artists"][0]
        return cls(
            image_url=album["images"][0]["url"],
            played_at=to_jst(item["played_at"]).strftime(PLAYED_AT_FORMAT),
            track_name=track["name"],
            track_url=_spotify_url(track),
            album_name=album["name"],
            album_url=_spotify_url(album),
            artist_name=artist["name"],
            artist_url=_spotify_url(artist),
        )


@dataclass(frozen=True)
class SnapshotResponse:
    """Encoded snapshot, or ``body=None`` when Spotify had nothing to report."""

    body: bytes | None = None

    @property
    def is_empty(self) -> bool:
        return self.body is None


__all__ = [
    "JST",
    "LastPlayed",
    "NowPlaying",
    "PLAYED_AT_FORMAT",
    "SnapshotResponse",
    "TrackSnapshot",
    "to_jst",
]
