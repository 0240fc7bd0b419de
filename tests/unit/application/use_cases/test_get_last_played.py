"""Tests for GetLastPlayedUseCase."""

import json

import pytest

from nowplaying.application.use_cases import GetLastPlayedUseCase
from nowplaying.domain.exceptions import ExternalServiceError


@pytest.mark.asyncio
async def test_played_at_in_jst(make_auth_service, fake_client, spotify_track):
    client = fake_client(
        recently_played={
            "items": [{"track": spotify_track(), "played_at": "2024-01-01T00:00:00Z"}]
        }
    )

    result = await GetLastPlayedUseCase(make_auth_service(client)).execute()

    assert result.body is not None
    assert json.loads(result.body) == {
        "imageUrl": "X",
        "playedAt": "2024-01-01 09:00:00",
        "trackName": "T",
        "trackUrl": "U",
        "albumName": "A",
        "albumUrl": "AU",
        "artistName": "AR",
        "artistUrl": "ARU",
    }
    assert client.limits == [1]
    assert client.closed is True


@pytest.mark.asyncio
async def test_empty_history_is_empty_not_error(make_auth_service, fake_client):
    client = fake_client(recently_played={"items": []})

    result = await GetLastPlayedUseCase(make_auth_service(client)).execute()

    assert result.body is None


@pytest.mark.asyncio
async def test_history_without_items_key_is_empty(make_auth_service, fake_client):
    client = fake_client(recently_played={"cursors": None})

    result = await GetLastPlayedUseCase(make_auth_service(client)).execute()

    assert result.body is None


@pytest.mark.asyncio
async def test_bad_timestamp_is_upstream_error(make_auth_service, fake_client, spotify_track):
    client = fake_client(
        recently_played={"items": [{"track": spotify_track(), "played_at": "yesterday"}]}
    )

    with pytest.raises(ExternalServiceError):
        await GetLastPlayedUseCase(make_auth_service(client)).execute()


@pytest.mark.asyncio
async def test_upstream_error_propagates(make_auth_service, fake_client):
    client = fake_client(error=ExternalServiceError("boom", http_status=502))

    with pytest.raises(ExternalServiceError):
        await GetLastPlayedUseCase(make_auth_service(client)).execute()


@pytest.mark.asyncio
async def test_non_object_external_urls_is_upstream_error(
    make_auth_service, fake_client, spotify_track
):
    track = spotify_track()
    track["album"]["external_urls"] = ["https://open.spotify.com/album/x"]
    client = fake_client(
        recently_played={"items": [{"track": track, "played_at": "2024-01-01T00:00:00Z"}]}
    )

    with pytest.raises(ExternalServiceError):
        await GetLastPlayedUseCase(make_auth_service(client)).execute()
