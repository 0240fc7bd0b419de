"""Spotify HTTP clients: OAuth token endpoint and the authenticated Web API client."""

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, cast
from urllib.parse import urlencode

import httpx

from nowplaying.config.settings import SpotifySettings
from nowplaying.domain.exceptions import AuthenticationError, ExternalServiceError

logger = logging.getLogger(__name__)

# Refresh a little before Spotify says the token dies, clocks drift.
EXPIRY_MARGIN_SECONDS = 60.0


@dataclass(frozen=True)
class OAuthToken:
    """Access/refresh token pair.

    A token built from SPOTIFY_REFRESH_TOKEN has no access token at all; the
    client refreshes it silently before its first API call.
    """

    access_token: str | None = None
    token_type: str = "bearer"
    refresh_token: str | None = None
    expires_at: float | None = None
    scope: str | None = None

    @classmethod
    def from_token_response(
        cls, payload: dict[str, Any], *, now: float | None = None
    ) -> "OAuthToken":
        """Convert Spotify's token endpoint JSON into an OAuthToken."""
        now_ts = time.time() if now is None else now
        expires_in = payload.get("expires_in")
        return cls(
            access_token=payload.get("access_token"),
            token_type=str(payload.get("token_type", "bearer")),
            refresh_token=payload.get("refresh_token"),
            expires_at=now_ts + float(expires_in) if expires_in is not None else None,
            scope=payload.get("scope"),
        )

    def is_valid(self, *, now: float | None = None) -> bool:
        """True if the access token exists and is not about to expire."""
        if not self.access_token:
            return False
        if self.expires_at is None:
            return True
        now_ts = time.time() if now is None else now
        return now_ts < self.expires_at - EXPIRY_MARGIN_SECONDS


class SpotifyOAuth:
    """Authorization-code and refresh-token grants against accounts.spotify.com."""

    AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    TOKEN_URL = "https://accounts.spotify.com/api/token"  # nosec B105 - public endpoint URL

    # Kept as the app registration originally requested them. Spotify documents
    # user-read-currently-playing and user-read-recently-played for the player
    # endpoints, so a token granted with only these may get a 401 there.
    SCOPES = (
        "user-follow-read",
        "user-follow-modify",
        "user-library-read",
        "user-library-modify",
    )

    def __init__(self, settings: SpotifySettings) -> None:
        self.settings = settings

    def get_authorization_url(self, state: str) -> str:
        """Build the URL the operator opens in a browser to grant access."""
        params = {
            "client_id": self.settings.client_id,
            "response_type": "code",
            "redirect_uri": self.settings.redirect_uri,
            "scope": " ".join(self.SCOPES),
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthToken:
        """Exchange an authorization code for an access/refresh token pair.

        Raises:
            AuthenticationError: If Spotify rejects the code or is unreachable
        """
        payload = await self._post_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
            }
        )
        token = OAuthToken.from_token_response(payload)
        if not token.access_token:
            raise AuthenticationError("Spotify token exchange returned no access_token")
        return token

    async def refresh(self, token: OAuthToken) -> OAuthToken:
        """Get a fresh access token for ``token.refresh_token``.

        Spotify usually omits refresh_token on refresh - we keep the old one then.

        Raises:
            AuthenticationError: If the refresh token is missing, revoked or rejected
        """
        if not token.refresh_token:
            raise AuthenticationError("No refresh token available to renew access")

        payload = await self._post_token(
            {"grant_type": "refresh_token", "refresh_token": token.refresh_token}
        )
        refreshed = OAuthToken.from_token_response(payload)
        if not refreshed.access_token:
            raise AuthenticationError("Spotify token refresh returned no access_token")
        if not refreshed.refresh_token:
            refreshed = replace(refreshed, refresh_token=token.refresh_token)

        logger.debug("Refreshed Spotify access token")
        return refreshed

    # Hey future me - one short-lived AsyncClient per call on purpose! The code
    # exchange runs on the callback listener's event loop (other thread), the
    # refresh on the request loop. A shared client would be bound to one of them.
    async def _post_token(self, form: dict[str, str]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    data=form,
                    auth=(self.settings.client_id, self.settings.client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Spotify token request failed: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            error_code = body.get("error") if isinstance(body, dict) else None
            raise AuthenticationError(
                f"Spotify token request failed (HTTP {response.status_code}): "
                f"{response.text}",
                error_code=error_code,
                http_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthenticationError(
                f"Spotify token response was not JSON: {response.text}"
            ) from e
        if not isinstance(payload, dict):
            raise AuthenticationError(
                f"Spotify token response was not an object: {payload}"
            )
        return payload


class SpotifyClient:
    """Authenticated Spotify Web API client bound to one token.

    Lives for exactly one API request of ours. Use it as an async context
    manager so the HTTP connection pool gets closed.
    """

    API_BASE_URL = "https://api.spotify.com/v1"

    def __init__(self, oauth: SpotifyOAuth, token: OAuthToken) -> None:
        self.oauth = oauth
        self._token = token
        self._client: httpx.AsyncClient | None = None

    @property
    def token(self) -> OAuthToken:
        return self._token

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _access_token(self) -> str:
        if not self._token.is_valid():
            self._token = await self.oauth.refresh(self._token)
        return cast(str, self._token.access_token)

    async def _api_get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """GET an API path, translating transport and status failures.

        Raises:
            AuthenticationError: If the silent refresh fails
            ExternalServiceError: On network errors or non-2xx responses
        """
        access_token = await self._access_token()
        client = await self._get_client()
        url = f"{self.API_BASE_URL}{path}"

        try:
            response = await client.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Spotify API request failed: {url}: {e}") from e

        if response.status_code >= 400:
            raise ExternalServiceError(
                f"Spotify API error (HTTP {response.status_code}) for {url}: "
                f"{response.text}",
                http_status=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"Spotify API returned invalid JSON: {response.text[:200]}"
            ) from e
        if not isinstance(payload, dict):
            raise ExternalServiceError("Spotify API returned a non-object payload")
        return payload

    async def get_currently_playing(self, limit: int = 1) -> dict[str, Any] | None:
        """Get the user's currently playing context.

        Returns:
            The currently-playing object, or None when nothing is playing
            (Spotify answers 204 with an empty body then)
        """
        response = await self._api_get(
            "/me/player/currently-playing", params={"limit": limit}
        )
        if response.status_code == 204 or not response.content:
            return None
        return self._json(response)

    async def get_recently_played(self, limit: int = 1) -> dict[str, Any]:
        """Get the user's play history, newest first.

        Returns:
            Paging object whose ``items`` hold ``{"track": ..., "played_at": ...}``
        """
        response = await self._api_get(
            "/me/player/recently-played", params={"limit": limit}
        )
        return self._json(response)

    async def __aenter__(self) -> "SpotifyClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
