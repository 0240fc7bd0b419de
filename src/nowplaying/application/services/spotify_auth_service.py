"""Spotify OAuth Authentication Service.

Hey future me - this is where every API request gets its SpotifyClient from.
There are two roads:

1. SPOTIFY_REFRESH_TOKEN is set (the normal case in production):
   build a token that ONLY has the refresh token and hand out a client. The
   client refreshes silently on its first API call. No listener, no waiting.

2. No refresh token (first run on a fresh machine):
   start the temporary callback listener on the redirect URI's port, log the
   authorization URL, and block until the operator has clicked through the
   Spotify consent page in a browser. The callback delivers exactly one client
   through a OneShotHandoff.

Nothing is cached between requests - every request authenticates again.
"""

import asyncio
import logging
import secrets
from collections.abc import Callable
from urllib.parse import urlparse

from fastapi import FastAPI

from nowplaying.config.settings import SpotifySettings
from nowplaying.domain.exceptions import AuthenticationError, ConfigurationError
from nowplaying.infrastructure.integrations.spotify_client import (
    OAuthToken,
    SpotifyClient,
    SpotifyOAuth,
)
from nowplaying.infrastructure.oauth.callback_server import (
    CallbackListener,
    FailureCallback,
    create_callback_app,
    start_callback_server,
)
from nowplaying.infrastructure.oauth.handoff import OneShotHandoff

logger = logging.getLogger(__name__)

STATE_BYTES = 11

ListenerFactory = Callable[[FastAPI, str, int, FailureCallback], CallbackListener]


def generate_state() -> str:
    """Random hex nonce that correlates the redirect with this handshake."""
    return secrets.token_hex(STATE_BYTES)


def get_port_from_uri(uri: str) -> str:
    """Return the port component of a redirect URI exactly as written.

    Raises:
        ConfigurationError: If the URI can't be parsed or has no explicit port
    """
    try:
        parsed = urlparse(uri)
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid SPOTIFY_REDIRECT_URI {uri!r}: {e}") from e

    if port is None:
        raise ConfigurationError(
            f"SPOTIFY_REDIRECT_URI {uri!r} has no port, "
            "e.g. http://localhost:8888/callback"
        )
    return parsed.netloc.rpartition(":")[2]


class SpotifyAuthService:
    """Produces an authenticated SpotifyClient for a single request."""

    def __init__(
        self,
        settings: SpotifySettings,
        *,
        listener_factory: ListenerFactory = start_callback_server,
        state_factory: Callable[[], str] = generate_state,
    ) -> None:
        """Initialize auth service.

        Args:
            settings: Spotify credentials and callback options
            listener_factory: Starts the callback listener (tests pass a fake)
            state_factory: Produces the per-handshake nonce
        """
        self.settings = settings
        self._listener_factory = listener_factory
        self._state_factory = state_factory

    async def authenticate(self) -> SpotifyClient:
        """Return a client bound to the operator's Spotify account.

        Raises:
            ConfigurationError: If the redirect URI has no usable port
            AuthenticationError: If no client can be built, the callback listener
                cannot start or the wait times out
        """
        if not self.settings.is_configured():
            logger.error("SPOTIFY_ID / SPOTIFY_SECRET are not configured")
            raise AuthenticationError("failed to create client: missing client credentials")

        oauth = SpotifyOAuth(self.settings)
        if self.settings.has_refresh_token:
            return self._client_from_refresh_token(oauth)
        return await self._client_from_browser(oauth)

    def _client_from_refresh_token(self, oauth: SpotifyOAuth) -> SpotifyClient:
        token = OAuthToken(token_type="bearer", refresh_token=self.settings.refresh_token)
        return SpotifyClient(oauth, token)

    async def _client_from_browser(self, oauth: SpotifyOAuth) -> SpotifyClient:
        try:
            port = get_port_from_uri(self.settings.redirect_uri)
        except ConfigurationError as e:
            logger.error(e.message)
            raise

        state = self._state_factory()
        handoff: OneShotHandoff[SpotifyClient] = OneShotHandoff()
        app = create_callback_app(
            state=state,
            oauth=oauth,
            handoff=handoff,
            callback_path=self.settings.callback_path,
        )
        listener = self._listener_factory(
            app, self.settings.callback_host, int(port), handoff.fail
        )

        logger.info(
            "Spotify authorization required, open this URL in a browser: %s",
            oauth.get_authorization_url(state),
        )

        try:
            return await handoff.wait(self.settings.auth_timeout)
        except TimeoutError as e:
            logger.error(
                "No Spotify authorization within %ss", self.settings.auth_timeout
            )
            raise AuthenticationError("Timed out waiting for Spotify authorization") from e
        finally:
            await asyncio.to_thread(listener.stop)
