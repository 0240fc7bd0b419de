"""Temporary HTTP listener that receives Spotify's OAuth redirect.

Hey future me - this only runs during the interactive first-run handshake
(no SPOTIFY_REFRESH_TOKEN configured). It binds the port from
SPOTIFY_REDIRECT_URI, waits for the browser to come back with ?code=&state=,
swaps the code for tokens and hands an authenticated SpotifyClient over to
whoever is blocked in SpotifyAuthService.authenticate().

It gets its own uvicorn server + event loop in a daemon thread so it never
touches the main app's loop or signal handlers.
"""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import Protocol

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from nowplaying.domain.exceptions import AuthenticationError
from nowplaying.infrastructure.integrations.spotify_client import (
    SpotifyClient,
    SpotifyOAuth,
)
from nowplaying.infrastructure.oauth.handoff import OneShotHandoff

logger = logging.getLogger(__name__)

STOP_JOIN_TIMEOUT = 5.0

FailureCallback = Callable[[BaseException], None]


def create_callback_app(
    *,
    state: str,
    oauth: SpotifyOAuth,
    handoff: OneShotHandoff[SpotifyClient],
    callback_path: str = "/callback",
) -> FastAPI:
    """Build the two-route app served by the callback listener.

    Args:
        state: Nonce that the redirect must echo back
        oauth: Token endpoint client used for the code exchange
        handoff: Slot the authenticated client is delivered to
        callback_path: Path of the redirect URI

    Returns:
        FastAPI app with ``/`` (no-op landing page) and ``callback_path``
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    # Spotify's dashboard wants the bare origin to answer too
    @app.get("/")
    async def landing() -> Response:
        return Response(status_code=200)

    async def callback(request: Request) -> Response:
        params = request.query_params

        # State first: a foreign redirect must never burn our code exchange.
        if params.get("state") != state:
            logger.warning("OAuth callback state mismatch, ignoring redirect")
            return PlainTextResponse("404 page not found", status_code=404)

        if params.get("error"):
            logger.error("Spotify denied authorization: %s", params.get("error"))
            return PlainTextResponse("failed to get token", status_code=500)

        code = params.get("code")
        if not code:
            logger.error("OAuth callback without authorization code")
            return PlainTextResponse("failed to get token", status_code=500)

        try:
            token = await oauth.exchange_code(code)
        except AuthenticationError as e:
            logger.error("Spotify code exchange failed: %s", e.message)
            return PlainTextResponse("failed to get token", status_code=500)

        if not handoff.deliver(SpotifyClient(oauth, token)):
            return PlainTextResponse("authorization already completed", status_code=409)

        logger.info("Spotify authorization completed")
        message = "Spotify authorization completed. You can close this window."
        if token.refresh_token:
            message += (
                "\n\nSet SPOTIFY_REFRESH_TOKEN to skip this step on the next start:\n"
                f"{token.refresh_token}"
            )
        return PlainTextResponse(message)

    app.add_api_route(callback_path, callback, methods=["GET"])
    return app


class CallbackListener(Protocol):
    """Something that serves the callback app until told to stop."""

    def start(self) -> None: ...

    def stop(self) -> None: ...


class CallbackServer:
    """uvicorn server for the callback app running in a daemon thread."""

    def __init__(
        self,
        app: FastAPI,
        host: str,
        port: int,
        on_failure: FailureCallback | None = None,
    ) -> None:
        """Initialize the listener.

        Args:
            app: App built by create_callback_app()
            host: Interface to bind
            port: Port from the redirect URI
            on_failure: Called with an AuthenticationError if the listener
                cannot start, so whoever waits on the callback stops waiting
        """
        self.host = host
        self.port = port
        self._on_failure = on_failure
        self._server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=host,
                port=port,
                log_level="warning",
                access_log=False,
                lifespan="off",
            )
        )
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start serving in the background."""
        self._thread = threading.Thread(
            target=self._serve,
            name=f"oauth-callback-{self.port}",
            daemon=True,
        )
        self._thread.start()
        logger.info("OAuth callback listener started on %s:%s", self.host, self.port)

    # Hey future me - stop() blocks until the port is released (or the join times
    # out), so the next handshake right after this one can bind it again. Call it
    # off the event loop, see SpotifyAuthService.
    def stop(self) -> None:
        """Ask the server to exit and wait for the thread to wind down."""
        self._server.should_exit = True
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=STOP_JOIN_TIMEOUT)

    def _serve(self) -> None:
        try:
            asyncio.run(self._server.serve())
        except SystemExit:
            # uvicorn exits instead of raising when the port is taken
            logger.error("OAuth callback listener could not bind port %s", self.port)
            self._report_failure(f"could not bind port {self.port}")
        except OSError as e:
            logger.exception("OAuth callback listener on port %s failed", self.port)
            self._report_failure(f"failed on port {self.port}: {e}")

    def _report_failure(self, reason: str) -> None:
        if self._on_failure is not None:
            self._on_failure(
                AuthenticationError(f"OAuth callback listener could not start: {reason}")
            )


def start_callback_server(
    app: FastAPI,
    host: str,
    port: int,
    on_failure: FailureCallback | None = None,
) -> CallbackListener:
    """Default listener factory used by SpotifyAuthService."""
    server = CallbackServer(app, host, port, on_failure=on_failure)
    server.start()
    return server
