"""OAuth callback listener and the one-shot client handoff."""

from nowplaying.infrastructure.oauth.callback_server import (
    CallbackListener,
    CallbackServer,
    FailureCallback,
    create_callback_app,
    start_callback_server,
)
from nowplaying.infrastructure.oauth.handoff import OneShotHandoff

__all__ = [
    "CallbackListener",
    "CallbackServer",
    "FailureCallback",
    "OneShotHandoff",
    "create_callback_app",
    "start_callback_server",
]
