"""Configuration module for nowplaying."""

from .settings import (
    LoggingSettings,
    ServerSettings,
    Settings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "ServerSettings",
    "Settings",
    "SpotifySettings",
    "get_settings",
]
