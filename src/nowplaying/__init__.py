"""nowplaying - reports the current and last played Spotify track over HTTP."""

__version__ = "0.1.0"
