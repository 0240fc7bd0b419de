"""Application settings loaded from the process environment.

Every group reads its own variables (and an optional ``.env`` file). The
variable names are the ones existing deployments already export, e.g.
SPOTIFY_ID / SPOTIFY_SECRET / BACK_PORT.
"""

from functools import lru_cache
from typing import Any
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = ".env"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SpotifySettings(BaseSettings):
    """Spotify OAuth credentials and callback listener options."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    client_id: str = Field(default="", alias="SPOTIFY_ID")
    client_secret: str = Field(default="", alias="SPOTIFY_SECRET")
    redirect_uri: str = Field(
        default="http://localhost:8888/callback", alias="SPOTIFY_REDIRECT_URI"
    )
    refresh_token: str | None = Field(default=None, alias="SPOTIFY_REFRESH_TOKEN")

    # Hey future me - None means "wait for the browser forever", which is what the
    # service always did. Set SPOTIFY_AUTH_TIMEOUT if a hanging request bothers you.
    auth_timeout: float | None = Field(default=None, alias="SPOTIFY_AUTH_TIMEOUT")
    callback_host: str = Field(
        default="0.0.0.0",  # nosec B104 - the browser may live on another machine
        alias="SPOTIFY_CALLBACK_HOST",
    )

    @field_validator("refresh_token", "auth_timeout", mode="before")
    @classmethod
    def _empty_is_unset(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token)

    @property
    def callback_path(self) -> str:
        """Path component of the redirect URI, ``/callback`` when absent."""
        path = urlparse(self.redirect_uri).path
        return path if path and path != "/" else "/callback"

    def is_configured(self) -> bool:
        """Check that client id and secret are both present."""
        return bool(self.client_id.strip() and self.client_secret.strip())


class ServerSettings(BaseSettings):
    """Main HTTP listener and CORS options."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0", alias="BACK_HOST")  # nosec B104
    port: int = Field(default=1323, alias="BACK_PORT")
    cors_enabled: bool = Field(default=False, alias="CORS_ENABLED")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    @field_validator("port", mode="before")
    @classmethod
    def _default_port(cls, value: Any) -> Any:
        # BACK_PORT="" behaves like an unset variable
        return 1323 if _blank_to_none(value) is None else value

    def allowed_origins(self) -> list[str]:
        """Split CORS_ORIGINS into a list (``["*"]`` allows everything)."""
        value = self.cors_origins.strip()
        if value == "*":
            return ["*"]
        return [origin.strip() for origin in value.split(",") if origin.strip()]


class LoggingSettings(BaseSettings):
    """Log level and output format."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    json_format: bool = Field(default=False, alias="LOG_JSON")


class Settings(BaseSettings):
    """Top level settings object handed to the app factory."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "nowplaying"
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Credentials never change while the process runs, so one instance is enough.
# Tests should override the FastAPI dependency instead of clearing this cache.
@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
