"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, the message is kept as an attribute so handlers can log it
    # without parsing str(exception). Don't raise this base class directly.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when the redirect URI cannot be parsed or carries no port, so the
    callback listener has nowhere to bind.

    Example:
        raise ConfigurationError("SPOTIFY_REDIRECT_URI has no port")
    """

    pass


class AuthenticationError(DomainException):
    """Spotify authorization could not produce a usable client.

    Covers a failed code exchange, a rejected refresh token, a state mismatch
    on the callback, missing client credentials and an expired wait for the
    browser callback.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code  # e.g. "invalid_grant"
        self.http_status = http_status

    @property
    def requires_reauth(self) -> bool:
        """Check if the refresh token itself is dead."""
        return self.error_code == "invalid_grant" or self.http_status in (401, 403)


class ExternalServiceError(DomainException):
    """The Spotify Web API call failed or returned something unusable.

    Example:
        raise ExternalServiceError("Spotify API error: 503 Service Unavailable")
    """

    def __init__(self, message: str, http_status: int | None = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class SerializationError(DomainException):
    """A track snapshot could not be encoded as JSON."""

    pass


__all__ = [
    "DomainException",
    "ConfigurationError",
    "AuthenticationError",
    "ExternalServiceError",
    "SerializationError",
]
