"""Tests for environment-driven settings."""

import pytest

from nowplaying.config import ServerSettings, SpotifySettings


class TestSpotifySettings:
    """Test Spotify credential loading."""

    def test_reads_legacy_variable_names(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPOTIFY_ID", "abc")
        monkeypatch.setenv("SPOTIFY_SECRET", "shh")
        monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:9000/cb")
        monkeypatch.setenv("SPOTIFY_REFRESH_TOKEN", "refresh-me")

        settings = SpotifySettings(_env_file=None)

        assert settings.client_id == "abc"
        assert settings.client_secret == "shh"
        assert settings.redirect_uri == "http://127.0.0.1:9000/cb"
        assert settings.refresh_token == "refresh-me"
        assert settings.has_refresh_token is True
        assert settings.is_configured() is True

    def test_blank_refresh_token_counts_as_unset(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPOTIFY_REFRESH_TOKEN", "   ")
        monkeypatch.setenv("SPOTIFY_AUTH_TIMEOUT", "")

        settings = SpotifySettings(_env_file=None)

        assert settings.refresh_token is None
        assert settings.has_refresh_token is False
        assert settings.auth_timeout is None

    def test_auth_timeout_parsed_as_seconds(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPOTIFY_AUTH_TIMEOUT", "2.5")
        assert SpotifySettings(_env_file=None).auth_timeout == 2.5

    def test_not_configured_without_secret(self):
        settings = SpotifySettings(_env_file=None, client_id="abc", client_secret="")
        assert settings.is_configured() is False

    @pytest.mark.parametrize(
        ("redirect_uri", "expected"),
        [
            ("http://localhost:8888/callback", "/callback"),
            ("http://localhost:8888/auth/spotify", "/auth/spotify"),
            ("http://localhost:8888", "/callback"),
            ("http://localhost:8888/", "/callback"),
        ],
    )
    def test_callback_path(self, redirect_uri: str, expected: str):
        settings = SpotifySettings(_env_file=None, redirect_uri=redirect_uri)
        assert settings.callback_path == expected


class TestServerSettings:
    """Test main listener and CORS settings."""

    def test_default_port(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("BACK_PORT", raising=False)
        assert ServerSettings(_env_file=None).port == 1323

    def test_empty_port_falls_back_to_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BACK_PORT", "")
        assert ServerSettings(_env_file=None).port == 1323

    def test_port_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BACK_PORT", "8080")
        assert ServerSettings(_env_file=None).port == 8080

    def test_allowed_origins_wildcard(self):
        assert ServerSettings(_env_file=None, cors_origins="*").allowed_origins() == ["*"]

    def test_allowed_origins_comma_separated(self):
        settings = ServerSettings(
            _env_file=None, cors_origins="https://example.com, https://www.example.com,"
        )
        assert settings.allowed_origins() == [
            "https://example.com",
            "https://www.example.com",
        ]
