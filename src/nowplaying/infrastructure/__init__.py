"""Infrastructure layer: Spotify HTTP clients, OAuth callback listener, observability."""
