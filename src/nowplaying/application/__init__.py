"""Application layer: authentication service and the track use cases."""
