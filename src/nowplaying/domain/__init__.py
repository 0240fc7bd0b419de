"""Domain layer: track snapshots and exceptions."""
