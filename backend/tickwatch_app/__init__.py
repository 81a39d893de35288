"""Application layer: settings, condition overrides, signal sinks and CLI."""
