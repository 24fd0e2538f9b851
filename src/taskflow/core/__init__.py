"""Shared building blocks: Storage Port protocol, error types, app state."""
