"""Playback exceptions."""


class PlaybackError(Exception):
    """Base exception for playback operations."""

    pass


class EngineError(PlaybackError):
    """Raised when the audio engine rejects a command."""

    pass


class EngineUnavailableError(EngineError):
    """Raised when the audio engine is not installed or not running."""

    pass
