"""Playback domain - audio engine integration and transport control.

This domain handles:
- The single-resource audio engine contract and its MPV implementation
- Player state (playing, paused, stopped)
- Shuffle mode and sequential playback over the browsed file list
"""

from .controller import PlaybackController
from .engine import AudioEngine, ResourceHandle
from .exceptions import EngineError, EngineUnavailableError, PlaybackError
from .mpv import MpvEngine, check_mpv_available
from .state import PlaybackState, TransportStatus

__all__ = [
    "PlaybackController",
    "AudioEngine",
    "ResourceHandle",
    "EngineError",
    "EngineUnavailableError",
    "PlaybackError",
    "MpvEngine",
    "check_mpv_available",
    "PlaybackState",
    "TransportStatus",
]
