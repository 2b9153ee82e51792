"""
Playback session state.

Transport status, active track and position as seen by the controller.
"""

from enum import Enum
from typing import NamedTuple, Optional

from folder_player.domain.browser.models import TrackFile


class TransportStatus(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackState(NamedTuple):
    """Immutable playback session state.

    ``active_track`` refers to a browser entry by its path; without one the
    status is always STOPPED and ``position`` carries no meaning.
    """

    status: TransportStatus = TransportStatus.STOPPED
    active_track: Optional[TrackFile] = None
    position: float = 0.0  # seconds
    shuffle: bool = False
    from_file_browser: bool = False

    @property
    def active_path(self) -> Optional[str]:
        return self.active_track.path if self.active_track else None
