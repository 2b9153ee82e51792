"""
File browser domain models.

Contains the track descriptor handed around by the browser and the player.
"""

from pathlib import Path
from typing import NamedTuple, Optional


class TrackMetadata(NamedTuple):
    """Tag and stream information read from an audio file."""

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    track_number: Optional[int] = None
    duration: Optional[float] = None  # in seconds
    bitrate: Optional[int] = None
    format: Optional[str] = None


class TrackFile(NamedTuple):
    """A playable file listed in the browser.

    The path is the primary key within a browsing session. Descriptors are
    immutable; the browser replaces them with ``_replace`` when metadata is
    attached or the shuffle flag changes.
    """

    path: str
    name: str
    size: int = 0
    modified: Optional[float] = None  # mtime, seconds since epoch
    metadata: Optional[TrackMetadata] = None
    is_metadata_loaded: bool = False
    is_played_in_shuffle: bool = False


def track_from_path(path: str, size: int = 0, modified: Optional[float] = None) -> TrackFile:
    """Create a bare descriptor (no metadata yet) for a file path."""
    return TrackFile(path=path, name=Path(path).name, size=size, modified=modified)


def get_display_name(track: TrackFile, show_file_name: bool = False) -> str:
    """Get a display-friendly name for the track."""
    if show_file_name or not track.metadata:
        return track.name

    meta = track.metadata
    if meta.artist and meta.title:
        return f"{meta.artist} - {meta.title}"
    elif meta.title:
        return meta.title
    return Path(track.path).stem


def format_duration(seconds: Optional[float]) -> str:
    """Format a duration in seconds as MM:SS."""
    if seconds is None or seconds < 0:
        return "--:--"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
