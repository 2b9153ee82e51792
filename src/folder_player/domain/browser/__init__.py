"""Browser domain - directory listing, track descriptors and metadata.

This domain handles:
- Listing a directory's sub-directories and audio files
- The browsable file list (ordering, selection, shuffle flags)
- Lazy metadata extraction via Mutagen
"""

from .exceptions import BrowserError, DirectoryUnavailableError, MetadataReadError
from .file_list import FileBrowser
from .metadata import extract_track_metadata, read_track
from .models import TrackFile, TrackMetadata, format_duration, get_display_name
from .scanner import DirectoryListing, list_directory

__all__ = [
    "BrowserError",
    "DirectoryUnavailableError",
    "MetadataReadError",
    "FileBrowser",
    "extract_track_metadata",
    "read_track",
    "TrackFile",
    "TrackMetadata",
    "format_duration",
    "get_display_name",
    "DirectoryListing",
    "list_directory",
]
