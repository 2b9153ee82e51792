"""
Directory listing for the file browser.

Lists one directory level: sub-directories to navigate into and the
supported audio files to play.
"""

from pathlib import Path
from typing import NamedTuple

from loguru import logger

from .exceptions import DirectoryUnavailableError
from .models import TrackFile, track_from_path


class DirectoryListing(NamedTuple):
    """Contents of a single directory."""

    path: str
    directories: tuple[str, ...]
    files: tuple[TrackFile, ...]


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported."""
    return local_path.suffix.lower() in supported_formats


def list_directory(directory: str, supported_formats: list[str]) -> DirectoryListing:
    """List sub-directories and supported audio files of a directory.

    Hidden entries are skipped. Both lists are sorted by name, ignoring case.
    File descriptors come back without metadata; it is loaded lazily.

    Args:
        directory: Directory to list
        supported_formats: Lowercase file extensions including the dot

    Returns:
        DirectoryListing for the resolved directory

    Raises:
        DirectoryUnavailableError: If the directory is missing or unreadable
    """
    root = Path(directory).expanduser()
    if not root.is_dir():
        raise DirectoryUnavailableError(str(root))

    directories = []
    files = []

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name.lower())
    except PermissionError as e:
        raise DirectoryUnavailableError(str(root), f"Permission denied accessing: {root}") from e
    except OSError as e:
        raise DirectoryUnavailableError(str(root), f"Error listing {root}: {e}") from e

    for entry in entries:
        if entry.name.startswith("."):
            continue

        try:
            if entry.is_dir():
                directories.append(str(entry))
            elif entry.is_file() and is_supported_format(entry, supported_formats):
                stat = entry.stat()
                files.append(track_from_path(str(entry), stat.st_size, stat.st_mtime))
        except OSError as e:
            # Broken symlinks and races with deletion
            logger.debug(f"Skipping {entry}: {e}")

    logger.debug(f"Listed {root}: {len(directories)} directories, {len(files)} files")
    return DirectoryListing(path=str(root), directories=tuple(directories), files=tuple(files))
