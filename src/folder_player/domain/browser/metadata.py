"""
Track metadata extraction.

Reads tags and stream information from audio files using Mutagen. This is
the metadata service the player resolves a path through before opening it.
"""

import asyncio
import os
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .exceptions import MetadataReadError
from .models import TrackFile, TrackMetadata


def get_tag_value(audio_file: Any, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
            if value:
                # Handle different formats
                if isinstance(value, list) and value:
                    first = value[0]
                    # MP4 track numbers come back as (number, total) tuples
                    if isinstance(first, tuple) and first:
                        return str(first[0])
                    return str(first)
                return str(value)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
    return None


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of "2021-05-01" or "3/12" style tags."""
    if not value:
        return None
    head = value.replace("/", "-").split("-")[0].strip()
    try:
        return int(head)
    except ValueError:
        return None


def extract_metadata_from_filename(local_path: str) -> TrackMetadata:
    """Extract basic info from filename as fallback."""
    path = Path(local_path)
    title = path.stem
    artist = None

    # Try to parse "Artist - Title" format
    if " - " in title:
        parts = title.split(" - ", 1)
        if len(parts) == 2:
            artist = parts[0].strip()
            title = parts[1].strip()

    return TrackMetadata(title=title, artist=artist, format=path.suffix.lower())


def extract_track_metadata(local_path: str) -> TrackMetadata:
    """Extract metadata from audio file using mutagen."""
    try:
        audio_file = MutagenFile(local_path)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read metadata from {local_path}: {e}")
        return extract_metadata_from_filename(local_path)

    if audio_file is None:
        # File couldn't be read by mutagen, use filename
        logger.debug(f"Unrecognised audio format, using filename: {local_path}")
        return extract_metadata_from_filename(local_path)

    # ID3 (MP3), MP4, and Vorbis/Opus tags (lowercase)
    title = get_tag_value(audio_file, ["TIT2", "\xa9nam", "TITLE", "title"])
    artist = get_tag_value(audio_file, ["TPE1", "\xa9ART", "ARTIST", "artist"])
    album = get_tag_value(audio_file, ["TALB", "\xa9alb", "ALBUM", "album"])
    genre = get_tag_value(audio_file, ["TCON", "\xa9gen", "GENRE", "genre"])
    year = _parse_int(
        get_tag_value(audio_file, ["TDRC", "\xa9day", "DATE", "YEAR", "date", "year"])
    )
    track_number = _parse_int(
        get_tag_value(audio_file, ["TRCK", "trkn", "TRACKNUMBER", "tracknumber"])
    )

    # Extract technical info
    duration = None
    bitrate = None
    if hasattr(audio_file, "info"):
        duration = getattr(audio_file.info, "length", None)
        bitrate = getattr(audio_file.info, "bitrate", None)

    # Fallback to filename if no title
    fallback = extract_metadata_from_filename(local_path)
    if not title:
        title = fallback.title
        artist = artist or fallback.artist

    return TrackMetadata(
        title=title,
        artist=artist,
        album=album,
        genre=genre,
        year=year,
        track_number=track_number,
        duration=duration,
        bitrate=bitrate,
        format=fallback.format,
    )


def build_track(local_path: str) -> TrackFile:
    """Build a fully loaded track descriptor for a path.

    Raises:
        MetadataReadError: If the path is not a readable regular file
    """
    try:
        stat = os.stat(local_path)
    except OSError as e:
        raise MetadataReadError(local_path, f"Cannot read metadata: {local_path} ({e})") from e

    if not os.path.isfile(local_path):
        raise MetadataReadError(local_path, f"Not a file: {local_path}")

    return TrackFile(
        path=local_path,
        name=Path(local_path).name,
        size=stat.st_size,
        modified=stat.st_mtime,
        metadata=extract_track_metadata(local_path),
        is_metadata_loaded=True,
    )


async def read_track(local_path: str) -> TrackFile:
    """Resolve a path into a track descriptor with metadata attached.

    File access runs in a worker thread so the event loop keeps serving
    UI commands and end-of-track notifications.
    """
    track = await asyncio.to_thread(build_track, local_path)
    logger.debug(f"Metadata resolved: {local_path}")
    return track
