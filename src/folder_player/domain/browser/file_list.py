"""
Browsable file list.

The browser owns the ordered sequence of track descriptors for the current
directory. Other components read it through accessors and change it only
through the mutation methods below, never by editing descriptors in place.
"""

import os
from typing import Awaitable, Callable, Iterable, Optional

from loguru import logger

from .exceptions import BrowserError
from .models import TrackFile
from .scanner import list_directory

MetadataReader = Callable[[str], Awaitable[TrackFile]]


class FileBrowser:
    """Ordered, mutable list of track descriptors plus browsing state."""

    def __init__(
        self,
        supported_formats: list[str],
        read_metadata: Optional[MetadataReader] = None,
        show_file_name: bool = False,
    ):
        """
        Args:
            supported_formats: File extensions listed as tracks
            read_metadata: Coroutine resolving a path into a loaded descriptor
            show_file_name: Display file names instead of tag titles
        """
        if read_metadata is None:
            from .metadata import read_track

            read_metadata = read_track

        self._supported_formats = [f.lower() for f in supported_formats]
        self._read_metadata = read_metadata
        self._files: list[TrackFile] = []
        self._index: dict[str, int] = {}
        self._directories: tuple[str, ...] = ()
        self._current_path = ""
        self._selected_entries: tuple[str, ...] = ()
        self._selected_directory = ""
        self._show_file_name = show_file_name
        self._is_reading_metadata = False
        self._is_scroll_required = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def files(self) -> tuple[TrackFile, ...]:
        return tuple(self._files)

    @property
    def directories(self) -> tuple[str, ...]:
        return self._directories

    @property
    def current_path(self) -> str:
        return self._current_path

    @property
    def selected_entries(self) -> tuple[str, ...]:
        return self._selected_entries

    @property
    def selected_directory(self) -> str:
        return self._selected_directory

    @property
    def show_file_name(self) -> bool:
        return self._show_file_name

    @property
    def is_reading_metadata(self) -> bool:
        return self._is_reading_metadata

    @property
    def is_scroll_required(self) -> bool:
        return self._is_scroll_required

    @property
    def generation(self) -> int:
        """Incremented every time the file sequence is replaced."""
        return self._generation

    def __len__(self) -> int:
        return len(self._files)

    def find(self, path: str) -> Optional[TrackFile]:
        """Look up a descriptor by path."""
        index = self._index.get(path)
        return self._files[index] if index is not None else None

    def index_of(self, path: str) -> Optional[int]:
        """Get the 0-based position of a path, or None if not listed."""
        return self._index.get(path)

    # ------------------------------------------------------------------
    # Shuffle flags
    # ------------------------------------------------------------------

    def set_played_in_shuffle(self, path: str, played: bool) -> bool:
        """Set the played-in-shuffle flag of one descriptor.

        Returns:
            False if the path is not in the current list (nothing changed)
        """
        index = self._index.get(path)
        if index is None:
            return False
        self._files[index] = self._files[index]._replace(is_played_in_shuffle=played)
        return True

    def reset_shuffle(self) -> None:
        """Clear the played-in-shuffle flag on every descriptor."""
        self._files = [
            f._replace(is_played_in_shuffle=False) if f.is_played_in_shuffle else f
            for f in self._files
        ]

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def replace_files(
        self, files: Iterable[TrackFile], directories: Iterable[str] = ()
    ) -> None:
        """Replace the whole listing (directory change)."""
        self._files = []
        self._index = {}
        for track in files:
            if track.path in self._index:
                logger.warning(f"Duplicate path in listing ignored: {track.path}")
                continue
            self._index[track.path] = len(self._files)
            self._files.append(track)
        self._directories = tuple(directories)
        self._selected_entries = ()
        self._generation += 1

    def open_directory(self, *paths: str) -> None:
        """Join path parts, list the directory and make it current.

        Raises:
            DirectoryUnavailableError: If the directory cannot be listed
        """
        if not paths:
            raise BrowserError("No directory given")

        directory = os.path.normpath(os.path.join(*paths))
        listing = list_directory(directory, self._supported_formats)

        self.replace_files(listing.files, listing.directories)
        self._current_path = listing.path
        self._selected_directory = ""
        self._is_scroll_required = True
        logger.info(f"Opened directory: {listing.path} ({len(listing.files)} tracks)")

    def select_directory(self, directory: str) -> None:
        self._selected_directory = directory

    def set_selection(self, paths: Iterable[str]) -> None:
        """Select listed files; unknown paths are dropped."""
        self._selected_entries = tuple(p for p in paths if p in self._index)

    def toggle_show_file_name(self) -> None:
        self._show_file_name = not self._show_file_name

    def scrolled(self) -> None:
        self._is_scroll_required = False

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def attach_metadata(self, track: TrackFile) -> bool:
        """Attach a loaded descriptor's metadata to the listed one.

        Idempotent: ignored if the listed descriptor is already loaded or the
        path is no longer listed. The shuffle flag of the listed descriptor
        is kept.

        Returns:
            True if metadata was attached
        """
        index = self._index.get(track.path)
        if index is None:
            return False

        current = self._files[index]
        if current.is_metadata_loaded:
            return False

        self._files[index] = current._replace(
            metadata=track.metadata,
            is_metadata_loaded=True,
            size=track.size or current.size,
            modified=track.modified if track.modified is not None else current.modified,
        )
        return True

    async def load_metadata(self) -> int:
        """Resolve metadata for every listed descriptor not yet loaded.

        Failures for single files are logged and skipped. Results arriving
        after the listing was replaced are discarded.

        Returns:
            Number of descriptors that received metadata
        """
        if self._is_reading_metadata:
            return 0

        generation = self._generation
        pending = [f.path for f in self._files if not f.is_metadata_loaded]
        if not pending:
            return 0

        self._is_reading_metadata = True
        loaded = 0
        try:
            for path in pending:
                try:
                    track = await self._read_metadata(path)
                except BrowserError as e:
                    logger.warning(f"Skipping metadata for {path}: {e}")
                    continue

                if self._generation != generation:
                    logger.debug("Listing replaced while reading metadata, stopping")
                    break

                if self.attach_metadata(track):
                    loaded += 1
        finally:
            self._is_reading_metadata = False

        logger.debug(f"Metadata loaded for {loaded} of {len(pending)} tracks")
        return loaded
