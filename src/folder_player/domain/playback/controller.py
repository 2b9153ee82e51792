"""
Playback controller.

Owns the transport state machine (stopped/playing/paused), the active track
and shuffle mode, and drives the audio engine from the browser's file list.

Everything runs on one asyncio event loop. The only suspension point is
metadata resolution inside ``open()``; overlapping opens simply complete in
arrival order and the last one to finish owns the active-track slot.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional

from loguru import logger

from folder_player.domain.browser.file_list import FileBrowser
from folder_player.domain.browser.models import TrackFile

from .engine import AudioEngine
from .state import PlaybackState, TransportStatus

MetadataReader = Callable[[str], Awaitable[TrackFile]]


class PlaybackController:
    """Coordinates the audio engine, the file browser and playback state."""

    def __init__(
        self,
        engine: AudioEngine,
        browser: FileBrowser,
        read_metadata: Optional[MetadataReader] = None,
        shuffle: bool = False,
    ):
        if read_metadata is None:
            from folder_player.domain.browser.metadata import read_track

            read_metadata = read_track

        self._engine = engine
        self._browser = browser
        self._read_metadata = read_metadata
        self._state = PlaybackState(shuffle=shuffle)
        self._opened_generation = browser.generation
        self._pending_advances: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def status(self) -> TransportStatus:
        return self._state.status

    @property
    def active_track(self) -> Optional[TrackFile]:
        return self._state.active_track

    @property
    def position(self) -> float:
        return self._state.position

    @property
    def shuffle(self) -> bool:
        return self._state.shuffle

    @property
    def is_stale(self) -> bool:
        """True if the active track vanished because the listing was replaced."""
        track = self._state.active_track
        if track is None or self._browser.generation == self._opened_generation:
            return False
        return self._browser.find(track.path) is None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def open(self, path: str, auto_play: bool = False) -> None:
        """Resolve a track and make it the active one.

        Metadata resolution errors propagate to the caller with the
        current playback left untouched.
        """
        track = await self._read_metadata(path)

        self.stop()

        self._browser.attach_metadata(track)
        self._state = self._state._replace(active_track=track, from_file_browser=True)
        self._opened_generation = self._browser.generation
        self._browser.set_played_in_shuffle(track.path, self._state.shuffle)
        logger.info(f"Opened track: {track.path}")

        if auto_play:
            await self.play_pause()

    async def play_pause(self) -> None:
        """Toggle between playing and paused, starting from the list if idle."""
        if self._stop_if_stale():
            return

        state = self._state
        if state.active_track is None:
            await self.play_next()
            return

        if state.status is TransportStatus.PLAYING:
            self._engine.pause()
            self._state = state._replace(status=TransportStatus.PAUSED)
            logger.debug("Playback paused")
            return

        if state.status is TransportStatus.STOPPED:
            self._load_active_track()

        self._engine.play()
        self._state = self._state._replace(status=TransportStatus.PLAYING)
        logger.debug(f"Playing: {state.active_track.path}")

    def stop(self) -> None:
        """Release the engine resource and clear the active track."""
        self._engine.unload()
        if self._state.active_track is not None:
            logger.debug(f"Stopped: {self._state.active_track.path}")
        self._state = self._state._replace(
            active_track=None,
            status=TransportStatus.STOPPED,
            position=0.0,
        )

    def seek(self, position: float) -> None:
        """Jump to a position in seconds; ignored when nothing is loaded."""
        if self._stop_if_stale() or not self._engine.is_loaded:
            return

        result = self._engine.seek(position)
        if result is None:
            return
        self._state = self._state._replace(position=result)

    def update_position(self) -> None:
        """Copy the engine's current position into the session state.

        Meant to be called from a timer owned by the caller.
        """
        if self._stop_if_stale():
            return

        position = self._engine.seek()
        if position is None:
            return
        self._state = self._state._replace(position=position)

    def toggle_shuffle(self) -> None:
        """Flip shuffle mode and start a fresh shuffle pass."""
        shuffle = not self._state.shuffle
        self._browser.reset_shuffle()
        self._state = self._state._replace(shuffle=shuffle)

        # The playing track counts as already played in the new pass
        track = self._state.active_track
        if shuffle and track is not None:
            self._browser.set_played_in_shuffle(track.path, True)

        logger.info(f"Shuffle {'on' if shuffle else 'off'}")

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    async def play_next(self) -> None:
        """Open and play the next track, or stop if there is none."""
        files = self._browser.files
        active = self._state.active_track
        track_to_play: Optional[TrackFile] = None

        if self._state.shuffle:
            remaining = [f for f in files if not f.is_played_in_shuffle]
            if not remaining:
                logger.debug("Shuffle pass exhausted")
                self._browser.reset_shuffle()
            else:
                track_to_play = random.choice(remaining)
        elif files:
            if active is None:
                track_to_play = files[0]
            else:
                index = self._browser.index_of(active.path)
                next_index = index + 1 if index is not None else 0
                if next_index < len(files):
                    track_to_play = files[next_index]

        if track_to_play is not None:
            await self.open(track_to_play.path, auto_play=True)
        else:
            self.stop()

    async def play_prev(self) -> None:
        """Open and play the previous track, or stop if there is none.

        In shuffle mode there is no history: the current track becomes
        eligible again and another unplayed track is picked at random.
        """
        files = self._browser.files
        active = self._state.active_track
        track_to_play: Optional[TrackFile] = None

        if self._state.shuffle:
            if active is not None:
                self._browser.set_played_in_shuffle(active.path, False)
            await self.play_next()
            return

        if files:
            if active is None:
                track_to_play = files[0]
            else:
                index = self._browser.index_of(active.path)
                if index is not None and index - 1 >= 0:
                    track_to_play = files[index - 1]

        if track_to_play is not None:
            await self.open(track_to_play.path, auto_play=True)
        else:
            self.stop()

    # ------------------------------------------------------------------
    # End-of-track handling
    # ------------------------------------------------------------------

    async def wait_pending(self) -> None:
        """Wait until scheduled end-of-track advances have finished."""
        while self._pending_advances:
            await asyncio.gather(*self._pending_advances, return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in self._pending_advances:
            task.cancel()

    def _load_active_track(self) -> None:
        track = self._state.active_track
        self._engine.load(track.path)
        self._engine.on_end(self._on_track_end)
        self._state = self._state._replace(position=0.0)

    def _on_track_end(self) -> None:
        """Queue one advance on the event loop for a finished track."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("End of track reported outside the event loop, ignoring")
            return

        task = loop.create_task(self.play_next())
        self._pending_advances.add(task)
        task.add_done_callback(self._on_advance_done)

    def _on_advance_done(self, task: asyncio.Task) -> None:
        self._pending_advances.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error("Advancing to the next track failed")

    def _stop_if_stale(self) -> bool:
        if not self.is_stale:
            return False
        logger.warning(
            f"Active track no longer listed, stopping: {self._state.active_track.path}"
        )
        self.stop()
        return True
