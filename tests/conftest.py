"""Shared fixtures: an in-memory audio engine and a populated file browser."""

from typing import Optional

import pytest

from folder_player.domain.browser.exceptions import MetadataReadError
from folder_player.domain.browser.file_list import FileBrowser
from folder_player.domain.browser.models import TrackFile, TrackMetadata, track_from_path
from folder_player.domain.playback.controller import PlaybackController
from folder_player.domain.playback.engine import AudioEngine, ResourceHandle
from folder_player.domain.playback.exceptions import EngineError


class FakeEngine(AudioEngine):
    """Audio engine that records calls instead of playing audio."""

    def __init__(self, scheme: str = "file://"):
        super().__init__(scheme=scheme)
        self.calls: list[tuple] = []
        self.playing = False
        self.current_position = 0.0
        self.fail_bind = False

    def _bind(self, handle: ResourceHandle) -> None:
        if self.fail_bind:
            raise EngineError(f"cannot load {handle.url}")
        self.calls.append(("bind", handle.url))
        self.playing = False
        self.current_position = 0.0

    def _release(self, handle: ResourceHandle) -> None:
        self.calls.append(("release", handle.url))
        self.playing = False

    def play(self) -> bool:
        self.calls.append(("play",))
        self.playing = self.is_loaded
        return self.is_loaded

    def pause(self) -> bool:
        self.calls.append(("pause",))
        self.playing = False
        return self.is_loaded

    def stop(self) -> bool:
        self.calls.append(("stop",))
        self.playing = False
        self.current_position = 0.0
        return self.is_loaded

    def seek(self, position: Optional[float] = None) -> Optional[float]:
        if not self.is_loaded:
            return None
        if position is not None:
            self.calls.append(("seek", position))
            self.current_position = position
        return self.current_position

    def finish(self) -> None:
        """Simulate the bound resource reaching its end."""
        self._notify_end(self._handle)

    def bound_urls(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "bind"]


class FakeMetadataReader:
    """Metadata service resolving paths without touching the disk."""

    def __init__(self):
        self.missing: set[str] = set()
        self.calls: list[str] = []

    async def __call__(self, path: str) -> TrackFile:
        self.calls.append(path)
        if path in self.missing:
            raise MetadataReadError(path)
        name = path.rsplit("/", 1)[-1]
        return TrackFile(
            path=path,
            name=name,
            size=1000,
            metadata=TrackMetadata(title=name.rsplit(".", 1)[0], duration=180.0),
            is_metadata_loaded=True,
        )


TRACK_PATHS = ["/music/A.mp3", "/music/B.mp3", "/music/C.mp3"]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def reader() -> FakeMetadataReader:
    return FakeMetadataReader()


@pytest.fixture
def browser(reader) -> FileBrowser:
    browser = FileBrowser(supported_formats=[".mp3"], read_metadata=reader)
    browser.replace_files([track_from_path(p) for p in TRACK_PATHS])
    return browser


@pytest.fixture
def controller(engine, browser, reader) -> PlaybackController:
    return PlaybackController(engine, browser, read_metadata=reader)
