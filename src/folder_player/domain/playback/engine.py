"""
Audio engine adapter contract.

An engine owns exactly one playable resource at a time. Loading always
releases the previous resource before binding the next one, and the
end-of-track listener is detached before a resource is released, so a stale
resource can never report that it finished.
"""

from abc import ABC, abstractmethod
from typing import Callable, NamedTuple, Optional

from loguru import logger

DEFAULT_RESOURCE_SCHEME = "file://"

EndListener = Callable[[], None]


class ResourceHandle(NamedTuple):
    """The resource currently bound to an engine."""

    path: str
    url: str
    generation: int


class AudioEngine(ABC):
    """Single-resource audio engine.

    Subclasses implement ``_bind``/``_release`` plus the transport
    primitives, and call ``_notify_end`` when the bound resource finishes.
    """

    def __init__(self, scheme: str = DEFAULT_RESOURCE_SCHEME):
        self.scheme = scheme
        self._handle: Optional[ResourceHandle] = None
        self._end_listener: Optional[tuple[int, EndListener]] = None
        self._generation = 0

    @property
    def handle(self) -> Optional[ResourceHandle]:
        return self._handle

    @property
    def is_loaded(self) -> bool:
        return self._handle is not None

    def resource_url(self, path: str) -> str:
        """Build the identifier the engine plays for a local path."""
        return f"{self.scheme}{path}"

    def load(self, path: str) -> ResourceHandle:
        """Release the current resource and bind a new one.

        Raises:
            EngineError: If binding fails; the engine is left empty
        """
        self.unload()

        self._generation += 1
        handle = ResourceHandle(
            path=path, url=self.resource_url(path), generation=self._generation
        )
        self._bind(handle)
        self._handle = handle
        logger.debug(f"Engine bound: {handle.url} (generation={handle.generation})")
        return handle

    def unload(self) -> None:
        """Detach the end listener, then release the bound resource."""
        handle = self._handle
        if handle is None:
            return

        self._end_listener = None
        self._handle = None
        self._release(handle)
        logger.debug(f"Engine released: {handle.url}")

    def on_end(self, callback: EndListener) -> None:
        """Register the end-of-track listener for the bound resource.

        The listener fires at most once. Loading or unloading another
        resource detaches it.
        """
        if self._handle is None:
            logger.debug("on_end ignored: no resource bound")
            return
        self._end_listener = (self._handle.generation, callback)

    def _notify_end(self, handle: ResourceHandle) -> None:
        """Deliver the end notification for ``handle`` if still current."""
        listener = self._end_listener
        if listener is None or self._handle is None:
            return

        generation, callback = listener
        if generation != handle.generation or self._handle.generation != handle.generation:
            return

        self._end_listener = None
        logger.debug(f"End of track: {handle.url}")
        callback()

    @abstractmethod
    def _bind(self, handle: ResourceHandle) -> None:
        """Make ``handle.url`` the engine's resource, paused at position 0."""

    @abstractmethod
    def _release(self, handle: ResourceHandle) -> None:
        """Free the engine's resource."""

    @abstractmethod
    def play(self) -> bool:
        ...

    @abstractmethod
    def pause(self) -> bool:
        ...

    @abstractmethod
    def stop(self) -> bool:
        """Pause and rewind the bound resource to position 0."""

    @abstractmethod
    def seek(self, position: Optional[float] = None) -> Optional[float]:
        """Set (or with no argument, query) the position in seconds.

        Returns:
            The position, or None if no resource is bound
        """
