"""
MPV audio engine with JSON IPC.

Runs one idle mpv process per player and drives it over its IPC socket.
mpv is started with ``--keep-open`` so a finished file stays loaded with
``eof-reached`` set, which ``poll()`` turns into the end-of-track callback.
"""

import json
import os
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote

from loguru import logger

from .engine import DEFAULT_RESOURCE_SCHEME, AudioEngine, ResourceHandle
from .exceptions import EngineError, EngineUnavailableError

SOCKET_TIMEOUT = 2.0
# Queries made on every tick of the event loop
POLL_TIMEOUT = 0.25
STARTUP_TIMEOUT = 5.0


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _request(
    socket_path: Optional[str], command: list[Any], timeout: float = SOCKET_TIMEOUT
) -> Optional[dict[str, Any]]:
    """Send one IPC command and return mpv's reply, or None on failure."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(timeout)
            sock.connect(socket_path)
            sock.sendall((json.dumps({"command": command}) + "\n").encode("utf-8"))

            buffer = b""
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    return None
                buffer += chunk
                *lines, buffer = buffer.split(b"\n")
                for line in lines:
                    if not line.strip():
                        continue
                    try:
                        message = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    # Events are broadcast to every client; replies carry "error"
                    if "error" in message:
                        return message

    except (socket.error, OSError) as e:
        logger.debug(f"mpv IPC failed for {command[0]}: {e}")
        return None


def send_mpv_command(socket_path: Optional[str], command: list[Any]) -> bool:
    """Send JSON IPC command to MPV."""
    reply = _request(socket_path, command)
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(
    socket_path: Optional[str], property_name: str, timeout: float = SOCKET_TIMEOUT
) -> Any:
    """Get a property value from MPV."""
    reply = _request(socket_path, ["get_property", property_name], timeout)
    if reply is not None and reply.get("error") == "success":
        return reply.get("data")
    return None


class MpvEngine(AudioEngine):
    """Audio engine backed by an mpv subprocess."""

    def __init__(
        self,
        socket_path: Optional[str] = None,
        volume: int = 50,
        scheme: str = DEFAULT_RESOURCE_SCHEME,
    ):
        super().__init__(scheme=scheme)
        if not socket_path:
            socket_path = str(Path(tempfile.gettempdir()) / f"folder-player-mpv-{os.getpid()}")
        self.socket_path = socket_path
        self.volume = volume
        self.process: Optional[subprocess.Popen] = None

    # ------------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start mpv with JSON IPC.

        Raises:
            EngineUnavailableError: If mpv cannot be started or does not answer
        """
        if self.is_running():
            return

        logger.info(f"Starting MPV player with socket: {self.socket_path}")

        if os.path.exists(self.socket_path):
            logger.debug(f"Removing existing socket: {self.socket_path}")
            os.unlink(self.socket_path)

        cmd = [
            "mpv",
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            f"--input-ipc-server={self.socket_path}",
            f"--volume={self.volume}",
            "--keep-open=yes",
            "--load-scripts=no",
        ]

        try:
            self.process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise EngineUnavailableError(f"Failed to start MPV: {e}") from e

        start_time = time.time()
        while not os.path.exists(self.socket_path):
            if time.time() - start_time > STARTUP_TIMEOUT:
                self.process.kill()
                self.process = None
                raise EngineUnavailableError(
                    f"MPV socket creation timeout after {STARTUP_TIMEOUT}s"
                )
            time.sleep(0.1)

        if get_mpv_property(self.socket_path, "idle-active") is None:
            self.process.kill()
            self.process = None
            raise EngineUnavailableError("MPV socket connection test failed")

        logger.info("MPV started successfully")

    def close(self) -> None:
        """Release the resource, stop mpv and remove its socket."""
        if self.is_loaded:
            self.unload()

        if self.process:
            try:
                self.process.kill()
                self.process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Process already terminated or couldn't be killed
            self.process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_running(self) -> bool:
        """Check if the mpv process is alive and its socket exists.

        Called on every poll tick, so it does not log.
        """
        if not self.process or self.process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    def _command(self, *command: Any) -> bool:
        ok = send_mpv_command(self.socket_path, list(command))
        if not ok:
            logger.warning(f"mpv command failed: {command[0]}")
        return ok

    # ------------------------------------------------------------------
    # Resource slot
    # ------------------------------------------------------------------

    def resource_url(self, path: str) -> str:
        """Build the URL mpv loads for a local path.

        mpv percent-decodes URLs, so the path is quoted whenever a scheme
        is set. Without a scheme mpv receives the plain path.
        """
        if not self.scheme:
            return path
        return f"{self.scheme}{quote(path)}"

    def _bind(self, handle: ResourceHandle) -> None:
        if not self.is_running():
            raise EngineUnavailableError("MPV is not running")

        # Load paused so the controller decides when playback starts
        if not self._command("set_property", "pause", True):
            raise EngineError(f"Could not prepare mpv for {handle.url}")
        if not self._command("loadfile", handle.url, "replace"):
            raise EngineError(f"mpv refused to load {handle.url}")

    def _release(self, handle: ResourceHandle) -> None:
        if self.is_running():
            self._command("stop")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def play(self) -> bool:
        if not self.is_loaded:
            return False
        return self._command("set_property", "pause", False)

    def pause(self) -> bool:
        if not self.is_loaded:
            return False
        return self._command("set_property", "pause", True)

    def stop(self) -> bool:
        if not self.is_loaded:
            return False
        paused = self._command("set_property", "pause", True)
        return self._command("seek", 0, "absolute") and paused

    def seek(self, position: Optional[float] = None) -> Optional[float]:
        if not self.is_loaded:
            return None

        if position is None:
            current = get_mpv_property(self.socket_path, "time-pos", POLL_TIMEOUT)
            return float(current) if current is not None else 0.0

        position = max(0.0, float(position))
        self._command("seek", position, "absolute")
        return position

    def set_volume(self, volume: int) -> bool:
        """Set volume (0-100)."""
        self.volume = max(0, min(100, volume))  # Clamp to 0-100
        if not self.is_running():
            return False
        return self._command("set_property", "volume", self.volume)

    def poll(self) -> None:
        """Check for end of track and notify the registered listener."""
        handle = self._handle
        if handle is None or not self.is_running():
            return

        if get_mpv_property(self.socket_path, "eof-reached", POLL_TIMEOUT) is True:
            self._notify_end(handle)
