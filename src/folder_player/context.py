"""Application context for explicit state passing.

Bundles the configuration and the long-lived components so command
handlers receive everything they need as one argument.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from folder_player.core.config import Config
from folder_player.domain.browser.file_list import FileBrowser
from folder_player.domain.playback.controller import PlaybackController
from folder_player.domain.playback.engine import AudioEngine
from folder_player.domain.playback.mpv import MpvEngine


@dataclass
class AppContext:
    """Application context passed to all command handlers.

    Attributes:
        config: Application configuration
        browser: Browsable file list of the current directory
        engine: Audio engine owned by the controller
        controller: Playback controller
        console: Rich Console for formatted output
    """

    config: Config
    browser: FileBrowser
    engine: AudioEngine
    controller: PlaybackController
    console: Optional[Console] = None

    @classmethod
    def create(
        cls,
        config: Config,
        engine: Optional[AudioEngine] = None,
        console: Optional[Console] = None,
    ) -> "AppContext":
        """Create the application components from configuration.

        Args:
            config: Application configuration
            engine: Audio engine to use (an MpvEngine when omitted)
            console: Optional Rich Console instance
        """
        if engine is None:
            engine = MpvEngine(
                socket_path=config.player.mpv_socket_path,
                volume=config.player.volume,
                scheme=config.player.resource_scheme,
            )

        browser = FileBrowser(
            supported_formats=config.browser.supported_formats,
            show_file_name=config.browser.show_file_name,
        )
        controller = PlaybackController(
            engine, browser, shuffle=config.player.shuffle_on_start
        )
        return cls(
            config=config,
            browser=browser,
            engine=engine,
            controller=controller,
            console=console,
        )
