"""
Configuration management for Folder Player
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class BrowserConfig:
    """Configuration for the file browser."""

    start_directory: str = field(default_factory=lambda: str(Path.home() / "Music"))
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]
    )
    show_file_name: bool = False
    load_metadata_on_open: bool = True


@dataclass
class PlayerConfig:
    """Configuration for music player settings."""

    mpv_socket_path: Optional[str] = None
    volume: int = 50
    resource_scheme: str = "file://"
    shuffle_on_start: bool = False
    auto_play_on_open: bool = True
    poll_interval: float = 0.5  # seconds between position/end-of-track checks

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0 <= self.volume <= 100:
            raise ValueError(f"Invalid volume: {self.volume}. Must be between 0 and 100")
        if self.poll_interval <= 0:
            raise ValueError(f"Invalid poll_interval: {self.poll_interval}. Must be positive")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/folder-player/folder-player.log)
    )
    console_output: bool = False  # Also output to stderr (for debugging)

    def validate(self) -> None:
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. Valid levels are: {sorted(VALID_LOG_LEVELS)}"
            )


@dataclass
class Config:
    """Main configuration object."""

    browser: BrowserConfig = field(default_factory=BrowserConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.player.validate()
        self.logging.validate()


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "folder-player"
    return Path.home() / ".config" / "folder-player"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Used during development so the checkout's config file is picked up
    regardless of the working directory.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/folder-player (or ~/.config/folder-player)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "folder-player"
    return Path.home() / ".local" / "share" / "folder-player"


def get_log_file_path(config: Config) -> Path:
    """Get the log file path, honouring the [logging] override."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "folder-player.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Folder Player Configuration

[browser]
# Directory shown on startup
start_directory = "~/Music"

# Audio file formats listed in the browser
supported_formats = [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]

# Show file names instead of tag titles
show_file_name = false

# Read tags for every listed file after opening a directory
load_metadata_on_open = true

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/folder-player-mpv"

# Default volume (0-100)
volume = 50

# Prefix turning a local path into the URL handed to the engine
resource_scheme = "file://"

# Start in shuffle mode
shuffle_on_start = false

# Start playback immediately when a track is opened
auto_play_on_open = true

# Seconds between position updates and end-of-track checks
poll_interval = 0.5

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/folder-player/folder-player.log)
# log_file = "/path/to/custom/folder-player.log"

# Also output logs to stderr (useful for debugging)
console_output = false
""".strip()


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - FOLDER_PLAYER_LOG_LEVEL
    - FOLDER_PLAYER_MPV_SOCKET

    Raises:
        ValueError: If the file cannot be parsed or holds invalid values
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()
    config = Config()

    if not config_path.exists():
        # Create config directory and default file
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid configuration file {config_path}: {e}") from e

        if "browser" in toml_data:
            browser_data = toml_data["browser"]
            config.browser = BrowserConfig(
                start_directory=str(
                    Path(
                        browser_data.get("start_directory", config.browser.start_directory)
                    ).expanduser()
                ),
                supported_formats=[
                    fmt.lower()
                    for fmt in browser_data.get(
                        "supported_formats", config.browser.supported_formats
                    )
                ],
                show_file_name=browser_data.get(
                    "show_file_name", config.browser.show_file_name
                ),
                load_metadata_on_open=browser_data.get(
                    "load_metadata_on_open", config.browser.load_metadata_on_open
                ),
            )

        if "player" in toml_data:
            player_data = toml_data["player"]
            config.player = PlayerConfig(
                mpv_socket_path=player_data.get("mpv_socket_path"),
                volume=player_data.get("volume", config.player.volume),
                resource_scheme=player_data.get(
                    "resource_scheme", config.player.resource_scheme
                ),
                shuffle_on_start=player_data.get(
                    "shuffle_on_start", config.player.shuffle_on_start
                ),
                auto_play_on_open=player_data.get(
                    "auto_play_on_open", config.player.auto_play_on_open
                ),
                poll_interval=float(
                    player_data.get("poll_interval", config.player.poll_interval)
                ),
            )

        if "logging" in toml_data:
            logging_data = toml_data["logging"]
            config.logging = LoggingConfig(
                level=logging_data.get("level", config.logging.level),
                log_file=logging_data.get("log_file"),
                console_output=logging_data.get(
                    "console_output", config.logging.console_output
                ),
            )

    # Environment overrides
    if os.environ.get("FOLDER_PLAYER_LOG_LEVEL"):
        config.logging.level = os.environ["FOLDER_PLAYER_LOG_LEVEL"]
    if os.environ.get("FOLDER_PLAYER_MPV_SOCKET"):
        config.player.mpv_socket_path = os.environ["FOLDER_PLAYER_MPV_SOCKET"]

    config.validate()
    return config


def ensure_directories() -> None:
    """Ensure configuration and data directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
