"""
Folder Player CLI - Entry point

Parses command-line options, loads configuration and starts interactive mode.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from folder_player.core.config import load_config
from folder_player.domain.playback.mpv import check_mpv_available


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folder-player",
        description="Folder Player - browse a directory and play its audio files",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory to open (default: [browser] start_directory)",
    )
    parser.add_argument(
        "--shuffle",
        action="store_true",
        help="Start in shuffle mode",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Start playing immediately",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the folder-player command."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.shuffle:
        config.player.shuffle_on_start = True
    if args.log_level:
        config.logging.level = args.log_level
        try:
            config.logging.validate()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    if not check_mpv_available():
        print("Error: mpv not found. Install mpv to play audio.", file=sys.stderr)
        sys.exit(1)

    directory = args.directory or config.browser.start_directory

    # Delegate to main interactive mode
    from .main import interactive_mode

    interactive_mode(config, str(Path(directory).expanduser()), auto_play=args.play)


if __name__ == "__main__":
    main()
