"""
Command routing for Folder Player.

Routes user commands to appropriate handler functions.
"""

from typing import List

from loguru import logger
from rich.markup import escape

from folder_player.commands import browser, playback
from folder_player.context import AppContext
from folder_player.core.console import safe_print
from folder_player.domain.browser.exceptions import BrowserError
from folder_player.domain.playback.exceptions import PlaybackError


def print_help() -> None:
    """Display help information for available commands."""
    help_text = """
Folder Player

Browsing:
  ls                List the current directory
  cd <dN|path>      Open a directory by listing number or path
  up                Go to the parent directory
  names             Toggle file names / tag titles
  meta              Read tags for files not loaded yet

Playback:
  open <N|path>     Open a track by listing number or path
  play, pause, p    Toggle play/pause (starts from the list if idle)
  stop              Stop playback
  next, n           Next track
  prev              Previous track
  seek <s|mm:ss>    Jump to a position
  shuffle           Toggle shuffle mode
  status            Show current track

  help              Show this help
  quit, exit        Leave
"""
    safe_print(help_text.strip())


async def handle_command(ctx: AppContext, command: str, args: List[str]) -> bool:
    """
    Handle a single command.

    Args:
        ctx: Application context
        command: Command name
        args: Command arguments

    Returns:
        False if the application should exit
    """
    try:
        return await _dispatch(ctx, command, args)
    except (BrowserError, PlaybackError) as e:
        logger.warning(f"Command '{command}' failed: {e}")
        safe_print(f"❌ {escape(str(e))}", "red")
        return True


async def _dispatch(ctx: AppContext, command: str, args: List[str]) -> bool:
    if command in ["quit", "exit"]:
        return False

    elif command == "help":
        print_help()

    elif command == "ls":
        return browser.handle_ls_command(ctx, args)

    elif command == "cd":
        return await browser.handle_cd_command(ctx, args)

    elif command == "up":
        return await browser.handle_up_command(ctx, args)

    elif command == "names":
        return browser.handle_names_command(ctx, args)

    elif command == "meta":
        return await browser.handle_meta_command(ctx, args)

    elif command == "open":
        return await playback.handle_open_command(ctx, args)

    elif command in ["play", "pause", "p"]:
        return await playback.handle_play_pause_command(ctx, args)

    elif command == "stop":
        return playback.handle_stop_command(ctx, args)

    elif command in ["next", "n"]:
        return await playback.handle_next_command(ctx, args)

    elif command == "prev":
        return await playback.handle_prev_command(ctx, args)

    elif command == "seek":
        return playback.handle_seek_command(ctx, args)

    elif command == "shuffle":
        return playback.handle_shuffle_command(ctx, args)

    elif command == "status":
        return playback.handle_status_command(ctx, args)

    elif command:
        safe_print(f"Unknown command: {escape(command)}. Type 'help' for commands.", "red")

    return True
