"""
Folder Player - interactive loop.

Runs the command prompt and the playback ticker on one asyncio event loop.
"""

import asyncio
import shlex
from typing import List, Tuple

from loguru import logger
from rich.markup import escape

from folder_player import router
from folder_player.commands.browser import handle_ls_command, open_directory
from folder_player.context import AppContext
from folder_player.core.config import Config, ensure_directories, get_log_file_path
from folder_player.core.console import get_console, safe_print
from folder_player.core.output import setup_loguru
from folder_player.domain.browser.exceptions import BrowserError
from folder_player.domain.playback.mpv import MpvEngine


def parse_command(line: str) -> Tuple[str, List[str]]:
    """Split an input line into command and arguments."""
    try:
        parts = shlex.split(line)
    except ValueError:
        parts = line.split()
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]


async def tick(ctx: AppContext, interval: float) -> None:
    """Poll the engine for end of track and refresh the position."""
    while True:
        poll = getattr(ctx.engine, "poll", None)
        if poll is not None:
            poll()
        ctx.controller.update_position()
        await asyncio.sleep(interval)


async def prompt_loop(ctx: AppContext) -> None:
    """Read commands until the user quits or stdin closes."""
    while True:
        try:
            line = await asyncio.to_thread(input, "♪ ")
        except EOFError:
            return

        command, args = parse_command(line)
        if not await router.handle_command(ctx, command, args):
            return


async def run(ctx: AppContext, directory: str, auto_play: bool = False) -> None:
    """Start the engine, open the start directory and serve commands."""
    if isinstance(ctx.engine, MpvEngine):
        await asyncio.to_thread(ctx.engine.start)

    ticker = asyncio.create_task(tick(ctx, ctx.config.player.poll_interval))
    try:
        try:
            await open_directory(ctx, directory)
            handle_ls_command(ctx, [])
        except BrowserError as e:
            logger.warning(f"Start directory unavailable: {e}")
            safe_print(f"❌ {escape(str(e))}", "red")

        if auto_play:
            await ctx.controller.play_pause()

        await prompt_loop(ctx)
    finally:
        ticker.cancel()
        ctx.controller.cancel_pending()
        ctx.controller.stop()
        if isinstance(ctx.engine, MpvEngine):
            ctx.engine.close()
        logger.info("Folder Player exited")


def interactive_mode(config: Config, directory: str, auto_play: bool = False) -> None:
    """Set up logging and run the interactive player."""
    ensure_directories()
    setup_loguru(
        get_log_file_path(config),
        level=config.logging.level,
        console_output=config.logging.console_output,
    )

    ctx = AppContext.create(config, console=get_console())
    safe_print("Folder Player - type 'help' for commands", "bold")

    try:
        asyncio.run(run(ctx, directory, auto_play=auto_play))
    except KeyboardInterrupt:
        safe_print("\nGoodbye!")
