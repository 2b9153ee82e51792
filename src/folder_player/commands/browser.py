"""
Browser command handlers for Folder Player.

Handles: ls, cd, up, names, meta
"""

import os
from typing import List

from loguru import logger
from rich.markup import escape
from rich.table import Table

from folder_player.context import AppContext
from folder_player.core.console import safe_print
from folder_player.domain.browser.models import format_duration, get_display_name


def render_listing(ctx: AppContext) -> Table:
    """Build the directory listing table.

    Directories are numbered d1, d2, ...; tracks 1, 2, ... (1-based, as
    typed by the user).
    """
    browser = ctx.browser
    active_path = ctx.controller.state.active_path

    table = Table(title=escape(browser.current_path or "(no directory)"), expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Time", justify="right")
    table.add_column("", justify="center")

    for i, directory in enumerate(browser.directories, 1):
        table.add_row(f"d{i}", f"[bold blue]{escape(os.path.basename(directory))}/[/]", "", "")

    for i, track in enumerate(browser.files, 1):
        duration = track.metadata.duration if track.metadata else None
        marks = ""
        if track.path == active_path:
            marks += "▶"
        if ctx.controller.shuffle and track.is_played_in_shuffle:
            marks += "✓"
        name = escape(get_display_name(track, browser.show_file_name))
        style = "bold green" if track.path == active_path else None
        table.add_row(str(i), name, format_duration(duration), marks, style=style)

    return table


def handle_ls_command(ctx: AppContext, args: List[str]) -> bool:
    """List the current directory."""
    if ctx.console is not None:
        ctx.console.print(render_listing(ctx))
    ctx.browser.scrolled()
    return True


async def open_directory(ctx: AppContext, *paths: str) -> None:
    """Open a directory and read tags for its files if configured to."""
    ctx.browser.open_directory(*paths)
    if ctx.config.browser.load_metadata_on_open:
        await ctx.browser.load_metadata()


async def handle_cd_command(ctx: AppContext, args: List[str]) -> bool:
    """Change directory by listing number (d3 / 3) or by path."""
    if not args:
        safe_print("Usage: cd <number|path>", "yellow")
        return True

    target = " ".join(args)
    base = ctx.browser.current_path or os.getcwd()
    number = target[1:] if target.startswith("d") else target
    if number.isdigit():
        index = int(number) - 1
        if 0 <= index < len(ctx.browser.directories):
            target = ctx.browser.directories[index]
        # Otherwise fall back to a directory literally named like the number
        elif not os.path.isdir(os.path.join(base, os.path.expanduser(target))):
            safe_print(f"No directory #{escape(number)}", "red")
            return True

    await open_directory(ctx, base, os.path.expanduser(target))
    logger.debug(f"cd -> {ctx.browser.current_path}")
    handle_ls_command(ctx, [])
    return True


async def handle_up_command(ctx: AppContext, args: List[str]) -> bool:
    """Go to the parent directory."""
    current = ctx.browser.current_path or os.getcwd()
    await open_directory(ctx, current, os.pardir)
    handle_ls_command(ctx, [])
    return True


def handle_names_command(ctx: AppContext, args: List[str]) -> bool:
    """Toggle between file names and tag titles."""
    ctx.browser.toggle_show_file_name()
    mode = "file names" if ctx.browser.show_file_name else "titles"
    safe_print(f"Showing {mode}", "cyan")
    return True


async def handle_meta_command(ctx: AppContext, args: List[str]) -> bool:
    """Read tags for listed files that have none yet."""
    loaded = await ctx.browser.load_metadata()
    safe_print(f"Loaded metadata for {loaded} tracks", "cyan")
    return True
