"""
Playback command handlers for Folder Player.

Handles: open, play/pause, stop, next, prev, seek, shuffle, status
"""

import os
from typing import List, Optional

from rich.markup import escape

from folder_player.context import AppContext
from folder_player.core.console import safe_print
from folder_player.domain.browser.models import format_duration, get_display_name
from folder_player.domain.playback.state import TransportStatus


def resolve_track_argument(ctx: AppContext, args: List[str]) -> Optional[str]:
    """Turn a 1-based listing number or a path into a file path."""
    target = " ".join(args)
    if target.isdigit():
        index = int(target) - 1
        files = ctx.browser.files
        if 0 <= index < len(files):
            return files[index].path
        return None
    base = ctx.browser.current_path or os.getcwd()
    return os.path.normpath(os.path.join(base, os.path.expanduser(target)))


async def handle_open_command(ctx: AppContext, args: List[str]) -> bool:
    """Open a track by listing number or path."""
    if not args:
        safe_print("Usage: open <number|path>", "yellow")
        return True

    path = resolve_track_argument(ctx, args)
    if path is None:
        safe_print(f"No track #{escape(' '.join(args))}", "red")
        return True

    await ctx.controller.open(path, auto_play=ctx.config.player.auto_play_on_open)
    return handle_status_command(ctx, [])


async def handle_play_pause_command(ctx: AppContext, args: List[str]) -> bool:
    await ctx.controller.play_pause()
    return handle_status_command(ctx, [])


def handle_stop_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.controller.stop()
    safe_print("⏹ Stopped", "yellow")
    return True


async def handle_next_command(ctx: AppContext, args: List[str]) -> bool:
    await ctx.controller.play_next()
    return handle_status_command(ctx, [])


async def handle_prev_command(ctx: AppContext, args: List[str]) -> bool:
    await ctx.controller.play_prev()
    return handle_status_command(ctx, [])


def handle_seek_command(ctx: AppContext, args: List[str]) -> bool:
    """Seek to an absolute position, given as seconds or MM:SS."""
    if not args:
        safe_print("Usage: seek <seconds|mm:ss>", "yellow")
        return True

    try:
        position = parse_position(args[0])
    except ValueError:
        safe_print(f"Invalid position: {escape(args[0])}", "red")
        return True

    ctx.controller.seek(position)
    return handle_status_command(ctx, [])


def parse_position(value: str) -> float:
    """Parse "90", "90.5" or "1:30" into seconds."""
    if ":" in value:
        minutes, seconds = value.split(":", 1)
        return int(minutes) * 60 + float(seconds)
    return float(value)


def handle_shuffle_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.controller.toggle_shuffle()
    mode = "ON" if ctx.controller.shuffle else "OFF"
    safe_print(f"🔀 Shuffle {mode}", "cyan")
    return True


def handle_status_command(ctx: AppContext, args: List[str]) -> bool:
    """Show current track and player status."""
    state = ctx.controller.state
    track = state.active_track
    if track is None:
        safe_print("⏹ Nothing playing", "dim")
        return True

    icon = {
        TransportStatus.PLAYING: "▶",
        TransportStatus.PAUSED: "⏸",
        TransportStatus.STOPPED: "⏹",
    }[state.status]
    name = escape(get_display_name(track, ctx.browser.show_file_name))
    duration = track.metadata.duration if track.metadata else None
    shuffle = " 🔀" if state.shuffle else ""
    safe_print(
        f"{icon} {name}  [{format_duration(state.position)} / {format_duration(duration)}]{shuffle}",
        "green" if state.status is TransportStatus.PLAYING else None,
    )
    return True
