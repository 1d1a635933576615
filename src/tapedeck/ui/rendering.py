"""Rendering of the playlists, tracks and queue columns plus the status line."""

import sys
from typing import Optional

from blessed import Terminal

from tapedeck.domain.library.models import PlaylistCollection

from .keys.bindings import VIEW_PLAYLISTS, VIEW_QUEUE, VIEW_STATUS, VIEW_TRACKS
from .state import (
    UIState,
    calculate_scroll_offset,
    now_playing_line,
    playlist_lines,
    queue_lines,
    selected_playlist,
    set_scroll,
    status_line,
    track_lines,
)

# Rows below the columns: status line and now-playing line
FOOTER_HEIGHT = 2
MIN_COLUMN_WIDTH = 16


def write_at(term: Terminal, x: int, y: int, content: str) -> None:
    """Write content at position, clearing the rest of the line."""
    sys.stdout.write(term.move_xy(x, y) + term.clear_eol + content)


def calculate_layout(term: Terminal) -> dict[str, int]:
    """
    Pure function: column positions and heights for the current terminal size.

    Returns:
        Dictionary with x/width per column plus body and footer rows
    """
    width = term.width or 80
    height = term.height or 24

    side_width = max(MIN_COLUMN_WIDTH, width // 4)
    tracks_width = max(MIN_COLUMN_WIDTH, width - 2 * side_width)

    return {
        "playlists_x": 0,
        "playlists_width": side_width,
        "tracks_x": side_width,
        "tracks_width": tracks_width,
        "queue_x": side_width + tracks_width,
        "queue_width": max(0, width - side_width - tracks_width),
        "body_y": 0,
        "body_height": max(1, height - FOOTER_HEIGHT - 1),
        "status_y": height - FOOTER_HEIGHT,
        "playing_y": height - 1,
    }


def _fit(text: str, width: int) -> str:
    if len(text) <= width:
        return text.ljust(width)
    return text[: max(0, width - 1)] + "…"


def render_column(
    term: Terminal,
    x: int,
    y: int,
    width: int,
    height: int,
    title: str,
    lines: list[str],
    selected: int,
    scroll: int,
    active: bool,
    use_colors: bool = True,
) -> int:
    """
    Draw one titled list column.

    Returns:
        Scroll offset used, so the selected line stays visible
    """
    if width <= 0:
        return scroll

    header = _fit(f" {title} ", width)
    if use_colors:
        header = term.bold_cyan(header) if active else term.bold(header)
    sys.stdout.write(term.move_xy(x, y) + header)

    visible = max(0, height - 1)
    scroll = calculate_scroll_offset(selected, scroll, visible) if lines else 0

    for row in range(visible):
        index = scroll + row
        text = _fit(lines[index], width) if index < len(lines) else " " * width
        if index == selected and index < len(lines) and active:
            text = term.reverse(text)
        sys.stdout.write(term.move_xy(x, y + 1 + row) + text)

    return scroll


def render(
    term: Terminal,
    state: UIState,
    collection: Optional[PlaylistCollection],
    typed_line: Optional[str] = None,
    use_colors: bool = True,
) -> UIState:
    """
    Draw the whole screen.

    Args:
        term: blessed Terminal instance
        state: Current UI state
        collection: Playlist collection (None until the first load)
        typed_line: Line being typed in the status view, if any
        use_colors: Use bold/colour attributes

    Returns:
        UI state with updated scroll offsets
    """
    layout = calculate_layout(term)

    playlist = selected_playlist(state, collection)
    columns = (
        (VIEW_PLAYLISTS, "Playlists", [label for _, label in playlist_lines(collection)]),
        (VIEW_TRACKS, playlist.name if playlist else "Tracks", track_lines(playlist)),
        (VIEW_QUEUE, "Queue", queue_lines(state.queue)),
    )

    for view, title, lines in columns:
        scroll = render_column(
            term,
            layout[f"{view}_x"],
            layout["body_y"],
            layout[f"{view}_width"],
            layout["body_height"],
            title,
            lines,
            state.selected[view],
            state.scroll[view],
            active=state.active_view == view,
            use_colors=use_colors,
        )
        state = set_scroll(state, view, scroll)

    if state.active_view == VIEW_STATUS and typed_line is not None:
        status = "> " + typed_line
    else:
        status = status_line(collection, state.status_message)
    write_at(term, 0, layout["status_y"], status)

    playing = now_playing_line(state)
    write_at(term, 0, layout["playing_y"], term.green(playing) if use_colors else playing)

    sys.stdout.flush()
    return state
