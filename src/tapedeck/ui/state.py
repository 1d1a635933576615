"""UI state management - immutable state updates."""

import re
from dataclasses import dataclass, field, replace
from typing import Optional

from tapedeck.domain.library.models import (
    PlaybackMode,
    Playlist,
    PlaylistCollection,
    Track,
    get_display_name,
    get_duration_str,
)

from .keys.bindings import NAVIGABLE_VIEWS, VIEW_PLAYLISTS, VIEW_QUEUE, VIEW_TRACKS

MODE_PREFIXES = {
    PlaybackMode.SEQUENTIAL: "",
    PlaybackMode.SHUFFLE: "[Shuffle] ",
    PlaybackMode.SHUFFLE_ALL: "[Shuffle all] ",
}

_TRACK_NUMBER = re.compile(r"^\s*(\d+)\.")


def _zero_per_view() -> dict[str, int]:
    return {view: 0 for view in NAVIGABLE_VIEWS}


@dataclass
class UIState:
    """Everything the terminal UI renders, owned by the UI actor."""

    active_view: str = VIEW_PLAYLISTS
    # Highlighted line and scroll offset per navigable view
    selected: dict[str, int] = field(default_factory=_zero_per_view)
    scroll: dict[str, int] = field(default_factory=_zero_per_view)
    status_message: str = ""

    # Snapshots pushed by the player
    queue: tuple[Track, ...] = ()
    now_playing: Optional[Track] = None
    now_playing_playlist: Optional[str] = None
    now_playing_index: int = -1

    should_quit: bool = False


def set_view(state: UIState, view: str) -> UIState:
    return replace(state, active_view=view)


def set_status(state: UIState, message: str) -> UIState:
    return replace(state, status_message=message)


def select_line(state: UIState, view: str, index: int, total: int) -> UIState:
    """Highlight ``index`` in ``view``, clamped to the list length."""
    selected = dict(state.selected)
    selected[view] = clamp_selection(index, total)
    return replace(state, selected=selected)


def set_scroll(state: UIState, view: str, offset: int) -> UIState:
    scroll = dict(state.scroll)
    scroll[view] = offset
    return replace(state, scroll=scroll)


def set_queue(state: UIState, tracks: tuple[Track, ...]) -> UIState:
    state = replace(state, queue=tracks)
    return select_line(state, VIEW_QUEUE, state.selected[VIEW_QUEUE], len(tracks))


def set_now_playing(
    state: UIState, track: Optional[Track], playlist_name: Optional[str], index: int
) -> UIState:
    return replace(
        state,
        now_playing=track,
        now_playing_playlist=playlist_name,
        now_playing_index=index,
    )


def request_quit(state: UIState) -> UIState:
    return replace(state, should_quit=True)


def clamp_selection(selection: int, total_items: int) -> int:
    """Clamp a line index to ``[0, total_items - 1]`` (0 for an empty list)."""
    if total_items <= 0:
        return 0
    return max(0, min(selection, total_items - 1))


def calculate_scroll_offset(
    selected: int, current_scroll: int, visible_items: int
) -> int:
    """Scroll offset that keeps the selected line inside the viewport."""
    if selected >= current_scroll + visible_items:
        return selected - visible_items + 1
    if selected < current_scroll:
        return selected
    return current_scroll


# Selectors


def status_line(collection: Optional[PlaylistCollection], message: str) -> str:
    """Status text with the active mode prefix, e.g. ``[Shuffle] Playing: ...``."""
    mode = collection.mode if collection is not None else PlaybackMode.SEQUENTIAL
    return MODE_PREFIXES[mode] + message


def playlist_lines(collection: Optional[PlaylistCollection]) -> list[tuple[str, str]]:
    """(name, label) pairs for the playlists view.

    Folders carry an open/closed marker and open folders list their children
    indented beneath them.
    """
    if collection is None:
        return []

    lines = []
    for name in collection.visible_names():
        playlist = collection.get(name)
        indent = "  " * collection.depth(name)
        if playlist.is_folder:
            marker = "[-] " if playlist.is_open else "[+] "
        else:
            marker = ""
        lines.append((name, f"{indent}{marker}{name}"))
    return lines


def selected_playlist(
    state: UIState, collection: Optional[PlaylistCollection]
) -> Optional[Playlist]:
    """Playlist highlighted in the playlists view."""
    if collection is None:
        return None
    names = collection.visible_names()
    if not names:
        return None
    index = clamp_selection(state.selected[VIEW_PLAYLISTS], len(names))
    return collection.get(names[index])


def format_track_line(index: int, track: Track) -> str:
    return f"{index + 1}. {get_display_name(track)}"


def track_lines(playlist: Optional[Playlist]) -> list[str]:
    """``"<n>. <artist> - <title>"`` lines for the tracks view."""
    if playlist is None or playlist.is_folder:
        return []
    return [format_track_line(i, track) for i, track in enumerate(playlist.tracks)]


def parse_track_number(line: str) -> int:
    """Track index (0-based) from a tracks-view line, or -1."""
    match = _TRACK_NUMBER.match(line)
    if not match:
        return -1
    return int(match.group(1)) - 1


def selected_track(
    state: UIState, collection: Optional[PlaylistCollection]
) -> tuple[Optional[Playlist], int]:
    """Selected playlist and the index of the track highlighted in the tracks view.

    Returns:
        (playlist, index), with index -1 when no track is highlighted
    """
    playlist = selected_playlist(state, collection)
    lines = track_lines(playlist)
    if not lines:
        return playlist, -1
    line = lines[clamp_selection(state.selected[VIEW_TRACKS], len(lines))]
    return playlist, parse_track_number(line)


def queue_lines(tracks: tuple[Track, ...]) -> list[str]:
    return [get_display_name(track) for track in tracks]


def now_playing_line(state: UIState) -> str:
    if state.now_playing is None:
        return ""
    track = state.now_playing
    return f"Playing: {get_display_name(track)} [{get_duration_str(track)}]"


def line_count(
    state: UIState, collection: Optional[PlaylistCollection], view: str
) -> int:
    """Number of lines in ``view``."""
    if view == VIEW_PLAYLISTS:
        return len(collection.visible_names()) if collection is not None else 0
    if view == VIEW_TRACKS:
        playlist = selected_playlist(state, collection)
        return len(track_lines(playlist))
    if view == VIEW_QUEUE:
        return len(state.queue)
    return 0
