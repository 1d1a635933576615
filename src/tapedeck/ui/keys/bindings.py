"""Key binding table: (view, key sequence) -> command name.

Built once at startup from the user's key mapping file and the compiled-in
defaults. User entries win per command, never per key: remapping a command
unbinds its default key, which stays free for any other command.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from .utils import CTRL_C, END, HOME, PAGE_DOWN, PAGE_UP, parse_sequence

# Views
VIEW_PLAYLISTS = "playlists"
VIEW_TRACKS = "tracks"
VIEW_QUEUE = "queue"
VIEW_STATUS = "status"
ANY_VIEW = ""

NAVIGABLE_VIEWS = (VIEW_PLAYLISTS, VIEW_TRACKS, VIEW_QUEUE)

# Commands (names used in the key mapping file)
PAUSE_TRACK = "PauseTrack"
SHUFFLE_MODE = "ShuffleMode"
SHUFFLE_ALL_MODE = "ShuffleAllMode"
NEXT_TRACK = "NextTrack"
REPLAY_TRACK = "ReplayTrack"
SEARCH = "Search"
QUIT = "Quit"
QUEUE_TRACK = "QueueTrack"
QUEUE_PLAYLIST = "QueuePlaylist"
REPEAT_PLAYING_TRACK = "RepeatPlayingTrack"
REMOVE_TRACK = "RemoveTrack"
REMOVE_ALL_TRACKS = "RemoveAllTracks"
GO_TO_FIRST_LINE = "GoToFirstLine"
GO_TO_LAST_LINE = "GoToLastLine"
PLAY_SELECTED_TRACK = "PlaySelectedTrack"
UP = "Up"
DOWN = "Down"
LEFT = "Left"
RIGHT = "Right"
OPEN_CLOSE_FOLDER = "OpenCloseFolder"
ARTIST_ALBUMS = "ArtistAlbums"
CREATE_PLAYLIST = "CreatePlaylist"

# Fixed commands (not remappable)
CURSOR_HOME = "CursorHome"
CURSOR_END = "CursorEnd"
PAGE_UP_COMMAND = "PageUp"
PAGE_DOWN_COMMAND = "PageDown"

# Registration order; for the same (view, sequence) the later command wins.
# Views scope where a command is bound: ANY_VIEW means every navigable view.
COMMAND_VIEWS: dict[str, tuple[str, ...]] = {
    PAUSE_TRACK: (ANY_VIEW,),
    SHUFFLE_MODE: (ANY_VIEW,),
    SHUFFLE_ALL_MODE: (ANY_VIEW,),
    NEXT_TRACK: (ANY_VIEW,),
    REPLAY_TRACK: (ANY_VIEW,),
    SEARCH: (ANY_VIEW,),
    REPEAT_PLAYING_TRACK: (ANY_VIEW,),
    QUIT: (ANY_VIEW,),
    GO_TO_FIRST_LINE: (ANY_VIEW,),
    GO_TO_LAST_LINE: (ANY_VIEW,),
    UP: (ANY_VIEW,),
    DOWN: (ANY_VIEW,),
    REMOVE_TRACK: (ANY_VIEW,),
    REMOVE_ALL_TRACKS: (ANY_VIEW,),
    QUEUE_TRACK: (VIEW_TRACKS,),
    QUEUE_PLAYLIST: (VIEW_PLAYLISTS,),
    PLAY_SELECTED_TRACK: (VIEW_TRACKS,),
    LEFT: (VIEW_TRACKS, VIEW_QUEUE),
    RIGHT: (VIEW_PLAYLISTS, VIEW_TRACKS),
    OPEN_CLOSE_FOLDER: (VIEW_PLAYLISTS,),
    ARTIST_ALBUMS: (VIEW_TRACKS,),
    CREATE_PLAYLIST: (VIEW_QUEUE,),
}

COMMANDS = tuple(COMMAND_VIEWS)

DEFAULT_KEYS: dict[str, tuple[str, ...]] = {
    PAUSE_TRACK: ("p",),
    SHUFFLE_MODE: ("s",),
    SHUFFLE_ALL_MODE: ("S",),
    NEXT_TRACK: (">",),
    REPLAY_TRACK: ("<",),
    SEARCH: ("/",),
    QUIT: ("q",),
    QUEUE_TRACK: ("u",),
    QUEUE_PLAYLIST: ("u",),
    REPEAT_PLAYING_TRACK: ("r",),
    REMOVE_TRACK: ("dd",),
    REMOVE_ALL_TRACKS: ("D",),
    GO_TO_FIRST_LINE: ("gg",),
    GO_TO_LAST_LINE: ("G",),
    PLAY_SELECTED_TRACK: ("<space>", "<enter>"),
    UP: ("<up>", "k"),
    DOWN: ("<down>", "j"),
    LEFT: ("<left>", "h"),
    RIGHT: ("<right>", "l"),
    OPEN_CLOSE_FOLDER: ("<space>",),
    ARTIST_ALBUMS: ("i",),
    CREATE_PLAYLIST: ("c",),
}

FIXED_KEYS: dict[str, str] = {
    HOME: CURSOR_HOME,
    END: CURSOR_END,
    PAGE_UP: PAGE_UP_COMMAND,
    PAGE_DOWN: PAGE_DOWN_COMMAND,
    CTRL_C: QUIT,
}


@dataclass(frozen=True)
class KeyEntry:
    """One ``{"Key": ..., "Command": ...}`` entry of the key mapping file."""

    key: str
    command: str


class BindingTable:
    """Immutable lookup from (view, key sequence) to a command name."""

    def __init__(self, bindings: dict[tuple[str, tuple[str, ...]], str]):
        self._bindings = dict(bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def lookup(self, view: str, sequence: tuple[str, ...]) -> Optional[str]:
        """Command bound to ``sequence`` in ``view``.

        A binding for the view itself beats one registered for any view.
        """
        command = self._bindings.get((view, sequence))
        if command is None and view in NAVIGABLE_VIEWS:
            command = self._bindings.get((ANY_VIEW, sequence))
        return command

    def starts_sequence(self, view: str, token: str) -> bool:
        """True if some multi-key binding usable in ``view`` begins with ``token``."""
        views = (view, ANY_VIEW) if view in NAVIGABLE_VIEWS else (view,)
        return any(
            bound_view in views and len(sequence) > 1 and sequence[0] == token
            for bound_view, sequence in self._bindings
        )

    def keys_for(self, command: str) -> list[tuple[str, tuple[str, ...]]]:
        """All (view, sequence) pairs that resolve to ``command``."""
        return [key for key, bound in self._bindings.items() if bound == command]


def load_key_mapping(path: Optional[Path]) -> list[KeyEntry]:
    """
    Read the user's key mapping file.

    The file is a JSON list of ``{"Key": "dd", "Command": "RemoveTrack"}``
    objects. A missing file means no overrides; malformed entries are skipped.

    Args:
        path: Path to the key mapping file (None to skip)

    Returns:
        Valid entries in file order
    """
    if path is None or not path.exists():
        return []

    try:
        with open(path, encoding="utf-8") as f:
            content = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring key mapping file {path}: {e}")
        return []

    if not isinstance(content, list):
        logger.warning(f"Ignoring key mapping file {path}: expected a list")
        return []

    entries = []
    for item in content:
        if not isinstance(item, dict):
            logger.warning(f"Skipping key mapping entry {item!r}")
            continue
        key = item.get("Key")
        command = item.get("Command")
        if command not in COMMAND_VIEWS:
            logger.warning(f"Skipping unknown command {command!r}")
            continue
        if not isinstance(key, str):
            logger.warning(f"Skipping key mapping for {command}: bad key {key!r}")
            continue
        try:
            parse_sequence(key)
        except ValueError as e:
            logger.warning(f"Skipping key mapping for {command}: {e}")
            continue
        entries.append(KeyEntry(key=key, command=command))

    logger.info(f"Loaded {len(entries)} key mappings from {path}")
    return entries


def build_binding_table(user_entries: Iterable[KeyEntry] = ()) -> BindingTable:
    """Merge user entries with the defaults into a binding table."""
    configured: dict[str, list[tuple[str, ...]]] = {}
    for entry in user_entries:
        configured.setdefault(entry.command, []).append(parse_sequence(entry.key))

    for command, keys in DEFAULT_KEYS.items():
        if command not in configured:
            configured[command] = [parse_sequence(key) for key in keys]

    bindings: dict[tuple[str, tuple[str, ...]], str] = {}
    for command in COMMANDS:
        for sequence in configured.get(command, ()):
            for view in COMMAND_VIEWS[command]:
                previous = bindings.get((view, sequence))
                if previous and previous != command:
                    logger.debug(
                        f"{''.join(sequence)!r} in view {view or '*'}: "
                        f"{command} replaces {previous}"
                    )
                bindings[(view, sequence)] = command

    return BindingTable(bindings)
