"""
Music library domain models.

Contains data structures for tracks, playlists and the playlist collection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple, Optional

from tapedeck.core.errors import OutOfRangeError


class PlaybackMode(Enum):
    """Next-track selection policy. Exactly one is active at a time."""

    SEQUENTIAL = "sequential"
    SHUFFLE = "shuffle"  # random track within the current playlist
    SHUFFLE_ALL = "shuffle_all"  # random playlist and random track


class Track(NamedTuple):
    """Opaque reference to a playable unit owned by the backend session.

    ``uri`` is whatever the session needs to load the track (a local file
    path for the mpv session).
    """

    uri: str
    title: Optional[str] = None
    artist: Optional[str] = None
    duration: Optional[float] = None  # in seconds
    available: bool = True
    album: Optional[str] = None


def get_display_name(track: Track) -> str:
    """Get a display-friendly "artist - title" name for the track."""
    artist = track.artist or "Unknown"
    title = track.title or "<Unknown Track>"
    return f"{artist} - {title}"


def get_duration_str(track: Track) -> str:
    """Get duration as a formatted string (M:SS)."""
    if not track.duration:
        return "?:??"

    minutes = int(track.duration // 60)
    seconds = int(track.duration % 60)
    return f"{minutes}:{seconds:02d}"


@dataclass
class Playlist:
    """Named, ordered sequence of tracks.

    A folder playlist has no tracks of its own; it groups the playlists
    named in ``children`` and can be opened or closed in the playlists view.
    """

    name: str
    tracks: list[Track] = field(default_factory=list)
    is_folder: bool = False
    is_open: bool = False
    children: list[str] = field(default_factory=list)
    parent: Optional[str] = None

    def __len__(self) -> int:
        return len(self.tracks)

    def track(self, index: int) -> Track:
        """Return the track at ``index``.

        Raises:
            OutOfRangeError: If the index is not valid for the current track list
        """
        if not 0 <= index < len(self.tracks):
            raise OutOfRangeError(index, len(self.tracks))
        return self.tracks[index]

    def remove_track(self, index: int) -> Track:
        """Remove and return the track at ``index``."""
        if not 0 <= index < len(self.tracks):
            raise OutOfRangeError(index, len(self.tracks))
        return self.tracks.pop(index)

    def remove_all_tracks(self) -> None:
        self.tracks.clear()

    def toggle_open(self) -> None:
        """Open a closed folder or close an open one. No-op for leaf playlists."""
        if self.is_folder:
            self.is_open = not self.is_open


class PlaylistCollection:
    """Mapping from playlist name to Playlist plus the active playback mode.

    Exactly one mode is active at a time. Playlist names are kept in a
    sorted list rebuilt whenever the mapping changes, so random selection
    never depends on dict iteration order.
    """

    def __init__(
        self,
        playlists: Optional[dict[str, Playlist]] = None,
        mode: PlaybackMode = PlaybackMode.SEQUENTIAL,
    ):
        self._playlists: dict[str, Playlist] = dict(playlists or {})
        self._names: tuple[str, ...] = ()
        self.mode = mode
        self._rebuild_names()

    @classmethod
    def from_playlists(
        cls, playlists: list[Playlist], mode: PlaybackMode = PlaybackMode.SEQUENTIAL
    ) -> "PlaylistCollection":
        return cls({p.name: p for p in playlists}, mode)

    def _rebuild_names(self) -> None:
        self._names = tuple(sorted(self._playlists))

    def __len__(self) -> int:
        return len(self._playlists)

    def __contains__(self, name: object) -> bool:
        return name in self._playlists

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def get(self, name: Optional[str]) -> Optional[Playlist]:
        if name is None:
            return None
        return self._playlists.get(name)

    def names(self) -> tuple[str, ...]:
        """Sorted snapshot of every playlist name."""
        return self._names

    def playable_names(self) -> list[str]:
        """Sorted names of leaf playlists that currently hold tracks."""
        names = []
        for name in self._names:
            playlist = self._playlists.get(name)
            if playlist is not None and not playlist.is_folder and len(playlist) > 0:
                names.append(name)
        return names

    def add(self, playlist: Playlist) -> None:
        """Add or replace a playlist by name."""
        self._playlists[playlist.name] = playlist
        self._rebuild_names()

    def remove(self, name: str) -> Optional[Playlist]:
        """Remove a playlist (and a folder's children) by name."""
        playlist = self._playlists.pop(name, None)
        if playlist is None:
            return None
        for child in playlist.children:
            self._playlists.pop(child, None)
        if playlist.parent:
            parent = self._playlists.get(playlist.parent)
            if parent is not None and name in parent.children:
                parent.children.remove(name)
        self._rebuild_names()
        return playlist

    def merge(self, other: "PlaylistCollection") -> None:
        """Add every playlist of ``other``, replacing same-named ones."""
        self._playlists.update({name: other.get(name) for name in other.names()})
        self._rebuild_names()

    def set_mode(self, mode: PlaybackMode) -> None:
        """Make ``mode`` the active mode (enabling one shuffle mode clears the other)."""
        self.mode = mode

    def toggle_mode(self, mode: PlaybackMode) -> PlaybackMode:
        """Enable ``mode``, or fall back to sequential if it is already active."""
        if self.mode == mode:
            self.mode = PlaybackMode.SEQUENTIAL
        else:
            self.mode = mode
        return self.mode

    def visible_names(self) -> list[str]:
        """Names in playlists-view order.

        Top-level playlists are sorted; an open folder is followed by its
        children.
        """
        visible: list[str] = []

        def walk(names: list[str]) -> None:
            for name in names:
                visible.append(name)
                playlist = self._playlists[name]
                if playlist.is_folder and playlist.is_open:
                    walk(sorted(c for c in playlist.children if c in self._playlists))

        walk([n for n in self._names if self._playlists[n].parent is None])
        return visible

    def depth(self, name: str) -> int:
        """Folder nesting depth of a playlist (0 for top level)."""
        depth = 0
        playlist = self._playlists.get(name)
        while playlist is not None and playlist.parent is not None:
            depth += 1
            playlist = self._playlists.get(playlist.parent)
        return depth
