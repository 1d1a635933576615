"""Signals exchanged between the UI, the player and the backend over the event bus.

Every signal is an immutable dataclass; the bus routes on the signal's type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tapedeck.domain.library.models import PlaylistCollection, Track


@dataclass(frozen=True)
class Signal:
    """Base class for everything sent over the bus."""


@dataclass(frozen=True)
class NewPlaylists(Signal):
    """Playlists loaded by the backend (startup load or search results)."""

    collection: Optional[PlaylistCollection]


@dataclass(frozen=True)
class Play(Signal):
    """Play ``track`` now. A playlist position, when given, moves the cursor."""

    track: Track
    playlist_name: Optional[str] = None
    index: Optional[int] = None


@dataclass(frozen=True)
class Pause(Signal):
    """Toggle between playing and paused."""


@dataclass(frozen=True)
class Replay(Signal):
    """Play the current track again from the start."""


@dataclass(frozen=True)
class NextPlay(Signal):
    """Play the next track (end of track, or the user skipped)."""


@dataclass(frozen=True)
class PlayTokenLost(Signal):
    """The backend lost the right to play (e.g. the player process died)."""


@dataclass(frozen=True)
class SetStatus(Signal):
    message: str


@dataclass(frozen=True)
class Search(Signal):
    query: str


@dataclass(frozen=True)
class GetArtistTopTracks(Signal):
    artist: str


@dataclass(frozen=True)
class Shutdown(Signal):
    """Every running actor cleans up and terminates."""


@dataclass(frozen=True)
class Enqueue(Signal):
    """Add tracks to the play queue (at the front when ``front`` is set)."""

    tracks: tuple[Track, ...]
    front: bool = False


@dataclass(frozen=True)
class RepeatCurrent(Signal):
    """Queue the currently playing track ``count`` times at the front."""

    count: int = 1


@dataclass(frozen=True)
class RemoveQueued(Signal):
    """Remove ``count`` queued tracks starting at ``index``."""

    index: int
    count: int = 1


@dataclass(frozen=True)
class ClearQueue(Signal):
    """Empty the play queue."""


@dataclass(frozen=True)
class QueueChanged(Signal):
    """Snapshot of the play queue after any change, for rendering."""

    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class NowPlaying(Signal):
    """The orchestrator started a track (None when playback stopped)."""

    track: Optional[Track]
    playlist_name: Optional[str] = None
    index: int = -1
