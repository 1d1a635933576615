"""
Playback state for the player orchestrator.

Holds the cursor used to resume sequential traversal and the track that is
currently loaded.
"""

from enum import Enum
from typing import NamedTuple, Optional

from tapedeck.domain.library.models import Track


class PlaybackStatus(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackCursor(NamedTuple):
    """Immutable playback position.

    ``index`` is 0-based internally and shown 1-based in the tracks view.
    """

    playlist_name: Optional[str] = None
    index: int = -1
    current_track: Optional[Track] = None
    status: PlaybackStatus = PlaybackStatus.STOPPED

    def has_playlist_selected(self) -> bool:
        return self.playlist_name is not None

    def has_track(self) -> bool:
        return self.current_track is not None


def move_to(cursor: PlaybackCursor, playlist_name: str, index: int) -> PlaybackCursor:
    """Point the cursor at a playlist position."""
    return cursor._replace(playlist_name=playlist_name, index=index)


def start_track(cursor: PlaybackCursor, track: Track) -> PlaybackCursor:
    return cursor._replace(current_track=track, status=PlaybackStatus.PLAYING)


def toggle_paused(cursor: PlaybackCursor) -> PlaybackCursor:
    """Flip between playing and paused. Stopped stays stopped."""
    if cursor.status == PlaybackStatus.PLAYING:
        return cursor._replace(status=PlaybackStatus.PAUSED)
    if cursor.status == PlaybackStatus.PAUSED:
        return cursor._replace(status=PlaybackStatus.PLAYING)
    return cursor


def stop(cursor: PlaybackCursor) -> PlaybackCursor:
    return cursor._replace(current_track=None, status=PlaybackStatus.STOPPED)
