"""Play queue: an ordered list of pending tracks consulted before the playlist.

The queue never touches playback state. It is owned by the player
orchestrator; other actors only ever see ``contents()`` snapshots.
"""

from typing import Optional

from loguru import logger

from tapedeck.core.errors import OutOfRangeError, QueueFullError
from tapedeck.domain.library.models import Track

DEFAULT_MAX_SIZE = 100


class PlaybackQueue:
    """FIFO queue of tracks with insert-at-front and a capacity limit."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        self.max_size = max_size
        self._tracks: list[Track] = []

    def __len__(self) -> int:
        return len(self._tracks)

    def is_empty(self) -> bool:
        return not self._tracks

    def add(self, track: Track) -> bool:
        """Append a track.

        Returns:
            False (and leaves the queue unchanged) when the queue is full
        """
        try:
            self._append(track)
        except QueueFullError as e:
            logger.debug(f"Rejected {track.uri}: {e}")
            return False
        return True

    def _append(self, track: Track) -> None:
        if len(self._tracks) >= self.max_size:
            raise QueueFullError(self.max_size)
        self._tracks.append(track)

    def insert(self, track: Track) -> None:
        """Push a track to the front so it plays next."""
        self._tracks.insert(0, track)

    def pop(self) -> Optional[Track]:
        """Remove and return the front track (None if the queue is empty)."""
        if not self._tracks:
            return None
        return self._tracks.pop(0)

    def remove(self, index: int) -> Track:
        """Remove the track at a UI-visible index.

        Raises:
            OutOfRangeError: If the index does not address a queued track
        """
        if not 0 <= index < len(self._tracks):
            raise OutOfRangeError(index, len(self._tracks))
        return self._tracks.pop(index)

    def clear(self) -> None:
        self._tracks.clear()

    def contents(self) -> tuple[Track, ...]:
        """Snapshot of the queue in play order, for rendering."""
        return tuple(self._tracks)
