"""
Next-track selection for sequential, shuffle and shuffle-all playback.

Selection reads the playlist collection at call time, so a playlist whose
track list changed since the last selection is always re-measured.

Shuffle has no history: picking the track that just played is a valid
outcome.
"""

import random
from typing import Optional, Protocol

from tapedeck.domain.library.models import PlaybackMode, PlaylistCollection


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def next_sequential_index(current_index: int, track_count: int) -> int:
    """Index after ``current_index``, wrapping to 0 at the end of the playlist.

    Args:
        current_index: Index of the track that played last (-1 before the first)
        track_count: Number of tracks in the playlist (must be > 0)
    """
    return (current_index + 1) % track_count


def next_shuffle_index(track_count: int, rng: RandomSource = random) -> int:
    """Uniformly random index in ``[0, track_count)``."""
    return rng.randrange(track_count)


def next_shuffle_all(
    collection: PlaylistCollection, rng: RandomSource = random
) -> Optional[tuple[str, int]]:
    """Pick a random non-empty playlist, then a random track within it.

    Returns:
        (playlist name, track index), or None if no playlist has tracks
    """
    names = collection.playable_names()
    if not names:
        return None

    name = names[rng.randrange(len(names))]
    playlist = collection.get(name)
    if not playlist:
        # Emptied or removed since playable_names()
        return None
    return name, rng.randrange(len(playlist))


def select_next(
    collection: PlaylistCollection,
    playlist_name: Optional[str],
    current_index: int,
    rng: RandomSource = random,
) -> Optional[tuple[str, int]]:
    """Compute the next (playlist name, track index) for the active mode.

    Args:
        collection: Playlist collection (its ``mode`` decides the policy)
        playlist_name: Playlist at the cursor, or None if nothing was selected
        current_index: Track index at the cursor
        rng: Random source (``random`` module by default)

    Returns:
        Next position, or None when nothing can be selected
    """
    if collection.mode == PlaybackMode.SHUFFLE_ALL:
        return next_shuffle_all(collection, rng)

    playlist = collection.get(playlist_name)
    if playlist is None or playlist.is_folder:
        return None

    track_count = len(playlist)
    if track_count == 0:
        return None

    if collection.mode == PlaybackMode.SHUFFLE:
        return playlist_name, next_shuffle_index(track_count, rng)

    return playlist_name, next_sequential_index(current_index, track_count)
