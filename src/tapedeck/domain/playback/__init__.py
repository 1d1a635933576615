"""Playback domain - queue, mode selection and the player orchestrator.

This domain handles:
- The play queue consulted before the playlist
- Next-track selection for sequential, shuffle and shuffle-all modes
- The playback cursor
- The orchestrator actor driving the backend session
"""

from .queue import PlaybackQueue
from .modes import (
    next_sequential_index,
    next_shuffle_index,
    next_shuffle_all,
    select_next,
)
from .state import PlaybackCursor, PlaybackStatus
from .player import PlayerOrchestrator, format_track_status

__all__ = [
    "PlaybackQueue",
    "next_sequential_index",
    "next_shuffle_index",
    "next_shuffle_all",
    "select_next",
    "PlaybackCursor",
    "PlaybackStatus",
    "PlayerOrchestrator",
    "format_track_status",
]
