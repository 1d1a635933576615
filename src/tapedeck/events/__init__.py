"""Event bus and the signals exchanged over it."""

from .bus import EventBus, Subscription
from .signals import (
    Signal,
    NewPlaylists,
    Play,
    Pause,
    Replay,
    NextPlay,
    PlayTokenLost,
    SetStatus,
    Search,
    GetArtistTopTracks,
    Shutdown,
    Enqueue,
    RepeatCurrent,
    RemoveQueued,
    ClearQueue,
    QueueChanged,
    NowPlaying,
)

__all__ = [
    "EventBus",
    "Subscription",
    "Signal",
    "NewPlaylists",
    "Play",
    "Pause",
    "Replay",
    "NextPlay",
    "PlayTokenLost",
    "SetStatus",
    "Search",
    "GetArtistTopTracks",
    "Shutdown",
    "Enqueue",
    "RepeatCurrent",
    "RemoveQueued",
    "ClearQueue",
    "QueueChanged",
    "NowPlaying",
]
