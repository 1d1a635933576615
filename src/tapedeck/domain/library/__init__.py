"""Library domain - tracks, playlists and the playlist collection.

This domain handles:
- Track references and display helpers
- Playlists and folders
- The playlist collection and its active playback mode
- Building playlists from local directories
"""

from .models import (
    PlaybackMode,
    Track,
    Playlist,
    PlaylistCollection,
    get_display_name,
    get_duration_str,
)

__all__ = [
    "PlaybackMode",
    "Track",
    "Playlist",
    "PlaylistCollection",
    "get_display_name",
    "get_duration_str",
]
