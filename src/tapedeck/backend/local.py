"""Backend session over a local music library, played through mpv.

"Login" is the mpv IPC handshake. A watcher thread turns the end of the
loaded track into ``on_end_of_track`` and the death of the mpv process into
``on_play_token_lost``.
"""

import queue
import shutil
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from tapedeck.core.config import Config
from tapedeck.core.errors import BackendError, MissingCredentialsError, PlayerUnavailableError
from tapedeck.domain.library.models import PlaylistCollection, Track
from tapedeck.domain.library.scanner import scan_library

from . import mpv
from .session import ConnectionState

WATCH_INTERVAL = 0.25


class LocalSession:
    """Session implementation for local files."""

    def __init__(self, config: Config, cache_dir: Path):
        self.config = config
        self.cache_dir = cache_dir
        self.connection_state_updates: queue.Queue[ConnectionState] = queue.Queue()
        self.on_end_of_track: Optional[Callable[[], None]] = None
        self.on_play_token_lost: Optional[Callable[[], None]] = None

        self._state = ConnectionState.LOGGED_OUT
        self._mpv = mpv.MpvState()
        self._collection: Optional[PlaylistCollection] = None
        self._loaded: Optional[Track] = None
        self._started_at: Optional[float] = None
        self._track_done = False
        self._closing = threading.Event()
        self._watcher: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    # Connection

    def _set_state(self, state: ConnectionState) -> None:
        self._state = state
        self.connection_state_updates.put(state)

    def connection_state(self) -> ConnectionState:
        return self._state

    def login(self) -> None:
        """Start mpv and connect in the background.

        The outcome is reported through ``connection_state_updates``.

        Raises:
            MissingCredentialsError: If no configured library path exists
            PlayerUnavailableError: If the mpv binary is not installed
        """
        library_paths = self.config.library.library_paths
        if not any(Path(p).expanduser().is_dir() for p in library_paths):
            raise MissingCredentialsError(
                f"No music library found (library_paths = {library_paths})"
            )
        if shutil.which("mpv") is None:
            raise PlayerUnavailableError("mpv not found on PATH")

        socket_path = self.config.player.mpv_socket_path or mpv.default_socket_path()
        try:
            process = mpv.spawn_mpv(socket_path, self.config.player.volume)
        except OSError as e:
            raise PlayerUnavailableError(f"Failed to start mpv: {e}") from e

        self._mpv = mpv.MpvState(socket_path=socket_path, process=process)
        self._set_state(ConnectionState.CONNECTING)
        threading.Thread(target=self._connect, name="MpvConnect", daemon=True).start()

    def _connect(self) -> None:
        if mpv.wait_for_socket(self._mpv, timeout=self.config.player.login_timeout):
            self._set_state(ConnectionState.LOGGED_IN)
            self._watcher = threading.Thread(
                target=self._watch, name="MpvWatcher", daemon=True
            )
            self._watcher.start()
        else:
            logger.error("mpv socket connection test failed")
            self._set_state(ConnectionState.DISCONNECTED)

    # Catalog

    def list_playlists(self) -> PlaylistCollection:
        library = self.config.library
        self._collection = scan_library(
            library.library_paths, library.supported_formats, library.playlist_filter
        )
        return self._collection

    def _all_tracks(self) -> list[Track]:
        if self._collection is None:
            return []
        tracks = []
        for name in self._collection.names():
            tracks.extend(self._collection.get(name).tracks)
        return tracks

    def search(self, query: str) -> list[Track]:
        """Tracks whose artist, title or album contain ``query`` (case-insensitive)."""
        needle = query.lower()
        return [
            track
            for track in self._all_tracks()
            if any(needle in (value or "").lower() for value in (track.artist, track.title, track.album))
        ]

    def artist_top_tracks(self, artist: str) -> list[Track]:
        seen = set()
        tracks = []
        for track in self._all_tracks():
            if track.artist == artist and track.uri not in seen:
                seen.add(track.uri)
                tracks.append(track)
        return tracks

    # Playback

    def is_available(self, track: Track) -> bool:
        return track.available and Path(track.uri).is_file()

    def load_track(self, track: Track) -> None:
        with self._lock:
            if not mpv.load_file(self._mpv, track.uri):
                raise BackendError(f"Could not load {track.uri}")
            self._loaded = track
            self._started_at = time.time()
            self._track_done = False

    def play(self) -> None:
        if not mpv.set_paused(self._mpv, False):
            raise BackendError("Could not start playback")

    def pause(self) -> None:
        if not mpv.set_paused(self._mpv, True):
            raise BackendError("Could not pause playback")

    def stop(self) -> None:
        with self._lock:
            self._loaded = None
        mpv.stop_playback(self._mpv)

    def close(self) -> None:
        """Stop mpv and wipe the session cache."""
        self._closing.set()
        if self._watcher and self._watcher.is_alive():
            self._watcher.join(timeout=2.0)
        mpv.stop_mpv(self._mpv)
        self._set_state(ConnectionState.LOGGED_OUT)
        delete_cache(self.cache_dir)

    # Watcher

    def _watch(self) -> None:
        while not self._closing.wait(WATCH_INTERVAL):
            if not mpv.is_mpv_running(self._mpv):
                self._set_state(ConnectionState.DISCONNECTED)
                if self.on_play_token_lost:
                    self.on_play_token_lost()
                return

            with self._lock:
                finished = (
                    self._loaded is not None
                    and not self._track_done
                    and mpv.is_track_finished(self._mpv, self._started_at)
                )
                if finished:
                    self._track_done = True

            if finished and self.on_end_of_track:
                self.on_end_of_track()


def delete_cache(cache_dir: Path) -> None:
    """Remove everything inside the session cache directory."""
    if not cache_dir.is_dir():
        return
    for entry in cache_dir.iterdir():
        try:
            if entry.is_dir():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            logger.warning(f"Could not delete cache entry {entry}: {e}")
