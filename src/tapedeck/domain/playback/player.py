"""
Player orchestrator - owns what is playing and decides what plays next.

Runs as its own actor: it waits on its bus subscription and handles one
signal at a time. It alone mutates the play queue and the playback cursor;
the UI learns about changes through QueueChanged, NowPlaying and SetStatus.
"""

import random
import threading
from typing import Optional

from loguru import logger

from tapedeck.core.errors import BackendError, OutOfRangeError
from tapedeck.domain.library.models import (
    PlaylistCollection,
    Track,
    get_display_name,
    get_duration_str,
)
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import (
    ClearQueue,
    Enqueue,
    NextPlay,
    NowPlaying,
    Pause,
    Play,
    QueueChanged,
    RemoveQueued,
    RepeatCurrent,
    Replay,
    SetStatus,
    Signal,
)

from .modes import RandomSource, select_next
from .queue import PlaybackQueue
from .state import PlaybackCursor, PlaybackStatus, move_to, start_track, stop, toggle_paused

NOT_AVAILABLE = "Not available"
PLAYER_ERROR = "Player error, see the log"


def format_track_status(status: str, track: Track) -> str:
    """Status line for a track, e.g. ``Playing: Artist - Title [3:41]``."""
    return f"{status}: {get_display_name(track)} [{get_duration_str(track)}]"


class PlayerOrchestrator:
    """Actor reacting to playback signals.

    States: stopped (no current track), playing, paused.
    """

    def __init__(
        self,
        bus: EventBus,
        session,
        collection: PlaylistCollection,
        queue: Optional[PlaybackQueue] = None,
        rng: RandomSource = random,
    ):
        self.bus = bus
        self.session = session
        self.collection = collection
        self.queue = queue if queue is not None else PlaybackQueue()
        self.rng = rng
        self.cursor = PlaybackCursor()
        self.terminated = False
        self.subscription = bus.subscribe(
            "player",
            Play,
            Pause,
            Replay,
            NextPlay,
            Enqueue,
            RepeatCurrent,
            RemoveQueued,
            ClearQueue,
        )
        self.thread: Optional[threading.Thread] = None

    @property
    def status(self) -> PlaybackStatus:
        return self.cursor.status

    def start(self) -> None:
        """Run the event loop in a background thread."""
        self.thread = threading.Thread(target=self.run, name="Player", daemon=True)
        self.thread.start()

    def run(self) -> None:
        logger.info("Player started")
        try:
            for signal in self.subscription:
                self.handle(signal)
        finally:
            self._shutdown()

    def handle(self, signal: Signal) -> None:
        """Process one signal. No failure escapes the loop."""
        try:
            self._dispatch(signal)
        except BackendError as e:
            logger.exception(f"Backend error while handling {type(signal).__name__}")
            self.bus.publish(SetStatus(str(e)))
        except Exception:
            logger.exception(f"Player failed handling {type(signal).__name__}")
            self.bus.publish(SetStatus(PLAYER_ERROR))

    def _dispatch(self, signal: Signal) -> None:
        match signal:
            case NextPlay():
                self.play_next()
            case Play(track=track, playlist_name=name, index=index):
                self.play(track, name, index)
            case Pause():
                self.toggle_pause()
            case Replay():
                if self.cursor.has_track():
                    self.play(self.cursor.current_track)
            case Enqueue(tracks=tracks, front=front):
                self.enqueue(tracks, front)
            case RepeatCurrent(count=count):
                self.repeat_current(count)
            case RemoveQueued(index=index, count=count):
                self.remove_queued(index, count)
            case ClearQueue():
                self.queue.clear()
                self._publish_queue()
            case _:
                logger.debug(f"Player ignored {type(signal).__name__}")

    # Playback

    def play_next(self) -> None:
        """Play the front of the queue, else the next track of the selected playlist."""
        if not self.queue.is_empty():
            track = self.queue.pop()
            self._publish_queue()
            self.play(track)
        elif self.cursor.has_playlist_selected():
            self._play_next_from_playlist()

    def _play_next_from_playlist(self) -> None:
        position = select_next(
            self.collection, self.cursor.playlist_name, self.cursor.index, self.rng
        )
        if position is None:
            self.bus.publish(SetStatus("Nothing to play"))
            return

        name, index = position
        playlist = self.collection.get(name)
        try:
            track = playlist.track(index)
        except (OutOfRangeError, AttributeError):
            # Playlist changed between selection and lookup
            logger.warning(f"Stale position {name!r}[{index}]")
            return
        # The position advances even if the track is refused, so the next
        # NextPlay moves past it.
        self.cursor = move_to(self.cursor, name, index)
        self.play(track)

    def play(
        self,
        track: Track,
        playlist_name: Optional[str] = None,
        index: Optional[int] = None,
    ) -> bool:
        """Load and start ``track``.

        An unavailable track only produces a status message: the current
        track and status stay as they were and nothing skips ahead
        automatically.
        """
        if not self.session.is_available(track):
            logger.info(f"Track not available: {track.uri}")
            self.bus.publish(SetStatus(NOT_AVAILABLE))
            return False

        self.session.load_track(track)
        self.session.play()

        if playlist_name is not None and index is not None:
            self.cursor = move_to(self.cursor, playlist_name, index)
        self.cursor = start_track(self.cursor, track)

        logger.info(f"Playing {track.uri}")
        self.bus.publish(
            NowPlaying(track, self.cursor.playlist_name, self.cursor.index)
        )
        self.bus.publish(SetStatus(format_track_status("Playing", track)))
        return True

    def toggle_pause(self) -> None:
        """Pause or resume. No-op when nothing is loaded."""
        if not self.cursor.has_track():
            return

        track = self.cursor.current_track
        if self.cursor.status == PlaybackStatus.PLAYING:
            self.session.pause()
            message = format_track_status("Paused", track)
        else:
            self.session.play()
            message = format_track_status("Playing", track)

        self.cursor = toggle_paused(self.cursor)
        self.bus.publish(SetStatus(message))

    # Queue

    def enqueue(self, tracks: tuple[Track, ...], front: bool = False) -> None:
        if front:
            for track in reversed(tracks):
                self.queue.insert(track)
        else:
            for track in tracks:
                if not self.queue.add(track):
                    self.bus.publish(SetStatus(f"Queue is full ({self.queue.max_size} tracks)"))
                    break
        self._publish_queue()

    def repeat_current(self, count: int) -> None:
        """Queue the playing track ``count`` times so it plays next."""
        if not self.cursor.has_track():
            return
        for _ in range(count):
            self.queue.insert(self.cursor.current_track)
        self._publish_queue()

    def remove_queued(self, index: int, count: int) -> None:
        for _ in range(count):
            try:
                self.queue.remove(index)
            except OutOfRangeError:
                break
        self._publish_queue()

    def _publish_queue(self) -> None:
        self.bus.publish(QueueChanged(self.queue.contents()))

    # Shutdown

    def _shutdown(self) -> None:
        """Stop output and release the backend session."""
        try:
            if self.cursor.has_track():
                self.session.stop()
        except BackendError:
            logger.exception("Failed to stop playback on shutdown")
        finally:
            self.cursor = stop(self.cursor)
            self.session.close()
            self.terminated = True
            logger.info("Player terminated")
