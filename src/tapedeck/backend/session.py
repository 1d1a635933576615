"""Backend session boundary.

The session owns the catalog and the audio output. The core only calls
the methods below and consumes the session's asynchronous notifications
(end of track, play token lost) as bus signals.
"""

import queue
import time
from enum import Enum
from typing import Callable, Optional, Protocol

from loguru import logger

from tapedeck.core.errors import LoginTimeoutError
from tapedeck.domain.library.models import PlaylistCollection, Track
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import NextPlay, PlayTokenLost

DEFAULT_LOGIN_TIMEOUT = 9.0


class ConnectionState(Enum):
    LOGGED_OUT = "logged_out"
    CONNECTING = "connecting"
    LOGGED_IN = "logged_in"
    DISCONNECTED = "disconnected"


class Session(Protocol):
    """What the core needs from a streaming backend."""

    # Every connection state change is put here, in order
    connection_state_updates: "queue.Queue[ConnectionState]"
    on_end_of_track: Optional[Callable[[], None]]
    on_play_token_lost: Optional[Callable[[], None]]

    def login(self) -> None: ...

    def connection_state(self) -> ConnectionState: ...

    def list_playlists(self) -> PlaylistCollection: ...

    def is_available(self, track: Track) -> bool: ...

    def load_track(self, track: Track) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def search(self, query: str) -> list[Track]: ...

    def artist_top_tracks(self, artist: str) -> list[Track]: ...

    def close(self) -> None: ...


def wait_for_login(session: Session, timeout: float = DEFAULT_LOGIN_TIMEOUT) -> None:
    """Wait for the session to report LOGGED_IN, racing a fixed timeout.

    There is no retry: running out of time is a hard login failure.

    Raises:
        LoginTimeoutError: If LOGGED_IN was not reported within ``timeout``
    """
    deadline = time.monotonic() + timeout
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.error(f"Login timed out after {timeout:g}s")
            raise LoginTimeoutError(timeout)
        try:
            session.connection_state_updates.get(timeout=remaining)
        except queue.Empty:
            continue
        state = session.connection_state()
        logger.debug(f"Connection state update: {state.value}")
        if state == ConnectionState.LOGGED_IN:
            logger.info("Backend session logged in")
            return


def connect_session(session: Session, bus: EventBus) -> None:
    """Forward the session's notifications onto the bus."""

    def end_of_track() -> None:
        logger.debug("End of track")
        bus.publish(NextPlay())

    def play_token_lost() -> None:
        logger.warning("Play token lost")
        bus.publish(PlayTokenLost())

    session.on_end_of_track = end_of_track
    session.on_play_token_lost = play_token_lost
