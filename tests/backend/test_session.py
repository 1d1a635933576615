"""Tests for the session boundary: login wait and notification wiring."""

import queue
import threading

import pytest

from tapedeck.backend.session import ConnectionState, connect_session, wait_for_login
from tapedeck.core.errors import LoginTimeoutError, StartupError
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import NextPlay, PlayTokenLost


class FakeSession:
    """Only the parts of a session that login and notifications touch."""

    def __init__(self):
        self.connection_state_updates = queue.Queue()
        self.on_end_of_track = None
        self.on_play_token_lost = None
        self.state = ConnectionState.LOGGED_OUT

    def report(self, state: ConnectionState) -> None:
        self.state = state
        self.connection_state_updates.put(state)

    def connection_state(self) -> ConnectionState:
        return self.state


class TestWaitForLogin:
    """Login races a fixed timeout with no retry."""

    def test_logged_in(self):
        session = FakeSession()
        session.report(ConnectionState.CONNECTING)
        session.report(ConnectionState.LOGGED_IN)

        wait_for_login(session, timeout=1.0)

    def test_logged_in_from_another_thread(self):
        session = FakeSession()
        timer = threading.Timer(0.05, session.report, args=(ConnectionState.LOGGED_IN,))
        timer.start()
        try:
            wait_for_login(session, timeout=2.0)
        finally:
            timer.cancel()

    def test_timeout(self):
        session = FakeSession()
        session.report(ConnectionState.CONNECTING)

        with pytest.raises(LoginTimeoutError) as exc_info:
            wait_for_login(session, timeout=0.1)

        assert exc_info.value.timeout == 0.1
        assert isinstance(exc_info.value, StartupError)
        assert "Could not login" in str(exc_info.value)

    def test_disconnect_does_not_count_as_login(self):
        session = FakeSession()
        session.report(ConnectionState.DISCONNECTED)

        with pytest.raises(LoginTimeoutError):
            wait_for_login(session, timeout=0.1)


class TestConnectSession:
    """Session notifications become bus signals."""

    def test_callbacks_publish_signals(self):
        bus = EventBus()
        listener = bus.subscribe("listener", NextPlay, PlayTokenLost)
        session = FakeSession()

        connect_session(session, bus)
        session.on_end_of_track()
        session.on_play_token_lost()

        assert listener.get(timeout=0) == NextPlay()
        assert listener.get(timeout=0) == PlayTokenLost()

    def test_callbacks_after_shutdown_are_dropped(self):
        bus = EventBus()
        listener = bus.subscribe("listener", NextPlay)
        session = FakeSession()
        connect_session(session, bus)

        bus.shutdown()
        session.on_end_of_track()

        assert listener.pending() == 1  # only the Shutdown
