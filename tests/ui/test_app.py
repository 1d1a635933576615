"""Tests for the console UI actor (without a real terminal)."""

from unittest.mock import MagicMock

import pytest
from blessed.keyboard import Keystroke

from tapedeck.domain.library.models import Playlist, PlaylistCollection, Track
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import (
    NewPlaylists,
    NowPlaying,
    Pause,
    PlayTokenLost,
    QueueChanged,
    Search,
    SetStatus,
)
from tapedeck.ui.app import PLAY_TOKEN_LOST, ConsoleUI
from tapedeck.ui.keys.bindings import VIEW_PLAYLISTS, VIEW_STATUS, build_binding_table


def collection_of(*names: str) -> PlaylistCollection:
    return PlaylistCollection.from_playlists(
        [Playlist(name=n, tracks=[Track(f"/{n}/1.mp3", "One", n)]) for n in names]
    )


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def ui(bus) -> ConsoleUI:
    return ConsoleUI(bus, build_binding_table(), term=MagicMock())


class TestSignals:
    """Signals update UI state."""

    def test_first_playlists_are_adopted(self, ui):
        collection = collection_of("Rock")
        ui.handle_signal(NewPlaylists(collection))
        assert ui.collection is collection
        assert ui.ctx.collection is collection

    def test_later_playlists_are_merged(self, ui):
        first = collection_of("Rock")
        ui.handle_signal(NewPlaylists(first))
        ui.handle_signal(NewPlaylists(collection_of("*dub")))

        assert ui.collection is first
        assert list(first.names()) == ["*dub", "Rock"]

    def test_status_and_token_lost(self, ui):
        ui.handle_signal(SetStatus("Hello"))
        assert ui.state.status_message == "Hello"

        ui.handle_signal(PlayTokenLost())
        assert ui.state.status_message == PLAY_TOKEN_LOST

    def test_queue_and_now_playing(self, ui):
        track = Track("/a.mp3", "A", "B")
        ui.handle_signal(QueueChanged((track, track)))
        ui.handle_signal(NowPlaying(track, "Rock", 3))

        assert ui.state.queue == (track, track)
        assert ui.state.now_playing == track
        assert ui.state.now_playing_index == 3

    def test_listen_stops_on_shutdown(self, ui, bus):
        bus.publish(SetStatus("before"))
        bus.shutdown()

        ui.listen()

        assert ui.state.should_quit


class TestKeys:
    """Keys go through the dispatcher to commands."""

    def test_pause_key_publishes_pause(self, ui, bus):
        listener = bus.subscribe("listener", Pause)
        ui.handle_key(Keystroke("p"))
        assert listener.get(timeout=0) == Pause()

    def test_search_typing(self, ui, bus):
        listener = bus.subscribe("listener", Search)
        ui.handle_signal(NewPlaylists(collection_of("Rock")))

        ui.handle_key(Keystroke("/"))
        assert ui.state.active_view == VIEW_STATUS

        for char in "dub":
            ui.handle_key(Keystroke(char))
        ui.handle_key(Keystroke("\r"))

        assert listener.get(timeout=0) == Search("dub")
        assert ui.state.active_view == VIEW_PLAYLISTS

    def test_ctrl_c_quits(self, ui, bus):
        ui.handle_key(Keystroke("\x03"))
        assert ui.state.should_quit
        assert bus.is_shut_down
