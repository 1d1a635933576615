"""Tests for the catalog actor."""

from unittest.mock import MagicMock

import pytest

from tapedeck.backend.catalog import CatalogActor
from tapedeck.domain.library.models import Track
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import GetArtistTopTracks, NewPlaylists, Search, SetStatus


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def listener(bus):
    return bus.subscribe("listener", NewPlaylists, SetStatus)


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.search.return_value = [Track("/a/1.mp3", "Dub One", "Tubby")]
    session.artist_top_tracks.return_value = [
        Track("/a/1.mp3", "Dub One", "Tubby"),
        Track("/a/2.mp3", "Dub Two", "Tubby"),
    ]
    return session


class TestCatalogActor:
    """Lookups answer with a single *-prefixed playlist."""

    def test_search_results(self, bus, listener, session):
        CatalogActor(bus, session).handle(Search("dub"))

        signal = listener.get(timeout=0)
        assert isinstance(signal, NewPlaylists)
        assert list(signal.collection.names()) == ["*dub"]
        assert len(signal.collection.get("*dub")) == 1
        session.search.assert_called_once_with("dub")

    def test_artist_results(self, bus, listener, session):
        CatalogActor(bus, session).handle(GetArtistTopTracks("Tubby"))

        signal = listener.get(timeout=0)
        assert len(signal.collection.get("*Tubby")) == 2

    def test_no_results(self, bus, listener, session):
        session.search.return_value = []
        CatalogActor(bus, session).handle(Search("zzz"))

        assert listener.get(timeout=0) == SetStatus("No results for zzz")

    def test_failed_lookup_keeps_running(self, bus, listener, session):
        session.search.side_effect = [RuntimeError("boom"), [Track("/b.mp3", "B", "C")]]
        actor = CatalogActor(bus, session)
        actor.start()

        bus.publish(Search("first"))
        bus.publish(Search("second"))

        assert listener.get(timeout=2.0) == SetStatus("Search failed")
        assert isinstance(listener.get(timeout=2.0), NewPlaylists)

        bus.shutdown()
        actor.thread.join(timeout=2.0)
        assert not actor.thread.is_alive()
