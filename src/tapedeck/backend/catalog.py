"""Catalog actor: answers Search and GetArtistTopTracks with new playlists.

Results arrive at the UI as a NewPlaylists collection holding a single
playlist named ``*<query>``.
"""

import threading
from typing import Optional

from loguru import logger

from tapedeck.domain.library.models import Playlist, PlaylistCollection, Track
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import GetArtistTopTracks, NewPlaylists, Search, SetStatus

from .session import Session


def results_playlist(name: str, tracks: list[Track]) -> PlaylistCollection:
    playlist_name = f"*{name}"
    return PlaylistCollection({playlist_name: Playlist(name=playlist_name, tracks=tracks)})


class CatalogActor:
    """Runs catalog lookups off the UI and player threads."""

    def __init__(self, bus: EventBus, session: Session):
        self.bus = bus
        self.session = session
        self.subscription = bus.subscribe("catalog", Search, GetArtistTopTracks)
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self.thread = threading.Thread(target=self.run, name="Catalog", daemon=True)
        self.thread.start()

    def run(self) -> None:
        logger.info("Catalog actor started")
        for signal in self.subscription:
            try:
                self.handle(signal)
            except Exception:
                logger.exception(f"Catalog lookup failed: {signal}")
                self.bus.publish(SetStatus("Search failed"))
        logger.info("Catalog actor terminated")

    def handle(self, signal) -> None:
        if isinstance(signal, Search):
            name = signal.query
            tracks = self.session.search(signal.query)
        elif isinstance(signal, GetArtistTopTracks):
            name = signal.artist
            tracks = self.session.artist_top_tracks(signal.artist)
        else:
            return

        logger.info(f"Catalog lookup {name!r}: {len(tracks)} tracks")
        if not tracks:
            self.bus.publish(SetStatus(f"No results for {name}"))
            return
        self.bus.publish(NewPlaylists(results_playlist(name, tracks)))
