"""Terminal UI actor: input loop plus a listener for signals addressed to the UI."""

import threading
from typing import Optional

from blessed import Terminal
from blessed.keyboard import Keystroke
from loguru import logger

from tapedeck.core.config import UIConfig
from tapedeck.core.output import set_status_sink
from tapedeck.domain.library.models import PlaylistCollection
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import (
    NewPlaylists,
    NowPlaying,
    PlayTokenLost,
    QueueChanged,
    SetStatus,
    Signal,
)

from .commands import CommandContext, execute_command, submit_typed
from .keys.bindings import BindingTable
from .keys.dispatcher import KeyDispatcher
from .keys.utils import parse_key
from .rendering import calculate_layout, render
from .state import UIState, request_quit, set_now_playing, set_queue, set_status

PLAY_TOKEN_LOST = "Play token lost"


class ConsoleUI:
    """Owns the UI state and the playlist collection's view-side mutations.

    Key handling runs on the calling thread; signals are applied by a
    listener thread. Both go through ``lock``.
    """

    def __init__(
        self,
        bus: EventBus,
        table: BindingTable,
        config: Optional[UIConfig] = None,
        term: Optional[Terminal] = None,
    ):
        self.bus = bus
        self.config = config or UIConfig()
        self.term = term
        self.state = UIState()
        self.collection: Optional[PlaylistCollection] = None
        self.lock = threading.RLock()
        self.needs_redraw = True

        self.dispatcher = KeyDispatcher(table, self._on_command, self._on_submit)
        self.ctx = CommandContext(bus=bus, dispatcher=self.dispatcher)
        self.subscription = bus.subscribe(
            "ui", NewPlaylists, SetStatus, PlayTokenLost, QueueChanged, NowPlaying
        )
        self.listener: Optional[threading.Thread] = None

    # Signals

    def handle_signal(self, signal: Signal) -> None:
        with self.lock:
            match signal:
                case NewPlaylists(collection=collection):
                    self._receive_playlists(collection)
                case SetStatus(message=message):
                    self.state = set_status(self.state, message)
                case PlayTokenLost():
                    self.state = set_status(self.state, PLAY_TOKEN_LOST)
                case QueueChanged(tracks=tracks):
                    self.state = set_queue(self.state, tracks)
                case NowPlaying(track=track, playlist_name=name, index=index):
                    self.state = set_now_playing(self.state, track, name, index)
            self.needs_redraw = True

    def _receive_playlists(self, collection: Optional[PlaylistCollection]) -> None:
        if collection is None:
            return
        if self.collection is None:
            self.collection = collection
            self.ctx.collection = collection
            logger.info(f"UI received {len(collection)} playlists")
        elif collection is not self.collection:
            self.collection.merge(collection)
            logger.info(f"Merged playlists {list(collection.names())}")

    def listen(self) -> None:
        """Apply signals until shutdown, then stop the input loop."""
        for signal in self.subscription:
            self.handle_signal(signal)
        with self.lock:
            self.state = request_quit(self.state)

    def set_status(self, message: str) -> None:
        """Status sink for user-facing log messages."""
        with self.lock:
            self.state = set_status(self.state, message)
            self.needs_redraw = True

    # Keys

    def _on_command(self, command: str, count: int) -> None:
        self.state = execute_command(self.ctx, self.state, command, count)

    def _on_submit(self, action: str, text: str) -> None:
        self.state = submit_typed(self.ctx, self.state, action, text)

    def handle_key(self, key: Keystroke) -> None:
        token = parse_key(key)
        with self.lock:
            self.dispatcher.dispatch(self.state.active_view, token)
            self.needs_redraw = True

    # Main loop

    def run(self) -> None:
        """Run the UI until Quit or Shutdown."""
        if self.term is None:
            self.term = Terminal()

        self.listener = threading.Thread(target=self.listen, name="UIListener", daemon=True)
        self.listener.start()
        set_status_sink(self.set_status)

        try:
            with self.term.fullscreen(), self.term.cbreak(), self.term.hidden_cursor():
                self.main_loop()
        except KeyboardInterrupt:
            logger.info("Ctrl+C detected - shutting down")
        finally:
            set_status_sink(None)
            self.bus.shutdown()

    def main_loop(self) -> None:
        timeout = 1.0 / max(1, self.config.refresh_rate)
        last_size = None

        while True:
            with self.lock:
                if self.state.should_quit:
                    break
                size = (self.term.width, self.term.height)
                if size != last_size:
                    print(self.term.clear, end="")
                    last_size = size
                    self.needs_redraw = True
                if self.needs_redraw:
                    self.ctx.page_size = max(1, calculate_layout(self.term)["body_height"] - 1)
                    typed = self.dispatcher.line if self.dispatcher.typing else None
                    self.state = render(
                        self.term,
                        self.state,
                        self.collection,
                        typed,
                        self.config.use_colors,
                    )
                    self.needs_redraw = False

            key = self.term.inkey(timeout=timeout)
            if key:
                self.handle_key(key)

        logger.info("UI terminated")
