"""Event bus connecting independently running actors.

Each actor subscribes with the signal types it consumes and gets an inbox
(a ``queue.Queue``). Publishing routes a signal to the inbox of every
subscriber of its type, so an actor waits on all of its signals at once and
handles them in arrival order. Signals from one producer stay in send order;
there is no ordering across producers.

Inboxes are unbounded, so ``publish`` never blocks on a slow consumer.

``Shutdown`` goes to every subscriber. Once it has been published the bus
drops everything else, and ``Subscription.get`` reports ``Shutdown`` ahead of
any backlog, so no actor handles another signal after shutdown.
"""

import queue
import threading
from typing import Iterator, Optional

from loguru import logger

from .signals import Shutdown, Signal

_SHUTDOWN = Shutdown()


class Subscription:
    """One actor's inbox on the bus."""

    def __init__(self, bus: "EventBus", name: str, signal_types: frozenset[type]):
        self.bus = bus
        self.name = name
        self.signal_types = signal_types
        self._inbox: queue.Queue[Signal] = queue.Queue()

    def accepts(self, signal: Signal) -> bool:
        return isinstance(signal, Shutdown) or isinstance(signal, tuple(self.signal_types))

    def deliver(self, signal: Signal) -> None:
        self._inbox.put(signal)

    def get(self, timeout: Optional[float] = None) -> Optional[Signal]:
        """Wait for the next signal.

        Args:
            timeout: Seconds to wait (None blocks until a signal arrives)

        Returns:
            The next signal, ``Shutdown`` once the bus is shut down, or None
            if the timeout elapsed
        """
        if self.bus.is_shut_down:
            return _SHUTDOWN
        try:
            signal = self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None
        if self.bus.is_shut_down:
            return _SHUTDOWN
        return signal

    def pending(self) -> int:
        return self._inbox.qsize()

    def __iter__(self) -> Iterator[Signal]:
        """Yield signals until ``Shutdown`` is observed (not yielded)."""
        while True:
            signal = self.get()
            if signal is None:
                continue
            if isinstance(signal, Shutdown):
                logger.info(f"{self.name}: shutdown observed")
                return
            yield signal


class EventBus:
    """Typed, one-directional signal routing between actors."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()
        self._shutdown = threading.Event()

    @property
    def is_shut_down(self) -> bool:
        return self._shutdown.is_set()

    def subscribe(self, name: str, *signal_types: type) -> Subscription:
        """Register an actor for ``signal_types`` (Shutdown is always included)."""
        subscription = Subscription(self, name, frozenset(signal_types))
        with self._lock:
            self._subscriptions.append(subscription)
            if self._shutdown.is_set():
                subscription.deliver(_SHUTDOWN)
        logger.debug(
            f"{name} subscribed to {sorted(t.__name__ for t in signal_types)}"
        )
        return subscription

    def publish(self, signal: Signal) -> bool:
        """Route ``signal`` to its subscribers.

        Returns:
            False if the signal was dropped (bus already shut down)
        """
        if isinstance(signal, Shutdown):
            self.shutdown()
            return True

        with self._lock:
            if self._shutdown.is_set():
                logger.debug(f"Dropped {type(signal).__name__} after shutdown")
                return False
            receivers = [s for s in self._subscriptions if s.accepts(signal)]
            for subscription in receivers:
                subscription.deliver(signal)

        if not receivers:
            logger.debug(f"No subscriber for {type(signal).__name__}")
        return True

    def shutdown(self) -> None:
        """Publish ``Shutdown`` to every subscriber. Safe to call repeatedly."""
        with self._lock:
            if self._shutdown.is_set():
                return
            self._shutdown.set()
            for subscription in self._subscriptions:
                subscription.deliver(_SHUTDOWN)
        logger.info("Shutdown published")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until shutdown (True) or until the timeout elapses (False)."""
        return self._shutdown.wait(timeout)
