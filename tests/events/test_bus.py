"""Tests for the event bus."""

import threading

import pytest

from tapedeck.events.bus import EventBus
from tapedeck.events.signals import (
    NextPlay,
    Pause,
    Replay,
    Search,
    SetStatus,
    Shutdown,
)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


class TestRouting:
    """Signals reach the subscribers of their type, in send order."""

    def test_routes_by_type(self, bus):
        player = bus.subscribe("player", Pause, NextPlay)
        ui = bus.subscribe("ui", SetStatus)

        bus.publish(Pause())
        bus.publish(SetStatus("hello"))

        assert player.get(timeout=0) == Pause()
        assert player.get(timeout=0) is None
        assert ui.get(timeout=0) == SetStatus("hello")

    def test_fifo_per_producer(self, bus):
        ui = bus.subscribe("ui", SetStatus)
        for i in range(50):
            bus.publish(SetStatus(str(i)))

        assert [ui.get(timeout=0).message for _ in range(50)] == [str(i) for i in range(50)]

    def test_fan_out(self, bus):
        first = bus.subscribe("first", Search)
        second = bus.subscribe("second", Search)

        bus.publish(Search("abba"))

        assert first.get(timeout=0) == Search("abba")
        assert second.get(timeout=0) == Search("abba")

    def test_publish_without_subscriber_does_not_block(self, bus):
        assert bus.publish(Replay()) is True

    def test_get_times_out(self, bus):
        sub = bus.subscribe("player", Pause)
        assert sub.get(timeout=0.01) is None
        assert sub.pending() == 0


class TestShutdown:
    """Shutdown reaches every actor once and stops all further processing."""

    def test_every_subscriber_observes_shutdown(self, bus):
        subs = [bus.subscribe(f"actor{i}", Pause) for i in range(3)]
        finished = []

        def consume(sub):
            handled = list(sub)
            finished.append((sub.name, handled))

        threads = [threading.Thread(target=consume, args=(s,)) for s in subs]
        for thread in threads:
            thread.start()

        bus.publish(Shutdown())
        for thread in threads:
            thread.join(timeout=2.0)

        assert all(not t.is_alive() for t in threads)
        assert sorted(name for name, _ in finished) == ["actor0", "actor1", "actor2"]

    def test_shutdown_is_idempotent(self, bus):
        sub = bus.subscribe("player", Pause)

        bus.shutdown()
        bus.shutdown()
        bus.publish(Shutdown())

        assert bus.is_shut_down
        assert sub.pending() == 1

    def test_signal_after_shutdown_is_dropped(self, bus):
        sub = bus.subscribe("player", Pause)
        bus.shutdown()

        assert bus.publish(Pause()) is False
        assert list(sub) == []

    def test_backlog_is_not_processed_after_shutdown(self, bus):
        """A Pause queued before Shutdown is never handed out afterwards."""
        sub = bus.subscribe("player", Pause)
        bus.publish(Pause())
        bus.shutdown()

        assert isinstance(sub.get(timeout=0), Shutdown)
        assert list(sub) == []

    def test_late_subscriber_sees_shutdown(self, bus):
        bus.shutdown()
        sub = bus.subscribe("late", Pause)
        assert isinstance(sub.get(timeout=0), Shutdown)

    def test_wait_for_shutdown(self, bus):
        assert bus.wait_for_shutdown(timeout=0.01) is False
        threading.Timer(0.01, bus.shutdown).start()
        assert bus.wait_for_shutdown(timeout=2.0) is True
