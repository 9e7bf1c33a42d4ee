"""Unit tests for EventBus — thread-safe pub/sub messaging.

Tests subscribe/unsubscribe, publish/receive, type filtering, queue
overflow (drop oldest) and concurrent publishing.
"""
from __future__ import annotations

import queue
import threading

import pytest

from tankarena.comms.event_bus import EventBus


@pytest.mark.unit
class TestEventBusBasics:
    """Core subscribe/publish/unsubscribe functionality."""

    def test_subscribe_returns_queue(self):
        bus = EventBus()
        assert isinstance(bus.subscribe(), queue.Queue)

    def test_publish_delivers_to_subscriber(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("score_changed", {"scores": [1, 0]})
        msg = q.get_nowait()
        assert msg["type"] == "score_changed"
        assert msg["data"]["scores"] == [1, 0]

    def test_publish_without_data(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("ping")
        msg = q.get_nowait()
        assert msg["type"] == "ping"
        assert "data" not in msg

    def test_multiple_subscribers(self):
        bus = EventBus()
        q1 = bus.subscribe()
        q2 = bus.subscribe()
        bus.publish("round_won", {"player_index": 0})
        assert q1.get_nowait()["type"] == "round_won"
        assert q2.get_nowait()["type"] == "round_won"
        assert bus.subscriber_count == 2

    def test_unsubscribe_stops_delivery(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.unsubscribe(q)
        bus.publish("after_unsub")
        assert q.empty()
        assert bus.subscriber_count == 0

    def test_unsubscribe_nonexistent_is_safe(self):
        bus = EventBus()
        bus.unsubscribe(queue.Queue())  # Should not raise

    def test_type_filter(self):
        bus = EventBus()
        q = bus.subscribe("match_over")
        bus.publish("score_changed", {"scores": [1, 0]})
        bus.publish("match_over", {"winner": 1})
        assert q.qsize() == 1
        assert q.get_nowait()["data"]["winner"] == 1


@pytest.mark.unit
class TestEventBusOverflow:
    """Queue overflow behavior — drop oldest message when full."""

    def test_default_maxsize(self):
        assert EventBus().subscribe().maxsize == 1000

    def test_overflow_drops_oldest(self):
        bus = EventBus(maxsize=10)
        q = bus.subscribe()
        for i in range(10):
            bus.publish("fill", {"seq": i})
        assert q.full()

        bus.publish("match_over", {"seq": 10})

        msgs = []
        while not q.empty():
            msgs.append(q.get_nowait())
        assert msgs[0]["data"]["seq"] == 1
        assert msgs[-1]["type"] == "match_over"


@pytest.mark.unit
class TestEventBusThreadSafety:
    def test_concurrent_publish(self):
        bus = EventBus()
        q = bus.subscribe()
        errors = []

        def publisher(thread_id: int):
            try:
                for i in range(50):
                    bus.publish("tank_destroyed", {"tid": thread_id, "seq": i})
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=publisher, args=(t,)) for t in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert q.qsize() == 200
