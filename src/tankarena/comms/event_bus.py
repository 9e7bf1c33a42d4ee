"""EventBus — thread-safe pub/sub for arena events.

The engine publishes discrete gameplay events here (score changes, round
and match wins, kills, pickups) for the renderer, the network mirror and
the API layer.  Every subscriber gets its own bounded queue.
"""

from __future__ import annotations

import queue
import threading

_DEFAULT_MAXSIZE = 1000


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = _DEFAULT_MAXSIZE) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[queue.Queue, str | None]] = []
        self._maxsize = maxsize

    def subscribe(self, event_type: str | None = None) -> queue.Queue:
        """Subscribe to events.  Returns a Queue that receives them.

        With *event_type* set, only events of that type are delivered.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append((q, event_type))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, f) for s, f in self._subscribers if s is not q]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, wanted in self._subscribers:
                if wanted is not None and wanted != event_type:
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so the newest event (round/match results) gets in
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
