"""EventBus — in-process pub/sub for match events.

The game-mode core publishes every state transition it makes (VIP assigned,
VIP cleared, elimination processed, standings recomputed, match ended) so
that observers (the HTTP surface, the simulation script, tests) can follow a
match without reaching into its state.

Platform callbacks are serialized, so publishing never races with match
logic; the lock only protects subscribers living on other threads (e.g. a
web server reading events while the tick loop runs).
"""

from __future__ import annotations

import queue
import threading


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 256) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._subscribers: list[tuple[queue.Queue, str | None]] = []

    def subscribe(self, event_type: str | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives matching events.

        With ``event_type`` set, only events of that type are delivered.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append((q, event_type))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, f) for s, f in self._subscribers if s is not q]

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
                    # Drop oldest so state changes are never lost behind stale ones
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
