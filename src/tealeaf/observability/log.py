"""Event log — bounded record of what a collector saw.

Keeps the latest ``StoreEvent`` objects in a ring buffer and answers the
questions a dispatch trace raises: which messages ran, which failed, and
which were slow.

"""

from collections import Counter, deque
from typing import Any

from tealeaf.observability.events import DispatchFailed, MessageDispatched, StoreEvent


class EventLog:
    """Ring buffer of dispatch events; the oldest fall off when full.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events",)

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[StoreEvent] = deque(maxlen=max_events)

    @property
    def max_events(self) -> int:
        return self._events.maxlen or 0

    def append(self, event: StoreEvent) -> None:
        self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        message_type: str | None = None,
        limit: int = 100,
    ) -> list[StoreEvent]:
        """Return matching events, most recent first.

        Args:
            event_type: Only events of this class.
            message_type: Only events about this message type.
            limit: Maximum number of events to return.

        """
        results: list[StoreEvent] = []
        for event in reversed(self._events):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if message_type is not None and getattr(event, "message_type", None) != message_type:
                continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[StoreEvent]:
        """Return the N most recent events in the order they happened."""
        return list(self._events)[-n:]

    def failures(self) -> list[DispatchFailed]:
        """Failed dispatches, oldest first."""
        return [e for e in self._events if isinstance(e, DispatchFailed)]

    def message_counts(self) -> Counter[str]:
        """How often each message type completed a dispatch."""
        return Counter(e.message_type for e in self._events if isinstance(e, MessageDispatched))

    def clear(self) -> int:
        """Drop every event and return how many there were."""
        count = len(self._events)
        self._events.clear()
        return count

    def __len__(self) -> int:
        return len(self._events)

    def summary(self) -> dict[str, Any]:
        """Totals for a quick look at a trace."""
        dispatched = [e for e in self._events if isinstance(e, MessageDispatched)]
        slowest = max(dispatched, key=lambda e: e.duration_ms, default=None)
        return {
            "total": len(self._events),
            "max_events": self.max_events,
            "dispatched": len(dispatched),
            "failed": len(self.failures()),
            "slowest": None if slowest is None else (slowest.message_type, slowest.duration_ms),
        }
