"""Observable store — a value container that publishes on change.

``Writable`` holds a single value and notifies subscribers synchronously,
in subscription order, whenever a different object is stored.  Subscribers
are called once immediately on ``subscribe`` and again on every commit.

Reentrancy:
    A listener may call ``set`` while it is being notified.  The new value
    is stored at once and delivery restarts from the first subscriber with
    the newest value.  Each subscriber records the last commit it saw, so
    nobody receives a commit twice and nobody receives an older value after
    a newer one was committed.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from tealeaf._types import Listener, StartNotifier, Unsubscribe


class Readable(Protocol):
    """Read-only observable: point-in-time read plus change subscription."""

    def read(self) -> Any: ...

    def subscribe(self, listener: Listener) -> Unsubscribe: ...


@dataclass(slots=True, eq=False)
class _Subscription:
    """A registered listener and the last commit delivered to it."""

    listener: Listener
    seen: int = -1
    active: bool = True


class Writable:
    """Mutable observable value.

    Args:
        value: Initial value.
        start: Called with ``set`` when the first subscriber arrives.  May
            return a stop callable, run when the last subscriber leaves.

    """

    __slots__ = ("_commit", "_notifying", "_start", "_stop", "_subscriptions", "_value")

    def __init__(self, value: Any = None, start: StartNotifier | None = None) -> None:
        self._value = value
        self._commit = 0
        self._start = start
        self._stop: Callable[[], None] | None = None
        self._subscriptions: list[_Subscription] = []
        self._notifying = False

    @property
    def commit(self) -> int:
        """Number of values committed since construction."""
        return self._commit

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def read(self) -> Any:
        """Return the current value."""
        return self._value

    def set(self, value: Any) -> None:
        """Store ``value`` and notify subscribers.  Identical objects are ignored."""
        if value is self._value:
            return
        self._value = value
        self._commit += 1
        if not self._notifying:
            self._notify()

    def update(self, fn: Callable[[Any], Any]) -> None:
        """Replace the value with ``fn(current)``.

        If ``fn`` raises, the value is left untouched and nobody is notified.
        """
        self.set(fn(self._value))

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` and call it with the current value."""
        sub = _Subscription(listener)
        self._subscriptions.append(sub)

        def unsubscribe() -> None:
            if not sub.active:
                return
            sub.active = False
            self._subscriptions.remove(sub)
            if not self._subscriptions and self._stop is not None:
                stop, self._stop = self._stop, None
                stop()

        try:
            if len(self._subscriptions) == 1 and self._start is not None:
                self._stop = self._start(self.set)
            self._deliver(sub)
        except BaseException:
            unsubscribe()
            raise
        return unsubscribe

    def _deliver(self, sub: _Subscription) -> None:
        if sub.active and sub.seen < self._commit:
            sub.seen = self._commit
            sub.listener(self._value)

    def _notify(self) -> None:
        self._notifying = True
        try:
            while True:
                commit = self._commit
                for sub in tuple(self._subscriptions):
                    self._deliver(sub)
                    if self._commit != commit:
                        # A listener committed a newer value; start over with it.
                        break
                if self._commit == commit:
                    return
        finally:
            self._notifying = False


class _ReadOnly:
    """Read-only view over a Writable."""

    __slots__ = ("_source",)

    def __init__(self, source: Writable) -> None:
        self._source = source

    def read(self) -> Any:
        return self._source.read()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._source.subscribe(listener)

    def __repr__(self) -> str:
        return f"readonly({self._source.read()!r})"


def readonly(store: Writable) -> Readable:
    """Hide ``set``/``update`` of a writable store from consumers."""
    return _ReadOnly(store)
