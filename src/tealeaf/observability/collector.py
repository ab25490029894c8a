"""Dispatch collector — records what flows through a model.

``DispatchCollector.middleware`` is an ordinary middleware: install it
first to see every message, or last to time only the raw update.  It
records a ``MessageDispatched`` event per message, or ``DispatchFailed``
before re-raising when the rest of the chain fails.  ``watch`` records a
``ModelCommitted`` event per model emission.

With ``verbose=True`` a one-line summary per dispatch is printed to
stderr, limited to dispatches taking at least ``slow_ms``.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tealeaf.observability.events import (
    DispatchFailed,
    MessageDispatched,
    ModelCommitted,
    now_ns,
)
from tealeaf.observability.log import EventLog

if TYPE_CHECKING:
    from collections.abc import Callable

    from tealeaf._types import Dispatch, Unsubscribe
    from tealeaf.config import TealeafConfig
    from tealeaf.reactive.container import ModelAPI
    from tealeaf.reactive.observable import Readable


def message_type(msg: Any) -> str:
    """Name a message by its ``type`` key or attribute, else its class."""
    if isinstance(msg, Mapping) and "type" in msg:
        return str(msg["type"])
    kind = getattr(msg, "type", None)
    if isinstance(kind, str):
        return kind
    return type(msg).__name__


class DispatchCollector:
    """Event collector for one or more models.

    Args:
        log: The EventLog to store events in.
        verbose: Print dispatch summaries to stderr.
        slow_ms: Minimum duration for a printed summary.

    """

    __slots__ = ("_depth", "_log", "_slow_ms", "_verbose")

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        verbose: bool = False,
        slow_ms: float = 0.0,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._verbose = verbose
        self._slow_ms = slow_ms
        self._depth = 0

    @classmethod
    def from_config(cls, config: TealeafConfig) -> DispatchCollector:
        return cls(
            EventLog(config.max_events),
            verbose=config.verbose,
            slow_ms=config.slow_ms,
        )

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    @property
    def depth(self) -> int:
        """Number of recorded dispatches currently in progress."""
        return self._depth

    # ----- Middleware -----

    def middleware(self, api: ModelAPI) -> Callable[[Dispatch], Dispatch]:
        """Recording middleware; pass the bound method to ``with_middleware``."""

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(msg: Any) -> None:
                kind = message_type(msg)
                before = api.model.read()
                self._depth += 1
                depth = self._depth
                t0 = time.perf_counter()
                try:
                    next_dispatch(msg)
                except Exception as exc:
                    self.record_failure(kind, exc, depth=depth)
                    raise
                finally:
                    self._depth -= 1
                duration_ms = (time.perf_counter() - t0) * 1000
                self.record_dispatch(
                    kind,
                    changed=api.model.read() is not before,
                    duration_ms=duration_ms,
                    depth=depth,
                )

            return dispatch

        return wrap

    # ----- Model emissions -----

    def watch(self, model: Readable) -> Unsubscribe:
        """Record a ``ModelCommitted`` event for every emission of ``model``."""
        commit = 0

        def on_value(value: Any) -> None:
            nonlocal commit
            self._log.append(
                ModelCommitted(
                    model_type=type(value).__name__,
                    commit=commit,
                    timestamp_ns=now_ns(),
                )
            )
            commit += 1

        return model.subscribe(on_value)

    # ----- Recording -----

    def record_dispatch(
        self,
        message_type: str,
        *,
        changed: bool = False,
        duration_ms: float = 0.0,
        depth: int = 1,
    ) -> None:
        """Record a completed dispatch."""
        self._log.append(
            MessageDispatched(
                message_type=message_type,
                changed=changed,
                duration_ms=duration_ms,
                depth=depth,
                timestamp_ns=now_ns(),
            )
        )
        if self._verbose and duration_ms >= self._slow_ms:
            indent = "  " * depth
            state = "changed" if changed else "unchanged"
            print(
                f"{indent}dispatch {message_type}: {state} in {duration_ms:.2f}ms",
                file=sys.stderr,
            )

    def record_failure(self, message_type: str, exc: BaseException, *, depth: int = 1) -> None:
        """Record a dispatch whose downstream chain raised."""
        self._log.append(
            DispatchFailed(
                message_type=message_type,
                error_type=type(exc).__name__,
                error=str(exc),
                depth=depth,
                timestamp_ns=now_ns(),
            )
        )
        if self._verbose:
            print(
                f"{'  ' * depth}dispatch {message_type}: {type(exc).__name__}: {exc}",
                file=sys.stderr,
            )
