"""Dispatch event model.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

"""

import time
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MessageDispatched:
    """A message passed through the recording middleware.

    Attributes:
        message_type: The message's ``type`` key or class name.
        changed: True if the model object was replaced while it ran.
        duration_ms: Time spent in the rest of the chain.
        depth: 1 for a top-level dispatch, higher for re-entrant ones.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    message_type: str
    changed: bool
    duration_ms: float
    depth: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class DispatchFailed:
    """The rest of the chain raised while handling a message.

    Attributes:
        message_type: The message's ``type`` key or class name.
        error_type: Exception class name.
        error: ``str()`` of the exception.
        depth: Re-entrancy depth of the failing dispatch.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    message_type: str
    error_type: str
    error: str
    depth: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModelCommitted:
    """A watched model emitted a value.

    Attributes:
        model_type: Class name of the emitted value.
        commit: Emission counter, starting at 0 for the initial value.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    model_type: str
    commit: int
    timestamp_ns: int


type StoreEvent = MessageDispatched | DispatchFailed | ModelCommitted


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
