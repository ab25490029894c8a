"""Dispatch observability — events, a bounded log, and a recording middleware.

Quick Start:
    >>> from tealeaf import with_middleware
    >>> from tealeaf.observability import DispatchCollector
    >>> collector = DispatchCollector()
    >>> model, dispatch = with_middleware(collector.middleware)(update, init)
    >>> dispatch({"type": "increment"})
    >>> collector.log.recent(1)

"""

from tealeaf.observability.collector import DispatchCollector, message_type
from tealeaf.observability.events import (
    DispatchFailed,
    MessageDispatched,
    ModelCommitted,
    StoreEvent,
    now_ns,
)
from tealeaf.observability.log import EventLog

__all__ = [
    "DispatchCollector",
    "DispatchFailed",
    "EventLog",
    "MessageDispatched",
    "ModelCommitted",
    "StoreEvent",
    "message_type",
    "now_ns",
]
