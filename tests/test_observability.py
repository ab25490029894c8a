"""Tests for tealeaf.observability — dispatch events and collector."""

from __future__ import annotations

from typing import Any

import pytest

from tealeaf.config import TealeafConfig
from tealeaf.observability.collector import DispatchCollector, message_type
from tealeaf.observability.events import (
    DispatchFailed,
    MessageDispatched,
    ModelCommitted,
    now_ns,
)
from tealeaf.observability.log import EventLog
from tealeaf.reactive.pipeline import with_middleware

from .conftest import add


def _dispatched(kind: str = "add", depth: int = 1) -> MessageDispatched:
    return MessageDispatched(
        message_type=kind, changed=True, duration_ms=0.1, depth=depth, timestamp_ns=now_ns(),
    )


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_dispatched())
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_dispatched(f"m{i}"))
        assert len(log) == 5
        assert log.max_events == 5
        assert log.recent(1)[0].message_type == "m9"

    def test_query_by_type_and_message(self) -> None:
        log = EventLog()
        log.append(_dispatched("a"))
        log.append(ModelCommitted(model_type="dict", commit=0, timestamp_ns=now_ns()))
        log.append(_dispatched("b"))

        assert len(log.query(event_type=MessageDispatched)) == 2
        assert [e.message_type for e in log.query(message_type="b")] == ["b"]

    def test_query_newest_first_with_limit(self) -> None:
        log = EventLog()
        for i in range(4):
            log.append(_dispatched(f"m{i}"))
        assert [e.message_type for e in log.query(limit=2)] == ["m3", "m2"]

    def test_failures_and_message_counts(self) -> None:
        log = EventLog()
        log.append(_dispatched("add"))
        log.append(DispatchFailed("add", "KeyError", "'x'", 1, timestamp_ns=now_ns()))
        log.append(_dispatched("add"))
        log.append(_dispatched("reset"))

        assert [e.error_type for e in log.failures()] == ["KeyError"]
        assert log.message_counts() == {"add": 2, "reset": 1}

    def test_summary_and_clear(self) -> None:
        log = EventLog(max_events=50)
        log.append(MessageDispatched("fast", True, 0.5, 1, timestamp_ns=now_ns()))
        log.append(MessageDispatched("slow", True, 9.0, 1, timestamp_ns=now_ns()))
        log.append(ModelCommitted(model_type="dict", commit=0, timestamp_ns=now_ns()))
        summary = log.summary()
        assert summary == {
            "total": 3,
            "max_events": 50,
            "dispatched": 2,
            "failed": 0,
            "slowest": ("slow", 9.0),
        }
        assert log.clear() == 3
        assert len(log) == 0
        assert log.summary()["slowest"] is None


# ---------------------------------------------------------------------------
# DispatchCollector
# ---------------------------------------------------------------------------


class TestMessageType:
    """Naming messages for events."""

    def test_mapping_type_key(self) -> None:
        assert message_type({"type": "increment", "n": 1}) == "increment"

    def test_type_attribute(self) -> None:
        class Msg:
            type = "rename"

        assert message_type(Msg()) == "rename"

    def test_class_name_fallback(self) -> None:
        assert message_type({"n": 1}) == "dict"


class TestCollectorMiddleware:
    """The recording middleware."""

    def test_records_each_dispatch(self) -> None:
        collector = DispatchCollector()
        _, dispatch = with_middleware(collector.middleware)(add, {"n": 0})
        dispatch({"type": "add", "n": 1})
        dispatch({"type": "add", "n": 0})

        events = collector.log.recent()
        assert [type(e) for e in events] == [MessageDispatched, MessageDispatched]
        assert [e.changed for e in events] == [True, True]
        assert all(e.depth == 1 for e in events)

    def test_unchanged_when_message_swallowed(self) -> None:
        def swallow(api: Any) -> Any:
            return lambda next_dispatch: lambda msg: None

        collector = DispatchCollector()
        _, dispatch = with_middleware(collector.middleware, swallow)(add, {"n": 0})
        dispatch({"type": "noop", "n": 1})
        (event,) = collector.log.recent()
        assert event.changed is False

    def test_records_failure_and_reraises(self) -> None:
        def update(msg: Any) -> Any:
            raise KeyError(msg["type"])

        collector = DispatchCollector()
        model, dispatch = with_middleware(collector.middleware)(update, {"n": 0})
        with pytest.raises(KeyError):
            dispatch({"type": "bad"})

        (event,) = collector.log.recent()
        assert isinstance(event, DispatchFailed)
        assert event.error_type == "KeyError"
        assert collector.depth == 0
        assert model.read() == {"n": 0}

    def test_reentrant_dispatch_depth(self) -> None:
        collector = DispatchCollector()

        def chain_reaction(api: Any) -> Any:
            def wrap(next_dispatch: Any) -> Any:
                def dispatch(msg: dict[str, Any]) -> None:
                    if msg["type"] == "first":
                        api.dispatch({"type": "second", "n": 1})
                    next_dispatch(msg)

                return dispatch

            return wrap

        _, dispatch = with_middleware(collector.middleware, chain_reaction)(add, {"n": 0})
        dispatch({"type": "first", "n": 1})

        events = collector.log.recent()
        assert [(e.message_type, e.depth) for e in events] == [("second", 2), ("first", 1)]

    def test_verbose_prints_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        collector = DispatchCollector(verbose=True)
        _, dispatch = with_middleware(collector.middleware)(add, {"n": 0})
        dispatch({"type": "add", "n": 1})
        assert "dispatch add: changed" in capsys.readouterr().err

    def test_slow_threshold_suppresses_fast_dispatches(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        collector = DispatchCollector(verbose=True, slow_ms=60_000.0)
        _, dispatch = with_middleware(collector.middleware)(add, {"n": 0})
        dispatch({"type": "add", "n": 1})
        assert capsys.readouterr().err == ""
        assert len(collector.log) == 1

    def test_from_config(self) -> None:
        collector = DispatchCollector.from_config(TealeafConfig(max_events=3))
        assert collector.log.max_events == 3


class TestWatch:
    """Recording model emissions."""

    def test_records_commits(self) -> None:
        collector = DispatchCollector()
        model, dispatch = with_middleware()(add, {"n": 0})
        unsubscribe = collector.watch(model)
        dispatch({"n": 1})
        unsubscribe()
        dispatch({"n": 1})

        commits = collector.log.query(event_type=ModelCommitted)
        assert [e.commit for e in commits] == [1, 0]
        assert commits[0].model_type == "dict"
