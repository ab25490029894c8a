"""Shared test fixtures for tealeaf."""

from __future__ import annotations

from typing import Any

import pytest


def add(msg: dict[str, Any]) -> Any:
    """Transition: add ``msg["n"]`` to ``model["n"]``."""
    return lambda model: {**model, "n": model["n"] + msg["n"]}


def rename(msg: dict[str, Any]) -> Any:
    """Transition: replace the whole model with ``msg["model"]``."""
    return lambda model: msg["model"]


def record_middleware(name: str, calls: list[str]) -> Any:
    """Middleware that appends ``name:<n>`` to ``calls`` and forwards."""

    def middleware(api: Any) -> Any:
        def wrap(next_dispatch: Any) -> Any:
            def dispatch(msg: dict[str, Any]) -> None:
                calls.append(f"{name}:{msg['n']}")
                next_dispatch(msg)

            return dispatch

        return wrap

    return middleware


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def user_model() -> dict[str, Any]:
    return {"user": {"name": "Amy"}}
