"""Middleware pipeline — wraps a container's dispatch in interceptors.

A middleware is ``api -> next -> dispatch``.  It gets the shared
``ModelAPI`` and the next dispatch in the chain, and returns a dispatch
that may forward to ``next`` once, several times, with a different
message, or not at all.

The first middleware supplied is the outermost: it sees every message
before anyone else.  The last one wraps the container's raw dispatch.

``api.dispatch`` always enters the finished chain from the outermost
middleware, even when called from inside the chain.  This works through a
one-shot cell: middleware capture the cell while the chain is still being
built, and the composed dispatch is written into it exactly once, after
every middleware has been wired and before ``with_middleware`` returns.
Calling it before that raises ``ConstructionError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tealeaf._errors import ConstructionError
from tealeaf.reactive.container import ModelAPI, create_model

if TYPE_CHECKING:
    from collections.abc import Callable

    from tealeaf._types import Dispatch, Middleware, UpdateFunction


def _not_ready(msg: Any) -> None:
    error = (
        "dispatch invoked during middleware construction. "
        f"Other middleware would not be applied to {msg!r}."
    )
    raise ConstructionError(error)


class _DispatchCell:
    """Forward reference to the composed dispatch."""

    __slots__ = ("_target",)

    def __init__(self) -> None:
        self._target: Dispatch = _not_ready

    @property
    def bound(self) -> bool:
        return self._target is not _not_ready

    def bind(self, dispatch: Dispatch) -> None:
        if self.bound:
            msg = "middleware chain is already composed"
            raise ConstructionError(msg)
        self._target = dispatch

    def __call__(self, msg: Any) -> None:
        self._target(msg)


def compose(chain: list[Callable[[Dispatch], Dispatch]], raw: Dispatch) -> Dispatch:
    """Right-fold ``chain`` onto ``raw``: ``chain[0](chain[1](...(raw)))``."""
    dispatch = raw
    for wrap in reversed(chain):
        dispatch = wrap(dispatch)
    return dispatch


def with_middleware(*middlewares: Middleware) -> Callable[[UpdateFunction, Any], ModelAPI]:
    """Return a container factory whose dispatch runs through ``middlewares``.

    Usage::

        model, dispatch = with_middleware(logger, validator)(update, init)

    With no middleware the factory is ``create_model`` itself.

    """

    def factory(update: UpdateFunction, init: Any) -> ModelAPI:
        model, raw_dispatch = create_model(update, init)
        if not middlewares:
            return ModelAPI(model, raw_dispatch)

        cell = _DispatchCell()
        api = ModelAPI(model, cell)
        chain = [middleware(api) for middleware in middlewares]
        dispatch = compose(chain, raw_dispatch)
        cell.bind(dispatch)
        return ModelAPI(model, dispatch)

    return factory
