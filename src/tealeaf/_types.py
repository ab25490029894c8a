"""Shared type definitions for tealeaf."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tealeaf.reactive.container import ModelAPI

# Entry point for submitting a message
type Dispatch = Callable[[Any], None]

# msg -> (model -> model)
type UpdateFunction = Callable[[Any], Callable[[Any], Any]]

# (api) -> (next) -> dispatch
type Middleware = Callable[[ModelAPI], Callable[[Dispatch], Dispatch]]

# Called with every emitted value
type Listener = Callable[[Any], None]

# Removes a listener; safe to call repeatedly
type Unsubscribe = Callable[[], None]

# Called when an observable is first subscribed; may return a stop callable
type StartNotifier = Callable[[Callable[[Any], None]], Callable[[], None] | None]

# Sequence of property names into the model
type ModelPath = tuple[str, ...]
