"""Path projection — a read-only view into a nested part of the model.

``project(model, dispatch, ("user", "name"))`` follows the path on every
root emission and publishes the value it reaches.  Mappings are walked by
key, sequences by decimal index (``"0"``), and other composite objects
(dataclasses, named tuples, plain objects) by attribute.  Methods are not
properties: a segment naming a method counts as missing.  Scalars such as
strings, numbers and ``None`` end traversal.

A projection of another projection fails along with it: when the inner
path stops resolving, the outer projection takes over its error.

Missing segments fail fast with ``PathResolutionError``.  A failure never
escapes into the root store's notification loop: the error is stored,
``read()`` raises it, subscribers that passed ``on_error`` receive it, and
with no handler a one-line warning is printed to stderr.  The next
successful emission clears it.

The projection subscribes to its root only while it has subscribers of its
own, and computes each root emission once for all of them.
"""

from __future__ import annotations

import inspect
import sys
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from tealeaf._errors import PathResolutionError
from tealeaf.reactive.container import ModelAPI
from tealeaf.reactive.observable import Readable, Writable

if TYPE_CHECKING:
    from collections.abc import Callable

    from tealeaf._types import Dispatch, Listener, ModelPath, Unsubscribe

_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))

# Placeholder while the projection has no resolvable value
_UNSET: Any = object()


def _step(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        return value[segment]
    if isinstance(value, _SCALARS):
        raise AttributeError(segment)
    if isinstance(value, Sequence) and segment.isdecimal():
        return value[int(segment)]
    attr = getattr(value, segment)
    if inspect.isroutine(attr):
        raise AttributeError(segment)
    return attr


def resolve_path(value: Any, path: Iterable[str]) -> Any:
    """Follow ``path`` from ``value`` left to right.

    An empty path returns ``value`` itself.

    Raises:
        PathResolutionError: A segment is missing; carries the segment, the
            full path, and the value at which traversal stopped.

    """
    path = tuple(path)
    acc = value
    for segment in path:
        try:
            acc = _step(acc, segment)
        except (KeyError, IndexError, AttributeError) as exc:
            raise PathResolutionError(segment, path, acc) from exc
    return acc


class Projection:
    """Derived observable over ``path`` of a root observable.

    Args:
        root: The observable to project from (a model or another projection).
        path: Property names to follow.

    """

    __slots__ = ("_error", "_handlers", "_path", "_root", "_store", "_subscribing")

    def __init__(self, root: Readable, path: Iterable[str]) -> None:
        self._root = root
        self._path: ModelPath = tuple(path)
        self._error: PathResolutionError | None = None
        # Keyed by each subscription's store unsubscribe, so equal callables stay distinct
        self._handlers: dict[Unsubscribe, Callable[[PathResolutionError], None]] = {}
        self._subscribing = False
        self._store = Writable(_UNSET, start=self._start)

    @property
    def path(self) -> ModelPath:
        return self._path

    @property
    def error(self) -> PathResolutionError | None:
        """The error from the latest emission, if it failed."""
        return self._error

    def read(self) -> Any:
        """Return the projected value of the current root model.

        Raises:
            PathResolutionError: The path, or the path of a projection this
                one is built on, does not resolve.

        """
        if self._store.subscriber_count == 0:
            return resolve_path(self._root.read(), self._path)
        if self._error is not None:
            raise self._error
        return self._store.read()

    def subscribe(
        self,
        listener: Listener,
        on_error: Callable[[PathResolutionError], None] | None = None,
    ) -> Unsubscribe:
        """Register ``listener`` for projected values.

        Raises:
            PathResolutionError: The current root value does not resolve.
                Nothing stays registered in that case.

        """

        def deliver(value: Any) -> None:
            if value is not _UNSET:
                listener(value)

        self._subscribing = True
        try:
            unsubscribe_store = self._store.subscribe(deliver)
        finally:
            self._subscribing = False

        if self._error is not None:
            unsubscribe_store()
            raise self._error

        if on_error is None:
            return unsubscribe_store

        self._handlers[unsubscribe_store] = on_error

        def unsubscribe() -> None:
            self._handlers.pop(unsubscribe_store, None)
            unsubscribe_store()

        return unsubscribe

    def _start(self, set_value: Callable[[Any], None]) -> Unsubscribe:
        def on_root(model: Any) -> None:
            try:
                value = resolve_path(model, self._path)
            except PathResolutionError as exc:
                self._fail(exc, set_value)
                return
            self._error = None
            set_value(value)

        if isinstance(self._root, Projection):
            return self._root.subscribe(on_root, on_error=lambda exc: self._fail(exc, set_value))
        return self._root.subscribe(on_root)

    def _fail(self, exc: PathResolutionError, set_value: Callable[[Any], None]) -> None:
        self._error = exc
        # Listeners skip the placeholder; a later valid value is always new to them.
        set_value(_UNSET)
        if self._subscribing:
            return
        if not self._handlers:
            print(f"  Projection error: {exc}", file=sys.stderr)
            return
        for handler in tuple(self._handlers.values()):
            handler(exc)

    def __repr__(self) -> str:
        return f"Projection(path={self._path!r})"


def project(model: Readable, dispatch: Dispatch, path: Iterable[str] = ()) -> ModelAPI:
    """Project ``model`` onto ``path``; ``dispatch`` is passed through as-is."""
    return ModelAPI(Projection(model, path), dispatch)
