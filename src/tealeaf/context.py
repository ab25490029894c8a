"""Scope registry — hands a model from a provider to nested consumers.

Scopes form a tree that mirrors the caller's composition tree.  A provider
stores its ``ModelAPI`` in a scope; consumers look it up from that scope or
any descendant.  Scopes are passed explicitly, so there is no global state
and tests need no host framework::

    root = Scope()
    provide_model(root, with_middleware(logger)(update, init))

    panel = root.child()
    name, dispatch = use_model(panel, "user", "name")

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tealeaf._errors import RegistryMissingError
from tealeaf.reactive.projection import project

if TYPE_CHECKING:
    from tealeaf.reactive.container import ModelAPI


class _Key:
    """Opaque registry key; unique by identity."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return f"<key {self._name}>"


MODEL_KEY = _Key("tealeaf/model")

_MISSING: Any = object()


class Scope:
    """A keyed slot table that falls back to its parent on lookup.

    Args:
        parent: Enclosing scope, or None for a root scope.

    """

    __slots__ = ("_parent", "_slots")

    def __init__(self, parent: Scope | None = None) -> None:
        self._parent = parent
        self._slots: dict[object, Any] = {}

    @property
    def parent(self) -> Scope | None:
        return self._parent

    def child(self) -> Scope:
        """Create a nested scope."""
        return Scope(self)

    def set(self, key: object, value: Any) -> None:
        self._slots[key] = value

    def get(self, key: object, default: Any = None) -> Any:
        """Return the value for ``key`` from the nearest scope that has it."""
        scope: Scope | None = self
        while scope is not None:
            value = scope._slots.get(key, _MISSING)
            if value is not _MISSING:
                return value
            scope = scope._parent
        return default


def provide_model(scope: Scope, api: ModelAPI) -> None:
    """Make ``api`` available to ``scope`` and every scope below it."""
    scope.set(MODEL_KEY, api)


def use_model(scope: Scope, *path: str) -> ModelAPI:
    """Return the provided model, projected onto ``path``.

    Raises:
        RegistryMissingError: No ancestor scope provided a model.

    """
    api: ModelAPI | None = scope.get(MODEL_KEY)
    if api is None:
        msg = (
            "no model registered for this scope. "
            "Provide one with provide_model() in an enclosing scope."
        )
        raise RegistryMissingError(msg)
    model, dispatch = api
    return project(model, dispatch, path)
