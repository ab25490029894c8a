"""Model container — owns the store and applies transitions.

A container pairs a read-only model observable with the raw dispatch that
runs ``update(msg)(model)`` and commits the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from tealeaf.reactive.observable import Readable, Writable, readonly

if TYPE_CHECKING:
    from tealeaf._types import Dispatch, UpdateFunction


class ModelAPI(NamedTuple):
    """A model observable and the dispatch that changes it.

    Unpacks as ``model, dispatch = api``.  Middleware receive one shared
    instance whose ``dispatch`` re-enters the whole chain.
    """

    model: Readable
    dispatch: Dispatch

    def snapshot(self) -> Any:
        """Return the current model value."""
        return self.model.read()


def create_model(update: UpdateFunction, init: Any) -> ModelAPI:
    """Build a container around ``init`` driven by ``update``.

    ``dispatch(msg)`` computes ``update(msg)(current)``, commits it and
    notifies subscribers before returning.  Exceptions raised by ``update``
    propagate unchanged and leave the model as it was.

    A transition that returns the very same object (``is``) commits nothing
    and notifies nobody.  Models are meant to be replaced, so this only
    matters for scalar models: whether ``1 + 0`` or an equal string is the
    same object is up to the interpreter, and such a dispatch may or may
    not notify.  Wrap scalars in a container if every dispatch must emit.
    """
    store = Writable(init)

    def dispatch(msg: Any) -> None:
        store.update(update(msg))

    return ModelAPI(readonly(store), dispatch)
