"""Reactive core — model container, middleware pipeline, path projection.

Messages flow from ``dispatch`` through the middleware chain into the
container, which commits ``update(msg)(model)`` to its store and notifies
every subscriber, projections included.
"""

from tealeaf.reactive.container import ModelAPI, create_model
from tealeaf.reactive.observable import Readable, Writable, readonly
from tealeaf.reactive.pipeline import compose, with_middleware
from tealeaf.reactive.projection import Projection, project, resolve_path

__all__ = [
    "ModelAPI",
    "Projection",
    "Readable",
    "Writable",
    "compose",
    "create_model",
    "project",
    "readonly",
    "resolve_path",
    "with_middleware",
]
