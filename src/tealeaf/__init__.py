"""Tealeaf — unidirectional state management for Python.

One model value, replaced only by pure transition functions driven by
messages.  Middleware intercept messages on the way in; subscribers and
path projections observe the model on the way out.

Quick start::

    from tealeaf import with_middleware

    def update(msg):
        return lambda model: {**model, "n": model["n"] + msg["n"]}

    model, dispatch = with_middleware()(update, {"n": 0})
    model.subscribe(print)
    dispatch({"n": 3})

Sharing a model with nested consumers::

    from tealeaf import Scope, provide_model, use_model

    scope = Scope()
    provide_model(scope, (model, dispatch))
    n, dispatch = use_model(scope.child(), "n")

"""

from typing import Any

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "ConstructionError",
    "ModelAPI",
    "PathResolutionError",
    "RegistryMissingError",
    "Scope",
    "TealeafConfig",
    "TealeafError",
    "__version__",
    "create_model",
    "load_config",
    "project",
    "provide_model",
    "use_model",
    "with_middleware",
]

_LAZY = {
    "ConfigError": "tealeaf._errors",
    "ConstructionError": "tealeaf._errors",
    "PathResolutionError": "tealeaf._errors",
    "RegistryMissingError": "tealeaf._errors",
    "TealeafError": "tealeaf._errors",
    "TealeafConfig": "tealeaf.config",
    "load_config": "tealeaf.config_loader",
    "Scope": "tealeaf.context",
    "provide_model": "tealeaf.context",
    "use_model": "tealeaf.context",
    "ModelAPI": "tealeaf.reactive.container",
    "create_model": "tealeaf.reactive.container",
    "with_middleware": "tealeaf.reactive.pipeline",
    "project": "tealeaf.reactive.projection",
}


def __getattr__(name: str) -> Any:
    """Lazy imports for the public API.

    Keeps ``import tealeaf`` fast while providing a flat top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
