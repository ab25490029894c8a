"""Tealeaf error hierarchy.

All tealeaf-specific errors inherit from TealeafError for easy catching.
Exceptions raised by a transition function are never wrapped; they reach
the dispatch caller unchanged.
"""

from typing import Any


class TealeafError(Exception):
    """Base error for all tealeaf operations."""


class ConfigError(TealeafError):
    """Invalid or missing configuration."""


class ConstructionError(TealeafError):
    """Dispatch was invoked before the middleware chain finished building."""


class RegistryMissingError(ConfigError):
    """A consumer asked a scope for a model that no ancestor provided."""


class PathResolutionError(TealeafError):
    """A projection path segment does not exist on the value reached so far.

    Attributes:
        segment: The segment that could not be resolved.
        path: The full projection path.
        value: The value at which traversal stopped.

    """

    def __init__(self, segment: str, path: tuple[str, ...], value: Any) -> None:
        self.segment = segment
        self.path = path
        self.value = value
        super().__init__(
            f"Model or node of model {value!r} does not have property {segment!r} "
            f"(path: {'.'.join(path)})"
        )
