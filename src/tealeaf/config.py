"""Tealeaf configuration.

TealeafConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass

from tealeaf._errors import ConfigError


@dataclass(frozen=True, slots=True)
class TealeafConfig:
    """Configuration for dispatch observability.

    Attributes:
        max_events: Ring buffer size of the collector's event log.
        verbose: Print a one-line summary per dispatch to stderr.
        slow_ms: Only print summaries for dispatches taking at least this
            many milliseconds (0 prints every dispatch).

    """

    max_events: int = 10_000
    verbose: bool = False
    slow_ms: float = 0.0

    def __post_init__(self) -> None:
        if self.max_events <= 0:
            msg = f"max_events must be positive, got {self.max_events}"
            raise ConfigError(msg)
        if self.slow_ms < 0:
            msg = f"slow_ms must not be negative, got {self.slow_ms}"
            raise ConfigError(msg)
