"""Error taxonomy for the targeting engine.

Only ``ConfigurationError`` is ever raised. ``MissingReference`` and
``StaleReference`` name conditions that degrade a single evaluation tick;
they are never raised, and log lines reporting them carry the class name
in brackets.
"""

from __future__ import annotations


class TargetingError(Exception):
    """Base class for all targeting errors."""


class ConfigurationError(TargetingError, ValueError):
    """A tunable is outside its allowed domain."""

    def __init__(self, field: str, value: object, expected: str) -> None:
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"{field} must be {expected} (got {value!r})")


class MissingReference(TargetingError):
    """The agent or camera is absent when a check needs it."""


class StaleReference(TargetingError):
    """A candidate or target vanished between query and use."""
