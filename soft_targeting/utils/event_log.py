"""Thread-safe log of target found/lost events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from soft_targeting.core.enums import TargetEventKind


@dataclass(frozen=True, slots=True)
class TargetEvent:
    """A single lock transition."""

    step: int
    time: float
    kind: TargetEventKind
    handle: int


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Thread-safe via a simple lock: writes happen at most twice per
    evaluation and reads are non-blocking copies.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int | None = 10_000) -> None:
        self._buffer: deque[TargetEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def append(self, event: TargetEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since_step(self, step: int) -> list[TargetEvent]:
        """Return all events with step >= *step*."""
        with self._lock:
            return [e for e in self._buffer if e.step >= step]

    def latest(self, count: int = 50) -> list[TargetEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
