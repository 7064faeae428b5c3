"""TimerManager — simulated-clock periodic scheduler.

Timers fire only from ``advance()``, on the caller's thread. A callback is
never re-entered: timers scheduled or resumed from inside a callback are
picked up on the next ``advance()``.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

# Upper bound on catch-up firings per timer per advance() call
MAX_CATCH_UP_FIRES = 32


@dataclass(slots=True)
class _Timer:
    interval: float
    callback: Callable[[], None]
    remaining: float
    paused: bool = False


@dataclass(frozen=True, slots=True)
class TimerHandle:
    """Opaque reference to a scheduled timer."""

    timer_id: int
    _manager: TimerManager | None = field(default=None, compare=False, repr=False)

    @property
    def valid(self) -> bool:
        return self._manager is not None and self._manager.exists(self)


class TimerManager:
    """Periodic scheduler driven by an explicit clock."""

    __slots__ = ("_timers", "_ids", "_now", "_firing")

    def __init__(self) -> None:
        self._timers: dict[int, _Timer] = {}
        self._ids = itertools.count(1)
        self._now: float = 0.0
        self._firing = False

    @property
    def now(self) -> float:
        return self._now

    # -- scheduling --

    def schedule_periodic(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0.0:
            raise ValueError(f"interval must be > 0 (got {interval!r})")
        timer_id = next(self._ids)
        self._timers[timer_id] = _Timer(interval=interval, callback=callback, remaining=interval)
        logger.debug("Timer %d scheduled every %.3fs", timer_id, interval)
        return TimerHandle(timer_id, self)

    def pause(self, handle: TimerHandle) -> None:
        timer = self._timers.get(handle.timer_id)
        if timer is not None and not timer.paused:
            timer.paused = True
            logger.debug("Timer %d paused (%.3fs remaining)", handle.timer_id, timer.remaining)

    def resume(self, handle: TimerHandle) -> None:
        timer = self._timers.get(handle.timer_id)
        if timer is not None and timer.paused:
            timer.paused = False
            logger.debug("Timer %d resumed", handle.timer_id)

    def clear(self, handle: TimerHandle) -> None:
        if self._timers.pop(handle.timer_id, None) is not None:
            logger.debug("Timer %d cleared", handle.timer_id)

    # -- queries --

    def exists(self, handle: TimerHandle) -> bool:
        return handle.timer_id in self._timers

    def is_active(self, handle: TimerHandle) -> bool:
        timer = self._timers.get(handle.timer_id)
        return timer is not None and not timer.paused

    def is_paused(self, handle: TimerHandle) -> bool:
        timer = self._timers.get(handle.timer_id)
        return timer is not None and timer.paused

    def time_remaining(self, handle: TimerHandle) -> float:
        timer = self._timers.get(handle.timer_id)
        return timer.remaining if timer is not None else -1.0

    # -- clock --

    def advance(self, dt: float) -> int:
        """Move the clock forward by *dt* seconds and fire due timers.

        Returns the number of callbacks invoked.
        """
        if dt < 0.0:
            raise ValueError(f"dt must be >= 0 (got {dt!r})")
        if self._firing:
            logger.warning("TimerManager.advance() called re-entrantly; ignored")
            return 0

        self._now += dt
        fired = 0
        self._firing = True
        try:
            # Snapshot: timers added during this call wait for the next one
            for timer_id, timer in list(self._timers.items()):
                # Cleared by an earlier callback in this call
                if self._timers.get(timer_id) is not timer:
                    continue
                if timer.paused:
                    continue
                timer.remaining -= dt
                fires = 0
                while timer.remaining <= 0.0 and fires < MAX_CATCH_UP_FIRES:
                    timer.remaining += timer.interval
                    timer.callback()
                    fires += 1
                    # The callback may clear or pause its own timer
                    if self._timers.get(timer_id) is not timer or timer.paused:
                        break
                if timer.remaining <= 0.0:
                    timer.remaining = timer.interval
                fired += fires
        finally:
            self._firing = False
        return fired
