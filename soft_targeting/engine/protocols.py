"""Contracts for the host collaborators the targeting core consumes.

The core never owns the world, the ray tracer, or the timer; it only calls
through these protocols. ``SandboxWorld`` and ``TimerManager`` are the
reference implementations shipped with this package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, Sequence

if TYPE_CHECKING:
    from soft_targeting.core.enums import TraceChannel
    from soft_targeting.core.math3d import Vector3
    from soft_targeting.core.models import WorldObject


class WorldQuery(Protocol):
    """Spatial overlap query plus the entity table it indexes."""

    def query_nearby(
        self,
        center: Vector3,
        radius: float,
        trace_channel: TraceChannel,
    ) -> Sequence[int]:
        """Handles of entities within *radius* of *center*; order unspecified."""
        ...

    def get_actor(self, handle: int) -> WorldObject | None:
        """Resolve a handle, or None if the entity no longer exists."""
        ...


class RayQuery(Protocol):
    """Line-of-sight test."""

    def raycast_blocked(
        self,
        start: Vector3,
        end: Vector3,
        trace_channel: TraceChannel,
        ignore: Sequence[int] = (),
    ) -> bool:
        """True if something on *trace_channel* blocks the segment."""
        ...


class TimerHandle(Protocol):
    @property
    def valid(self) -> bool: ...


class PeriodicScheduler(Protocol):
    """Fixed-interval callback scheduling with pause/resume."""

    def schedule_periodic(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def pause(self, handle: TimerHandle) -> None:
        ...

    def resume(self, handle: TimerHandle) -> None:
        ...
