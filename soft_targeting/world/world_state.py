"""SandboxWorld — reference host world for the targeting core.

Owns the entity table (arena-style integer handles, never reused), a
spatial hash for overlap queries and a list of static box blockers for
line-of-sight tests. Implements both ``WorldQuery`` and ``RayQuery``.
"""

from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from soft_targeting.core.enums import TraceChannel
from soft_targeting.core.math3d import Rotator, Vector3
from soft_targeting.core.models import Actor, Blocker, WorldObject
from soft_targeting.systems.spatial_hash import SpatialHash

logger = logging.getLogger(__name__)

_EPSILON = 1e-9

T = TypeVar("T", bound=WorldObject)


class SandboxWorld:
    """The single source of truth for the sandbox."""

    __slots__ = ("_objects", "_spatial_index", "_blockers", "_next_handle")

    def __init__(self, spatial_index: SpatialHash | None = None) -> None:
        self._objects: dict[int, WorldObject] = {}
        self._spatial_index = spatial_index if spatial_index is not None else SpatialHash()
        self._blockers: list[Blocker] = []
        self._next_handle: int = 1

    # ------------------------------------------------------------------
    # Entity table
    # ------------------------------------------------------------------

    def allocate_handle(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def spawn(self, cls: type[T], **kwargs: object) -> T:
        """Create an object of *cls* with a fresh handle and add it."""
        obj = cls(handle=self.allocate_handle(), **kwargs)
        self.add(obj)
        return obj

    def add(self, obj: WorldObject) -> None:
        if obj.handle in self._objects:
            raise ValueError(f"handle {obj.handle} already in use")
        self._next_handle = max(self._next_handle, obj.handle + 1)
        self._objects[obj.handle] = obj
        if isinstance(obj, Actor):
            self._spatial_index.insert(obj.handle, obj.position)

    def destroy(self, handle: int) -> WorldObject | None:
        """Remove an object; outstanding handles to it resolve to None."""
        obj = self._objects.pop(handle, None)
        if obj is not None:
            obj.alive = False
            self._spatial_index.remove(handle)
            logger.debug("Destroyed %d", handle)
        return obj

    def move(self, handle: int, position: Vector3) -> None:
        obj = self._objects.get(handle)
        if obj is None:
            return
        obj.position = position
        if isinstance(obj, Actor):
            self._spatial_index.move(handle, position)

    def set_rotation(self, handle: int, rotation: Rotator) -> None:
        obj = self._objects.get(handle)
        if obj is not None:
            obj.rotation = rotation

    def get_actor(self, handle: int) -> WorldObject | None:
        return self._objects.get(handle)

    def __contains__(self, handle: int) -> bool:
        return handle in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def actors(self) -> list[Actor]:
        return [o for o in self._objects.values() if isinstance(o, Actor)]

    # ------------------------------------------------------------------
    # Static geometry
    # ------------------------------------------------------------------

    def add_blocker(self, blocker: Blocker) -> None:
        self._blockers.append(blocker)

    def clear(self) -> None:
        self._objects.clear()
        self._spatial_index.clear()
        self._blockers.clear()

    # ------------------------------------------------------------------
    # WorldQuery
    # ------------------------------------------------------------------

    def query_nearby(
        self,
        center: Vector3,
        radius: float,
        trace_channel: TraceChannel,
    ) -> list[int]:
        """Handles of actors on *trace_channel* whose collision sphere overlaps the query sphere."""
        result: list[int] = []
        for handle in self._spatial_index.query_radius(center, radius + _max_actor_radius(self)):
            actor = self._objects.get(handle)
            if not isinstance(actor, Actor) or not actor.alive:
                continue
            if trace_channel not in actor.responds_to:
                continue
            if center.distance(actor.position) <= radius + actor.radius:
                result.append(handle)
        return result

    # ------------------------------------------------------------------
    # RayQuery
    # ------------------------------------------------------------------

    def raycast_blocked(
        self,
        start: Vector3,
        end: Vector3,
        trace_channel: TraceChannel,
        ignore: Sequence[int] = (),
    ) -> bool:
        for blocker in self._blockers:
            if trace_channel in blocker.channels and segment_hits_box(start, end, blocker):
                return True
        for actor in self._objects.values():
            if not isinstance(actor, Actor) or not actor.alive or actor.handle in ignore:
                continue
            if trace_channel not in actor.responds_to:
                continue
            if segment_hits_sphere(start, end, actor.position, actor.radius):
                return True
        return False


def _max_actor_radius(world: SandboxWorld) -> float:
    return max((a.radius for a in world.actors()), default=0.0)


# ---------------------------------------------------------------------------
# Intersection helpers
# ---------------------------------------------------------------------------

def segment_hits_box(start: Vector3, end: Vector3, box: Blocker) -> bool:
    """Slab test of the segment start→end against an axis-aligned box."""
    t_min, t_max = 0.0, 1.0
    for s, e, lo, hi in (
        (start.x, end.x, box.minimum.x, box.maximum.x),
        (start.y, end.y, box.minimum.y, box.maximum.y),
        (start.z, end.z, box.minimum.z, box.maximum.z),
    ):
        d = e - s
        if abs(d) < _EPSILON:
            if s < lo or s > hi:
                return False
            continue
        t1 = (lo - s) / d
        t2 = (hi - s) / d
        if t1 > t2:
            t1, t2 = t2, t1
        t_min = max(t_min, t1)
        t_max = min(t_max, t2)
        if t_min > t_max:
            return False
    return True


def segment_hits_sphere(start: Vector3, end: Vector3, center: Vector3, radius: float) -> bool:
    """True if the segment passes within *radius* of *center*."""
    d = end - start
    length_sq = d.dot(d)
    if length_sq < _EPSILON:
        return start.distance(center) <= radius
    t = max(0.0, min(1.0, (center - start).dot(d) / length_sq))
    closest = start + d * t
    return closest.distance(center) <= radius
