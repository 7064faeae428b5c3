"""Core data models: world objects, poses, candidates, lock state."""

from __future__ import annotations

from dataclasses import dataclass, field

from soft_targeting.core.enums import TraceChannel
from soft_targeting.core.math3d import Rotator, Vector3


# ---------------------------------------------------------------------------
# World objects (owned by the host world, referenced by handle)
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class WorldObject:
    """Anything with an identity and a transform in the host world."""

    handle: int
    position: Vector3 = field(default_factory=Vector3)
    rotation: Rotator = field(default_factory=Rotator)
    alive: bool = True

    @property
    def forward(self) -> Vector3:
        return self.rotation.forward()

    @property
    def pose(self) -> Pose:
        return Pose(self.position, self.rotation)


@dataclass(slots=True)
class Actor(WorldObject):
    """A placeable actor with gameplay tags and collision responses."""

    name: str = ""
    tags: frozenset[str] = frozenset()
    radius: float = 40.0
    # Channels this actor shows up on in overlap queries and blocks rays on
    responds_to: frozenset[TraceChannel] = frozenset(
        {TraceChannel.VISIBILITY, TraceChannel.CAMERA, TraceChannel.PAWN}
    )

    def has_tag(self, tag: str) -> bool:
        return bool(tag) and tag in self.tags


@dataclass(slots=True)
class Character(Actor):
    """An actor driven by a controller.

    ``control_rotation`` is where the controller is aiming; ``rotation`` is
    where the body is facing.
    """

    control_rotation: Rotator = field(default_factory=Rotator)


@dataclass(slots=True)
class Enemy(Character):
    """A hostile character."""

    patrol_origin: Vector3 = field(default_factory=Vector3)


@dataclass(slots=True)
class Camera(WorldObject):
    """A view attached to (or independent of) an agent."""

    fov: float = 90.0


@dataclass(frozen=True, slots=True)
class Blocker:
    """Axis-aligned box of static geometry."""

    minimum: Vector3
    maximum: Vector3
    channels: frozenset[TraceChannel] = frozenset(
        {TraceChannel.VISIBILITY, TraceChannel.CAMERA, TraceChannel.WORLD_STATIC}
    )


def is_valid(obj: WorldObject | None) -> bool:
    """True if *obj* exists and has not been destroyed."""
    return obj is not None and obj.alive


# ---------------------------------------------------------------------------
# Targeting value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Pose:
    """Position and rotation captured at evaluation time."""

    position: Vector3
    rotation: Rotator

    @property
    def forward(self) -> Vector3:
        return self.rotation.forward()


@dataclass(frozen=True, slots=True)
class Candidate:
    """A world entity captured fresh for a single evaluation tick."""

    handle: int
    position: Vector3
    forward: Vector3

    @classmethod
    def capture(cls, actor: WorldObject) -> Candidate:
        return cls(actor.handle, actor.position, actor.forward)


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A candidate handle paired with its score for one tick."""

    handle: int
    score: float


@dataclass(frozen=True, slots=True)
class LockState:
    """Snapshot of the lock-state controller."""

    current_target: int | None = None
    active: bool = False
