"""Enumerations used throughout the targeting engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class TraceChannel(IntEnum):
    """Collision channels passed through to world and ray queries.

    The targeting core never interprets these; only the host world does.
    """

    VISIBILITY = 0
    CAMERA = 1
    PAWN = 2
    WORLD_STATIC = 4


@unique
class LockPhase(IntEnum):
    """Lock-state controller phases."""

    INACTIVE = 0
    ACTIVE_UNLOCKED = 1
    ACTIVE_LOCKED = 2


@unique
class TargetEventKind(IntEnum):
    """Notifications fired by the lock-state controller."""

    LOST = 0
    FOUND = 1


@unique
class Domain(IntEnum):
    """RNG domain separation keys for the sandbox generator."""

    SPAWN = 0
    PATROL = 1
    BLOCKER = 2
