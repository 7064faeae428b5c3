"""Targeting and sandbox configuration with sensible defaults."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

from soft_targeting.core.enums import TraceChannel
from soft_targeting.core.errors import ConfigurationError


# (field, low, high): inclusive domains for the bounded tunables
_BOUNDED_FIELDS: tuple[tuple[str, float, float], ...] = (
    ("max_horizontal_camera_angle", 0.0, 90.0),
    ("max_vertical_camera_angle", 0.0, 60.0),
    ("max_horizontal_player_half_angle", 0.0, 180.0),
    ("camera_direction_weight", 0.0, 1.0),
    ("distance_weight", 0.0, 1.0),
    ("player_direction_weight", 0.0, 1.0),
)

_POSITIVE_FIELDS: tuple[str, ...] = ("search_radius", "search_interval")

# Read once when the search timer is created; later changes wait for a new timer
SCHEDULE_FIELDS: frozenset[str] = frozenset({"search_interval"})


@dataclass(frozen=True)
class TargetingConfig:
    """Immutable tunables for one targeting session.

    Values are validated on construction; an out-of-domain value raises
    ``ConfigurationError`` instead of being clamped later.
    """

    # Search
    search_radius: float = 1000.0          # world units around the agent
    search_interval: float = 0.1           # seconds between evaluations

    # Vision cones (half-angles, degrees)
    max_horizontal_camera_angle: float = 45.0    # camera FOV / 2
    max_vertical_camera_angle: float = 30.0      # camera FOV / 3
    max_horizontal_player_half_angle: float = 90.0

    # Scoring weights, independent, not required to sum to 1
    camera_direction_weight: float = 1.0
    distance_weight: float = 1.0
    player_direction_weight: float = 1.0

    # Inclusion filters: a candidate qualifies by tag OR by class
    target_tag: str = "Target"
    target_class: type | None = None

    # Passed through to the world / ray queries
    target_trace_channel: TraceChannel = TraceChannel.PAWN
    blocking_trace_channel: TraceChannel = TraceChannel.VISIBILITY

    # Emit diagnostic warnings for missing references
    debug: bool = False

    def __post_init__(self) -> None:
        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if not _is_number(value) or value <= 0.0:
                raise ConfigurationError(name, value, "a number > 0")
        for name, low, high in _BOUNDED_FIELDS:
            value = getattr(self, name)
            if not _is_number(value) or not low <= value <= high:
                raise ConfigurationError(name, value, f"within [{low:g}, {high:g}]")
        if self.target_class is not None and not isinstance(self.target_class, type):
            raise ConfigurationError("target_class", self.target_class, "a class or None")
        if not isinstance(self.target_tag, str):
            raise ConfigurationError("target_tag", self.target_tag, "a string")

    def to_dict(self) -> dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _is_number(value: object) -> bool:
    # bool is an int subclass but never a meaningful tunable
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class SandboxConfig:
    """Configuration for the reference host world used by the CLI and API."""

    # World
    world_seed: int = 42
    arena_half_extent: float = 2500.0
    spatial_cell_size: float = 500.0

    # Population
    enemy_count: int = 12
    prop_count: int = 6                   # untagged actors that must never be locked
    blocker_count: int = 4
    blocker_half_size: float = 120.0

    # Motion
    patrol_radius: float = 400.0
    patrol_speed: float = 150.0           # world units per second
    agent_turn_rate: float = 20.0         # degrees per second, 0 = stationary

    # Timing
    step_seconds: float = 1.0 / 30.0
    max_steps: int = 900

    # Logging
    log_level: str = "INFO"
