"""3D vector and rotation helpers used by the targeting pipeline.

Conventions follow a Z-up, X-forward world:
  - yaw rotates around Z (0° = +X, 90° = +Y)
  - pitch rotates around Y (positive = looking up)
  - all angles are in degrees
"""

from __future__ import annotations

import math
from dataclasses import dataclass

_SMALL_NUMBER = 1e-8


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable 3D float vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vector3:
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def length_2d(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vector3) -> float:
        return (self - other).length()

    def safe_normal(self) -> Vector3:
        """Unit vector in the same direction, or the zero vector if degenerate."""
        length = self.length()
        if length < _SMALL_NUMBER:
            return Vector3()
        return Vector3(self.x / length, self.y / length, self.z / length)

    def __repr__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f}, {self.z:.1f})"


@dataclass(frozen=True, slots=True)
class Rotator:
    """Immutable pitch/yaw/roll rotation in degrees."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    def forward(self) -> Vector3:
        """Unit forward vector for this rotation (roll has no effect)."""
        p = math.radians(self.pitch)
        y = math.radians(self.yaw)
        cp = math.cos(p)
        return Vector3(cp * math.cos(y), cp * math.sin(y), math.sin(p))

    def normalized(self) -> Rotator:
        return Rotator(
            normalize_axis(self.pitch),
            normalize_axis(self.yaw),
            normalize_axis(self.roll),
        )

    def __repr__(self) -> str:
        return f"Rotator(p={self.pitch:.1f}, y={self.yaw:.1f}, r={self.roll:.1f})"


# ---------------------------------------------------------------------------
# Rotation math
# ---------------------------------------------------------------------------

def normalize_axis(angle: float) -> float:
    """Wrap *angle* into the half-open range (-180, 180]."""
    angle = math.fmod(angle, 360.0)
    if angle > 180.0:
        angle -= 360.0
    elif angle <= -180.0:
        angle += 360.0
    return angle


def rotator_from_direction(direction: Vector3) -> Rotator:
    """Rotation whose forward vector points along *direction*.

    A zero-length direction yields the zero rotator.
    """
    yaw = math.degrees(math.atan2(direction.y, direction.x))
    pitch = math.degrees(math.atan2(direction.z, direction.length_2d()))
    return Rotator(pitch=pitch, yaw=yaw, roll=0.0)


def find_look_at_rotation(start: Vector3, target: Vector3) -> Rotator:
    """Rotation an observer at *start* needs to face *target*."""
    return rotator_from_direction(target - start)


def normalized_delta_rotator(a: Rotator, b: Rotator) -> Rotator:
    """Per-axis difference ``a - b`` wrapped into (-180, 180]."""
    return Rotator(a.pitch - b.pitch, a.yaw - b.yaw, a.roll - b.roll).normalized()


def angle_between_degrees(a: Vector3, b: Vector3) -> float:
    """Angle in degrees between two vectors expected to be unit length."""
    cosine = max(-1.0, min(1.0, a.dot(b)))
    return math.degrees(math.acos(cosine))


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def map_range_clamped(
    value: float,
    in_a: float,
    in_b: float,
    out_a: float,
    out_b: float,
) -> float:
    """Linearly map *value* from [in_a, in_b] onto [out_a, out_b], clamped.

    The input range may be reversed (``in_a > in_b``). A degenerate input
    range maps everything at or beyond ``in_b`` to ``out_b``.
    """
    if in_a == in_b:
        return out_b if value >= in_b else out_a
    t = clamp((value - in_a) / (in_b - in_a), 0.0, 1.0)
    return out_a + (out_b - out_a) * t
