"""Vision-cone tests: is a candidate inside the camera and player cones.

All functions are pure; they read poses captured at evaluation time and never
touch the world.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from soft_targeting.core.math3d import find_look_at_rotation, normalized_delta_rotator

if TYPE_CHECKING:
    from soft_targeting.config import TargetingConfig
    from soft_targeting.core.math3d import Vector3
    from soft_targeting.core.models import Pose


def in_camera_cone(candidate_position: Vector3, camera: Pose, config: TargetingConfig) -> bool:
    """True if the candidate is within the camera's horizontal and vertical half-angles."""
    look_at = find_look_at_rotation(camera.position, candidate_position)
    delta = normalized_delta_rotator(look_at, camera.rotation)
    return (
        abs(delta.pitch) <= config.max_vertical_camera_angle
        and abs(delta.yaw) <= config.max_horizontal_camera_angle
    )


def in_player_cone(candidate_position: Vector3, agent: Pose, config: TargetingConfig) -> bool:
    """True if the candidate is within the agent's horizontal facing half-angle.

    Only yaw is considered; the agent cone has no vertical limit.
    """
    look_at = find_look_at_rotation(agent.position, candidate_position)
    delta = normalized_delta_rotator(look_at, agent.rotation)
    return abs(delta.yaw) <= config.max_horizontal_player_half_angle


def is_visible(
    candidate_position: Vector3,
    agent: Pose,
    camera: Pose | None,
    config: TargetingConfig,
) -> bool:
    """Both cone tests must pass. Without a camera the camera cone is skipped."""
    if camera is not None and not in_camera_cone(candidate_position, camera, config):
        return False
    return in_player_cone(candidate_position, agent, config)
