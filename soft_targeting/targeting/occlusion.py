"""Line-of-sight filter delegating to the host ray query."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from soft_targeting.core.enums import TraceChannel
    from soft_targeting.core.math3d import Vector3
    from soft_targeting.engine.protocols import RayQuery


def is_unoccluded(
    rays: RayQuery,
    agent_handle: int,
    agent_position: Vector3,
    candidate_handle: int,
    candidate_position: Vector3,
    blocking_channel: TraceChannel,
) -> bool:
    """Cast one ray agent → candidate; accept only if nothing blocks it.

    The agent and the candidate are both ignored, so neither body counts as
    an obstruction of itself.
    """
    blocked = rays.raycast_blocked(
        agent_position,
        candidate_position,
        blocking_channel,
        ignore=(agent_handle, candidate_handle),
    )
    return not blocked
