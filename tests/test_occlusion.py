"""Tests for the line-of-sight filter."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import Mock

from soft_targeting.core.enums import TraceChannel
from soft_targeting.core.math3d import Vector3
from soft_targeting.core.models import Blocker
from soft_targeting.targeting.occlusion import is_unoccluded
from soft_targeting.world.world_state import SandboxWorld


class TestIsUnoccluded:

    def test_one_ray_ignoring_both_ends(self):
        rays = Mock()
        rays.raycast_blocked.return_value = False
        start, end = Vector3(), Vector3(500, 0, 0)

        assert is_unoccluded(rays, 1, start, 7, end, TraceChannel.VISIBILITY)
        rays.raycast_blocked.assert_called_once_with(
            start, end, TraceChannel.VISIBILITY, ignore=(1, 7),
        )

    def test_blocked_ray_rejects(self):
        rays = Mock()
        rays.raycast_blocked.return_value = True
        assert not is_unoccluded(rays, 1, Vector3(), 2, Vector3(10, 0, 0), TraceChannel.VISIBILITY)

    def test_box_between_blocks(self):
        world = SandboxWorld()
        world.add_blocker(Blocker(Vector3(200, -50, -50), Vector3(250, 50, 50)))
        assert not is_unoccluded(world, 1, Vector3(), 2, Vector3(500, 0, 0), TraceChannel.VISIBILITY)
        assert is_unoccluded(world, 1, Vector3(), 2, Vector3(500, 500, 0), TraceChannel.VISIBILITY)

    def test_box_on_other_channel_ignored(self):
        world = SandboxWorld()
        world.add_blocker(Blocker(
            Vector3(200, -50, -50), Vector3(250, 50, 50),
            channels=frozenset({TraceChannel.WORLD_STATIC}),
        ))
        assert is_unoccluded(world, 1, Vector3(), 2, Vector3(500, 0, 0), TraceChannel.VISIBILITY)
