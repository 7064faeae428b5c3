"""Tests for the camera and player vision cones.

Covers:
- Camera cone: horizontal and vertical half-angles
- Player cone: yaw only, wraps across ±180°
- Optional camera (no camera → camera cone skipped)
- Monotonicity: widening a threshold never rejects an accepted candidate
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import itertools

from soft_targeting.config import TargetingConfig
from soft_targeting.core.math3d import Rotator, Vector3
from soft_targeting.core.models import Pose
from soft_targeting.targeting.visibility import in_camera_cone, in_player_cone, is_visible


def _pose(x=0.0, y=0.0, z=0.0, yaw=0.0, pitch=0.0) -> Pose:
    return Pose(Vector3(x, y, z), Rotator(pitch=pitch, yaw=yaw))


def _cfg(h=45.0, v=30.0, player=90.0) -> TargetingConfig:
    return TargetingConfig(
        max_horizontal_camera_angle=h,
        max_vertical_camera_angle=v,
        max_horizontal_player_half_angle=player,
    )


class TestCameraCone:

    def test_straight_ahead_passes(self):
        assert in_camera_cone(Vector3(500, 0, 0), _pose(), _cfg())

    def test_outside_horizontal_fails(self):
        # 60° off axis against a 45° half-angle
        assert not in_camera_cone(Vector3(500, 866, 0), _pose(), _cfg(h=45.0))

    def test_outside_vertical_fails(self):
        # 45° above against a 30° half-angle
        assert not in_camera_cone(Vector3(500, 0, 500), _pose(), _cfg(v=30.0))

    def test_on_boundary_passes(self):
        assert in_camera_cone(Vector3(500, 500, 0), _pose(), _cfg(h=45.0 + 1e-9))

    def test_uses_camera_rotation(self):
        camera = _pose(yaw=90.0)
        assert in_camera_cone(Vector3(0, 500, 0), camera, _cfg())
        assert not in_camera_cone(Vector3(500, 0, 0), camera, _cfg())

    def test_pitched_camera(self):
        camera = _pose(pitch=-30.0)
        assert in_camera_cone(Vector3(500, 0, -288.7), camera, _cfg(v=10.0))


class TestPlayerCone:

    def test_behind_fails_with_90(self):
        assert not in_player_cone(Vector3(-500, 10, 0), _pose(), _cfg(player=90.0))

    def test_behind_passes_with_180(self):
        assert in_player_cone(Vector3(-500, 10, 0), _pose(), _cfg(player=180.0))

    def test_ignores_vertical_offset(self):
        assert in_player_cone(Vector3(100, 0, 5000), _pose(), _cfg(player=10.0))

    def test_wraps_across_seam(self):
        agent = _pose(yaw=170.0)
        # Direction at yaw -170° is 20° from the agent's facing
        target = Rotator(yaw=-170.0).forward() * 500.0
        assert in_player_cone(target, agent, _cfg(player=30.0))
        assert not in_player_cone(target, agent, _cfg(player=10.0))


class TestIsVisible:

    def test_both_cones_must_pass(self):
        # Inside the player cone (90°) but outside the camera cone (45°)
        target = Vector3(500, 866, 0)
        assert not is_visible(target, _pose(), _pose(), _cfg())

    def test_no_camera_skips_camera_cone(self):
        target = Vector3(500, 866, 0)
        assert is_visible(target, _pose(), None, _cfg())

    def test_no_camera_still_applies_player_cone(self):
        assert not is_visible(Vector3(-500, 0, 0), _pose(), None, _cfg(player=90.0))

    def test_camera_can_look_away_from_agent_facing(self):
        agent = _pose(yaw=0.0)
        camera = _pose(yaw=90.0)
        target = Vector3(300, 300, 0)  # 45° from both
        assert is_visible(target, agent, camera, _cfg(h=45.0 + 1e-9, player=90.0))


class TestMonotonicity:

    def test_widening_thresholds_never_rejects(self):
        positions = [
            Vector3(x, y, z)
            for x, y, z in itertools.product((-800, -100, 300, 900), (-700, 0, 400), (-300, 0, 250))
        ]
        agent = _pose(yaw=15.0)
        camera = _pose(z=80.0, yaw=-10.0, pitch=-5.0)
        narrow_values = [(10.0, 5.0, 20.0), (30.0, 20.0, 60.0), (60.0, 40.0, 120.0)]
        widen_by = (0.0, 5.0, 25.0)

        for (h, v, p), extra in itertools.product(narrow_values, widen_by):
            narrow = _cfg(h, v, p)
            for wide in (
                _cfg(min(h + extra, 90.0), v, p),
                _cfg(h, min(v + extra, 60.0), p),
                _cfg(h, v, min(p + extra, 180.0)),
            ):
                for pos in positions:
                    if is_visible(pos, agent, camera, narrow):
                        assert is_visible(pos, agent, camera, wide), (pos, narrow, wide)
