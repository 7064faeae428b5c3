"""Tests for candidate scoring.

Covers:
- The three built-in criteria and their [1, 10] bands
- Weighted sum and zero weights
- Missing camera / missing candidate
- Custom scorers and the registry
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from soft_targeting.config import TargetingConfig
from soft_targeting.core.math3d import Rotator, Vector3
from soft_targeting.core.models import Candidate, Pose
from soft_targeting.targeting.scoring import (
    SCORER_REGISTRY,
    CameraDirectionScorer,
    CandidateScorer,
    DistanceScorer,
    PlayerDirectionScorer,
    register_default_scorers,
    register_scorer,
    score_breakdown,
    score_candidate,
)


def _candidate(x, y, z=0.0, handle=1) -> Candidate:
    return Candidate(handle, Vector3(x, y, z), Vector3(1, 0, 0))


ORIGIN = Pose(Vector3(), Rotator())


def _cfg(**overrides) -> TargetingConfig:
    return TargetingConfig(search_radius=1000.0, **overrides)


class TestBuiltInCriteria:

    def test_head_on_candidate(self):
        assert score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, _cfg()) == pytest.approx(25.5)

    def test_diagonal_candidate(self):
        assert score_candidate(_candidate(500, 500), ORIGIN, ORIGIN, _cfg()) == pytest.approx(12.0, abs=1e-6)

    def test_breakdown(self):
        parts = score_breakdown(_candidate(500, 0), ORIGIN, ORIGIN, _cfg())
        assert parts["camera_direction"] == pytest.approx(10.0)
        assert parts["distance"] == pytest.approx(5.5)
        assert parts["player_direction"] == pytest.approx(10.0)

    def test_no_camera_drops_camera_term(self):
        assert score_candidate(_candidate(500, 0), ORIGIN, None, _cfg()) == pytest.approx(15.5)

    def test_camera_term_bottoms_out_past_45_degrees(self):
        parts = score_breakdown(_candidate(0, 500), ORIGIN, ORIGIN, _cfg())
        assert parts["camera_direction"] == pytest.approx(1.0)

    def test_distance_clamps_beyond_radius(self):
        parts = score_breakdown(_candidate(5000, 0), ORIGIN, ORIGIN, _cfg())
        assert parts["distance"] == pytest.approx(1.0)

    def test_candidate_behind_gets_minimum_player_term(self):
        parts = score_breakdown(_candidate(-500, 0), ORIGIN, ORIGIN, _cfg())
        assert parts["player_direction"] == pytest.approx(1.0)

    def test_candidate_on_agent_position(self):
        parts = score_breakdown(_candidate(0, 0), ORIGIN, None, _cfg())
        assert parts["distance"] == pytest.approx(10.0)
        # Zero direction vector: alignment 0 maps to the minimum
        assert parts["player_direction"] == pytest.approx(1.0)


class TestWeights:

    def test_zero_weights_score_zero(self):
        cfg = _cfg(camera_direction_weight=0.0, distance_weight=0.0, player_direction_weight=0.0)
        assert score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, cfg) == 0.0

    def test_single_weight(self):
        cfg = _cfg(camera_direction_weight=0.0, distance_weight=0.5, player_direction_weight=0.0)
        assert score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, cfg) == pytest.approx(2.75)

    def test_score_bounded_by_weight_sum(self):
        cfg = _cfg(camera_direction_weight=0.2, distance_weight=0.7, player_direction_weight=0.4)
        for x, y in ((100, 0), (300, 700), (-900, 50), (10, -10)):
            s = score_candidate(_candidate(x, y), ORIGIN, ORIGIN, cfg)
            assert 1.0 * 1.3 - 1e-9 <= s <= 10.0 * 1.3 + 1e-9


class TestMissingInputs:

    def test_none_candidate_scores_zero(self):
        assert score_candidate(None, ORIGIN, ORIGIN, _cfg()) == 0.0


class _ConstantScorer(CandidateScorer):

    def __init__(self, name: str, value: float | None) -> None:
        self._name = name
        self._value = value

    @property
    def name(self) -> str:
        return self._name

    def weight(self, config: TargetingConfig) -> float:
        return 2.0

    def raw_score(self, ctx):
        return self._value


class TestCustomScorers:

    def test_explicit_scorer_list(self):
        scorers = [_ConstantScorer("flat", 3.0), DistanceScorer()]
        s = score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, _cfg(), scorers)
        assert s == pytest.approx(6.0 + 5.5)

    def test_unmeasurable_scorer_contributes_zero(self):
        s = score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, _cfg(), [_ConstantScorer("none", None)])
        assert s == 0.0

    def test_empty_scorer_list(self):
        assert score_candidate(_candidate(500, 0), ORIGIN, ORIGIN, _cfg(), []) == 0.0


class TestRegistry:

    def test_defaults_registered_once(self):
        register_default_scorers()
        register_default_scorers()
        names = [s.name for s in SCORER_REGISTRY]
        assert names.count("distance") == 1
        assert {"camera_direction", "distance", "player_direction"} <= set(names)

    def test_register_replaces_by_name(self):
        register_default_scorers()
        before = list(SCORER_REGISTRY)
        try:
            register_scorer(_ConstantScorer("distance", 1.0))
            names = [s.name for s in SCORER_REGISTRY]
            assert names.count("distance") == 1
        finally:
            SCORER_REGISTRY[:] = before

    def test_builtin_names(self):
        assert CameraDirectionScorer().name == "camera_direction"
        assert DistanceScorer().name == "distance"
        assert PlayerDirectionScorer().name == "player_direction"
