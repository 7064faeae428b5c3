"""Candidate scoring: a sum of independently weighted criteria.

Each criterion is a ``CandidateScorer`` that maps its raw measurement onto a
normalized [1, 10] band before weighting, so criteria measured in different
units contribute comparably.  To add a criterion:
  1. Subclass ``CandidateScorer``.
  2. Register it with ``register_scorer()`` or pass a custom scorer list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from soft_targeting.core.math3d import angle_between_degrees, map_range_clamped

if TYPE_CHECKING:
    from soft_targeting.config import TargetingConfig
    from soft_targeting.core.models import Candidate, Pose

SCORE_MIN = 1.0
SCORE_MAX = 10.0

# Camera angle at which the camera-direction criterion bottoms out
CAMERA_ANGLE_FALLOFF_DEGREES = 45.0


@dataclass(frozen=True, slots=True)
class ScoringContext:
    """Everything a scorer may read for one candidate on one tick."""

    candidate: Candidate
    agent: Pose | None
    camera: Pose | None
    config: TargetingConfig


# ---------------------------------------------------------------------------
# Abstract scorer
# ---------------------------------------------------------------------------

class CandidateScorer(ABC):
    """Base class for one scoring criterion.

    Subclass this and implement:
      - name:            unique criterion identifier
      - weight(config):  multiplier taken from the configuration
      - raw_score(ctx):  value in [SCORE_MIN, SCORE_MAX], or None when the
                         criterion cannot be measured (it then contributes 0)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique criterion identifier (e.g. 'distance')."""

    @abstractmethod
    def weight(self, config: TargetingConfig) -> float:
        """Multiplier applied to the raw score."""

    @abstractmethod
    def raw_score(self, ctx: ScoringContext) -> float | None:
        """Normalized score before weighting."""

    def score(self, ctx: ScoringContext) -> float:
        raw = self.raw_score(ctx)
        if raw is None:
            return 0.0
        return raw * self.weight(ctx.config)


# ---------------------------------------------------------------------------
# Built-in criteria
# ---------------------------------------------------------------------------

class CameraDirectionScorer(CandidateScorer):
    """Rewards candidates close to the centre of the camera view."""

    @property
    def name(self) -> str:
        return "camera_direction"

    def weight(self, config: TargetingConfig) -> float:
        return config.camera_direction_weight

    def raw_score(self, ctx: ScoringContext) -> float | None:
        camera = ctx.camera
        if camera is None:
            return None
        to_target = (ctx.candidate.position - camera.position).safe_normal()
        degrees = angle_between_degrees(camera.forward, to_target)
        return map_range_clamped(degrees, CAMERA_ANGLE_FALLOFF_DEGREES, 0.0, SCORE_MIN, SCORE_MAX)


class DistanceScorer(CandidateScorer):
    """Rewards candidates close to the agent."""

    @property
    def name(self) -> str:
        return "distance"

    def weight(self, config: TargetingConfig) -> float:
        return config.distance_weight

    def raw_score(self, ctx: ScoringContext) -> float | None:
        if ctx.agent is None:
            return None
        distance = ctx.agent.position.distance(ctx.candidate.position)
        return map_range_clamped(distance, 0.0, ctx.config.search_radius, SCORE_MAX, SCORE_MIN)


class PlayerDirectionScorer(CandidateScorer):
    """Rewards candidates the agent is already facing."""

    @property
    def name(self) -> str:
        return "player_direction"

    def weight(self, config: TargetingConfig) -> float:
        return config.player_direction_weight

    def raw_score(self, ctx: ScoringContext) -> float | None:
        agent = ctx.agent
        if agent is None:
            return None
        to_target = (ctx.candidate.position - agent.position).safe_normal()
        alignment = agent.forward.dot(to_target)
        return map_range_clamped(alignment, 0.0, 1.0, SCORE_MIN, SCORE_MAX)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SCORER_REGISTRY: list[CandidateScorer] = []

_defaults_registered = False


def register_scorer(scorer: CandidateScorer) -> CandidateScorer:
    """Add *scorer* to the global registry, replacing one with the same name."""
    SCORER_REGISTRY[:] = [s for s in SCORER_REGISTRY if s.name != scorer.name]
    SCORER_REGISTRY.append(scorer)
    return scorer


def register_default_scorers() -> None:
    """Register the three built-in criteria (idempotent)."""
    global _defaults_registered
    if _defaults_registered:
        return
    _defaults_registered = True

    register_scorer(CameraDirectionScorer())
    register_scorer(DistanceScorer())
    register_scorer(PlayerDirectionScorer())


def score_candidate(
    candidate: Candidate | None,
    agent: Pose | None,
    camera: Pose | None,
    config: TargetingConfig,
    scorers: Sequence[CandidateScorer] | None = None,
) -> float:
    """Weighted sum of every criterion for *candidate*.

    A missing candidate scores 0.0. Callers must exclude invalid candidates
    before ranking rather than rely on this value.
    """
    if candidate is None:
        return 0.0
    if scorers is None:
        register_default_scorers()
        scorers = SCORER_REGISTRY
    ctx = ScoringContext(candidate=candidate, agent=agent, camera=camera, config=config)
    return sum(s.score(ctx) for s in scorers)


def score_breakdown(
    candidate: Candidate,
    agent: Pose | None,
    camera: Pose | None,
    config: TargetingConfig,
    scorers: Sequence[CandidateScorer] | None = None,
) -> dict[str, float]:
    """Per-criterion weighted scores, keyed by scorer name."""
    if scorers is None:
        register_default_scorers()
        scorers = SCORER_REGISTRY
    ctx = ScoringContext(candidate=candidate, agent=agent, camera=camera, config=config)
    return {s.name: s.score(ctx) for s in scorers}
