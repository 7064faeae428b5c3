"""TargetSelector — gathers, filters, scores and ranks candidates for one tick.

Pipeline:
  1. Acquisition — world overlap query around the agent
  2. Filtering   — liveness, tag/class match, vision cones, line of sight
  3. Scoring     — weighted criteria from ``scoring``
  4. Ranking     — stable sort, descending; ties keep query order
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from soft_targeting.core.errors import StaleReference
from soft_targeting.core.models import Candidate, ScoredCandidate, is_valid
from soft_targeting.targeting.occlusion import is_unoccluded
from soft_targeting.targeting.scoring import score_candidate
from soft_targeting.targeting.visibility import is_visible

if TYPE_CHECKING:
    from soft_targeting.config import TargetingConfig
    from soft_targeting.core.models import Pose, WorldObject
    from soft_targeting.engine.protocols import RayQuery, WorldQuery
    from soft_targeting.targeting.scoring import CandidateScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Outcome of one selection pass."""

    best: int | None = None
    ranked: tuple[ScoredCandidate, ...] = field(default_factory=tuple)


def matches_target_filter(actor: WorldObject, config: TargetingConfig) -> bool:
    """A candidate qualifies if it carries the target tag OR is the target class."""
    has_tag = getattr(actor, "has_tag", None)
    if has_tag is not None and has_tag(config.target_tag):
        return True
    return config.target_class is not None and isinstance(actor, config.target_class)


def rank_candidates(scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Sort descending by score; equal scores keep their input order."""
    return sorted(scored, key=lambda sc: -sc.score)


class TargetSelector:
    """Stateless per-tick selection over the host's world and ray queries."""

    __slots__ = ("_world", "_rays", "_scorers")

    def __init__(
        self,
        world: WorldQuery,
        rays: RayQuery,
        scorers: Sequence[CandidateScorer] | None = None,
    ) -> None:
        self._world = world
        self._rays = rays
        self._scorers = scorers

    # ------------------------------------------------------------------
    # Acquisition + filtering
    # ------------------------------------------------------------------

    def gather(
        self,
        agent_handle: int,
        agent: Pose,
        camera: Pose | None,
        config: TargetingConfig,
    ) -> list[Candidate]:
        """Return candidates that pass every filter, in query order."""
        handles = self._world.query_nearby(
            agent.position, config.search_radius, config.target_trace_channel,
        )
        survivors: list[Candidate] = []
        for handle in handles:
            if handle == agent_handle:
                continue
            actor = self._world.get_actor(handle)
            if not is_valid(actor):
                logger.debug("[%s] Candidate %d vanished before filtering; skipped", StaleReference.__name__, handle)
                continue
            if not matches_target_filter(actor, config):
                continue
            candidate = Candidate.capture(actor)
            if not is_visible(candidate.position, agent, camera, config):
                continue
            if not is_unoccluded(
                self._rays,
                agent_handle,
                agent.position,
                candidate.handle,
                candidate.position,
                config.blocking_trace_channel,
            ):
                continue
            survivors.append(candidate)
        return survivors

    # ------------------------------------------------------------------
    # Scoring + ranking
    # ------------------------------------------------------------------

    def rank(
        self,
        candidates: Sequence[Candidate],
        agent: Pose | None,
        camera: Pose | None,
        config: TargetingConfig,
    ) -> list[ScoredCandidate]:
        scored = [
            ScoredCandidate(c.handle, score_candidate(c, agent, camera, config, self._scorers))
            for c in candidates
        ]
        return rank_candidates(scored)

    def select(
        self,
        agent_handle: int,
        agent: Pose,
        camera: Pose | None,
        config: TargetingConfig,
    ) -> SelectionResult:
        """Run the whole pipeline and return the best handle plus the ranking."""
        candidates = self.gather(agent_handle, agent, camera, config)
        if not candidates:
            return SelectionResult()
        ranked = self.rank(candidates, agent, camera, config)
        return SelectionResult(best=ranked[0].handle, ranked=tuple(ranked))
