"""Targeting layer: vision cones, line of sight, scoring, selection, lock state."""

from soft_targeting.targeting.component import TargetingComponent
from soft_targeting.targeting.scoring import CandidateScorer, score_candidate
from soft_targeting.targeting.selector import SelectionResult, TargetSelector

__all__ = [
    "CandidateScorer",
    "SelectionResult",
    "TargetSelector",
    "TargetingComponent",
    "score_candidate",
]
