"""TargetingComponent — owns the lock state and drives periodic re-evaluation.

Phases:
  INACTIVE         — search timer never started
  ACTIVE_UNLOCKED  — timer started, no current target
  ACTIVE_LOCKED    — timer started, current target set

Deactivation only pauses the timer. The current target survives a pause and
is replaced by the next evaluation after ``activate_targeting()``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Sequence

from soft_targeting.config import SCHEDULE_FIELDS, TargetingConfig
from soft_targeting.core.enums import LockPhase, TargetEventKind
from soft_targeting.core.errors import ConfigurationError, MissingReference
from soft_targeting.core.models import LockState, is_valid
from soft_targeting.targeting.selector import SelectionResult, TargetSelector

if TYPE_CHECKING:
    from soft_targeting.core.models import Pose, ScoredCandidate, WorldObject
    from soft_targeting.engine.protocols import (
        PeriodicScheduler,
        RayQuery,
        TimerHandle,
        WorldQuery,
    )
    from soft_targeting.targeting.scoring import CandidateScorer

logger = logging.getLogger(__name__)

TargetListener = Callable[[int], None]


class TargetingComponent:
    """Soft-lock controller for a single agent."""

    __slots__ = (
        "_config",
        "_world",
        "_scheduler",
        "_selector",
        "_agent_handle",
        "_camera_handle",
        "_timer",
        "_paused",
        "_current_target",
        "_ranked",
        "_evaluations",
        "_found_listeners",
        "_lost_listeners",
    )

    def __init__(
        self,
        world: WorldQuery,
        rays: RayQuery,
        scheduler: PeriodicScheduler,
        config: TargetingConfig | None = None,
        scorers: Sequence[CandidateScorer] | None = None,
    ) -> None:
        self._config = config or TargetingConfig()
        self._world = world
        self._scheduler = scheduler
        self._selector = TargetSelector(world, rays, scorers)
        self._agent_handle: int | None = None
        self._camera_handle: int | None = None
        self._timer: TimerHandle | None = None
        self._paused = False
        self._current_target: int | None = None
        self._ranked: tuple[ScoredCandidate, ...] = ()
        self._evaluations = 0
        self._found_listeners: list[TargetListener] = []
        self._lost_listeners: list[TargetListener] = []

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> TargetingConfig:
        return self._config

    def configure(self, **changes: object) -> TargetingConfig:
        """Apply *changes* and return the new configuration.

        Invalid values raise ``ConfigurationError`` and leave the current
        configuration untouched. Weights, angles and filters take effect on
        the next evaluation without restarting the timer.
        """
        try:
            new_config = replace(self._config, **changes)
        except ConfigurationError:
            logger.error("Rejected targeting configuration change: %s", changes)
            raise
        except TypeError as exc:
            raise ConfigurationError("configure", sorted(changes), "known TargetingConfig fields") from exc

        if self._timer is not None:
            stale = [
                name for name in SCHEDULE_FIELDS
                if getattr(new_config, name) != getattr(self._config, name)
            ]
            if stale:
                logger.warning(
                    "%s changed after the search timer started; the running timer keeps its interval",
                    ", ".join(stale),
                )
        self._config = new_config
        return new_config

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_target_found_listener(self, listener: TargetListener) -> None:
        self._found_listeners.append(listener)

    def add_target_lost_listener(self, listener: TargetListener) -> None:
        self._lost_listeners.append(listener)

    def remove_target_found_listener(self, listener: TargetListener) -> None:
        if listener in self._found_listeners:
            self._found_listeners.remove(listener)

    def remove_target_lost_listener(self, listener: TargetListener) -> None:
        if listener in self._lost_listeners:
            self._lost_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def agent_handle(self) -> int | None:
        return self._agent_handle

    @property
    def camera_handle(self) -> int | None:
        return self._camera_handle

    @property
    def started(self) -> bool:
        return self._timer is not None

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def active(self) -> bool:
        """True while the search timer is running (started and not paused)."""
        return self._timer is not None and not self._paused

    @property
    def phase(self) -> LockPhase:
        if self._timer is None:
            return LockPhase.INACTIVE
        if self.get_current_target() is None:
            return LockPhase.ACTIVE_UNLOCKED
        return LockPhase.ACTIVE_LOCKED

    @property
    def lock_state(self) -> LockState:
        return LockState(current_target=self.get_current_target(), active=self.active)

    @property
    def evaluation_count(self) -> int:
        return self._evaluations

    def get_current_target(self) -> int | None:
        """Handle of the locked target, or None if it is absent or destroyed."""
        if self._current_target is None:
            return None
        if not is_valid(self._world.get_actor(self._current_target)):
            return None
        return self._current_target

    def get_ranked_targets(self) -> tuple[ScoredCandidate, ...]:
        """Ranking from the most recent evaluation, best first."""
        return self._ranked

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def initialize(self, agent_handle: int | None, camera_handle: int | None = None) -> bool:
        """Bind the agent (required) and camera (optional), then activate.

        Returns False and changes nothing if the agent is not a live entity.
        """
        if agent_handle is None or not is_valid(self._world.get_actor(agent_handle)):
            logger.error("Targeting not initialized: agent %s is not a valid entity", agent_handle)
            return False
        if camera_handle is not None and not is_valid(self._world.get_actor(camera_handle)):
            self._debug_warning("Camera %s is not valid on initialize; camera checks disabled", camera_handle)

        self._agent_handle = agent_handle
        self._camera_handle = camera_handle
        logger.info("Targeting initialized (agent=%d, camera=%s)", agent_handle, camera_handle)
        self.activate_targeting()
        return True

    def activate_targeting(self) -> None:
        """Start the search timer on first call, resume it afterwards."""
        if self._agent_handle is None or not is_valid(self._world.get_actor(self._agent_handle)):
            self._debug_warning("Cannot activate targeting: agent is not valid")
            return
        if self._timer is None:
            self._timer = self._scheduler.schedule_periodic(self._config.search_interval, self.evaluate)
            self._paused = False
            logger.info("Targeting activated (interval=%.3fs)", self._config.search_interval)
        elif self._paused:
            self._scheduler.resume(self._timer)
            self._paused = False
            logger.info("Targeting resumed")

    def deactivate_targeting(self) -> None:
        """Pause the search timer; the current target is kept."""
        if self._timer is None or self._paused:
            return
        self._scheduler.pause(self._timer)
        self._paused = True
        logger.info("Targeting paused (target=%s)", self._current_target)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self) -> SelectionResult:
        """One evaluation tick: select the best candidate and commit it."""
        self._evaluations += 1
        result = self._select()
        self._ranked = result.ranked
        self._commit(result.best)
        return result

    def _select(self) -> SelectionResult:
        agent = self._resolve(self._agent_handle)
        if agent is None:
            self._debug_warning("Agent %s is not valid; no candidates this tick", self._agent_handle)
            return SelectionResult()

        camera_pose: Pose | None = None
        if self._camera_handle is not None:
            camera = self._resolve(self._camera_handle)
            if camera is None:
                self._debug_warning("Camera %s is not valid; camera checks skipped", self._camera_handle)
            else:
                camera_pose = camera.pose
        else:
            self._debug_warning("No camera set; camera checks skipped")

        result = self._selector.select(self._agent_handle, agent.pose, camera_pose, self._config)
        logger.debug(
            "Evaluation %d: %d ranked, best=%s",
            self._evaluations, len(result.ranked), result.best,
        )
        return result

    def _commit(self, best: int | None) -> None:
        previous = self._current_target
        if best == previous:
            return
        self._current_target = best
        if previous is not None:
            logger.info("Target lost: %d", previous)
            self._notify(TargetEventKind.LOST, self._lost_listeners, previous)
        if best is not None:
            logger.info("Target found: %d", best)
            self._notify(TargetEventKind.FOUND, self._found_listeners, best)

    def _notify(self, kind: TargetEventKind, listeners: list[TargetListener], handle: int) -> None:
        for listener in list(listeners):
            try:
                listener(handle)
            except Exception:
                logger.exception("Target %s listener failed for %d", kind.name.lower(), handle)

    def _resolve(self, handle: int | None) -> WorldObject | None:
        if handle is None:
            return None
        obj = self._world.get_actor(handle)
        return obj if is_valid(obj) else None

    def _debug_warning(self, message: str, *args: object) -> None:
        """Report a missing agent or camera; the tick degrades instead of failing."""
        if self._config.debug:
            logger.warning("[%s] " + message, MissingReference.__name__, *args)
