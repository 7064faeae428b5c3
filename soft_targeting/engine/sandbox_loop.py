"""SandboxLoop — fixed-step host loop for the targeting component.

Step cycle:
  1. Motion    — enemies patrol, the agent turns, the camera follows
  2. Timers    — the scheduler clock advances; due evaluations run
  3. Recording — lock transitions land in the event log
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from soft_targeting.core.enums import TargetEventKind
from soft_targeting.core.math3d import Rotator, normalize_axis
from soft_targeting.core.models import Character
from soft_targeting.systems.generator import follow_camera
from soft_targeting.utils.event_log import EventLog, TargetEvent

if TYPE_CHECKING:
    from soft_targeting.config import SandboxConfig, TargetingConfig
    from soft_targeting.engine.scheduler import TimerManager
    from soft_targeting.systems.generator import ArenaGenerator, ArenaHandles
    from soft_targeting.targeting.component import TargetingComponent
    from soft_targeting.world.world_state import SandboxWorld

logger = logging.getLogger(__name__)


class SandboxLoop:
    """Drives world motion and the targeting timer on one thread."""

    __slots__ = (
        "_config",
        "_world",
        "_timers",
        "_targeting",
        "_generator",
        "_handles",
        "_event_log",
        "step_count",
    )

    def __init__(
        self,
        config: SandboxConfig,
        world: SandboxWorld,
        timers: TimerManager,
        targeting: TargetingComponent,
        generator: ArenaGenerator,
        handles: ArenaHandles,
        event_log: EventLog | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._timers = timers
        self._targeting = targeting
        self._generator = generator
        self._handles = handles
        self._event_log = event_log if event_log is not None else EventLog()
        self.step_count: int = 0

        targeting.add_target_found_listener(self._on_found)
        targeting.add_target_lost_listener(self._on_lost)

    @property
    def world(self) -> SandboxWorld:
        return self._world

    @property
    def targeting(self) -> TargetingComponent:
        return self._targeting

    @property
    def handles(self) -> ArenaHandles:
        return self._handles

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def time(self) -> float:
        return self._timers.now

    def step(self) -> None:
        """Advance the sandbox by one fixed step."""
        dt = self._config.step_seconds
        self._generator.patrol(self._world, self.step_count, dt)
        self._turn_agent(dt)
        follow_camera(self._world, self._handles.agent, self._handles.camera)
        self._timers.advance(dt)
        self.step_count += 1

    def run(self, steps: int | None = None) -> None:
        """Execute *steps* steps (default: ``max_steps`` from the config)."""
        total = self._config.max_steps if steps is None else steps
        logger.info("=== Sandbox started (%d steps) ===", total)
        for _ in range(total):
            self.step()
            if self.step_count % 300 == 0:
                logger.info(
                    "Step %d: target=%s, ranked=%d",
                    self.step_count,
                    self._targeting.get_current_target(),
                    len(self._targeting.get_ranked_targets()),
                )
        logger.info("=== Sandbox finished at step %d ===", self.step_count)

    def _turn_agent(self, dt: float) -> None:
        rate = self._config.agent_turn_rate
        if rate == 0.0:
            return
        agent = self._world.get_actor(self._handles.agent)
        if not isinstance(agent, Character) or not agent.alive:
            return
        yaw = normalize_axis(agent.rotation.yaw + rate * dt)
        agent.rotation = Rotator(yaw=yaw)
        agent.control_rotation = Rotator(pitch=agent.control_rotation.pitch, yaw=yaw)

    def _on_found(self, handle: int) -> None:
        self._event_log.append(TargetEvent(self.step_count, self.time, TargetEventKind.FOUND, handle))

    def _on_lost(self, handle: int) -> None:
        self._event_log.append(TargetEvent(self.step_count, self.time, TargetEventKind.LOST, handle))


def build_sandbox(
    config: SandboxConfig,
    targeting_config: TargetingConfig | None = None,
    event_log: EventLog | None = None,
) -> SandboxLoop:
    """Populate a fresh arena and return an initialized loop."""
    from soft_targeting.engine.scheduler import TimerManager
    from soft_targeting.systems.generator import ArenaGenerator
    from soft_targeting.systems.rng import DeterministicRNG
    from soft_targeting.systems.spatial_hash import SpatialHash
    from soft_targeting.targeting.component import TargetingComponent
    from soft_targeting.world.world_state import SandboxWorld

    world = SandboxWorld(SpatialHash(config.spatial_cell_size))
    generator = ArenaGenerator(config, DeterministicRNG(config.world_seed))
    handles = generator.populate(world)
    timers = TimerManager()
    targeting = TargetingComponent(world, world, timers, targeting_config)
    loop = SandboxLoop(config, world, timers, targeting, generator, handles, event_log)
    targeting.initialize(handles.agent, handles.camera)
    return loop
