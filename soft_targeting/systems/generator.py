"""ArenaGenerator — deterministic sandbox population and patrol movement."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from soft_targeting.core.enums import Domain, TraceChannel
from soft_targeting.core.math3d import Rotator, Vector3
from soft_targeting.core.models import Actor, Blocker, Camera, Character, Enemy

if TYPE_CHECKING:
    from soft_targeting.config import SandboxConfig
    from soft_targeting.systems.rng import DeterministicRNG
    from soft_targeting.world.world_state import SandboxWorld

logger = logging.getLogger(__name__)

ENEMY_TAG = "Target"
PLAYER_TAG = "Player"
PROP_TAG = "Prop"

# Spring-arm style camera placement relative to the agent
CAMERA_BOOM_LENGTH = 250.0
CAMERA_HEIGHT = 90.0

# Steps between patrol heading changes
PATROL_LEG_STEPS = 90

# Keep spawns out of the agent's personal space
MIN_SPAWN_DISTANCE = 200.0


@dataclass(frozen=True, slots=True)
class ArenaHandles:
    """Handles the host needs after populating the arena."""

    agent: int
    camera: int
    enemies: tuple[int, ...]
    props: tuple[int, ...]


class ArenaGenerator:
    """Spawns the agent, its camera, enemies, props and blockers."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SandboxConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def populate(self, world: SandboxWorld) -> ArenaHandles:
        cfg = self._config
        agent = world.spawn(
            Character,
            name="player",
            tags=frozenset({PLAYER_TAG}),
            responds_to=frozenset({TraceChannel.PAWN}),
        )
        camera = world.spawn(Camera)
        follow_camera(world, agent.handle, camera.handle)

        enemies = tuple(self._spawn_enemy(world, i).handle for i in range(cfg.enemy_count))
        props = tuple(self._spawn_prop(world, i).handle for i in range(cfg.prop_count))
        for i in range(cfg.blocker_count):
            world.add_blocker(self._make_blocker(i))

        logger.info(
            "Arena populated: %d enemies, %d props, %d blockers (seed=%d)",
            len(enemies), len(props), cfg.blocker_count, self._rng.seed,
        )
        return ArenaHandles(agent=agent.handle, camera=camera.handle, enemies=enemies, props=props)

    def _random_ground_point(self, domain: Domain, key: int) -> Vector3:
        extent = self._config.arena_half_extent
        for attempt in range(16):
            x = self._rng.next_range(domain, key, attempt * 2, -extent, extent)
            y = self._rng.next_range(domain, key, attempt * 2 + 1, -extent, extent)
            if math.hypot(x, y) >= MIN_SPAWN_DISTANCE:
                break
        return Vector3(x, y, 0.0)

    def _spawn_enemy(self, world: SandboxWorld, index: int) -> Enemy:
        pos = self._random_ground_point(Domain.SPAWN, index)
        yaw = self._rng.next_range(Domain.SPAWN, index, 100, -180.0, 180.0)
        return world.spawn(
            Enemy,
            name=f"enemy_{index}",
            position=pos,
            rotation=Rotator(yaw=yaw),
            tags=frozenset({ENEMY_TAG}),
            patrol_origin=pos,
        )

    def _spawn_prop(self, world: SandboxWorld, index: int) -> Actor:
        pos = self._random_ground_point(Domain.SPAWN, 10_000 + index)
        return world.spawn(Actor, name=f"prop_{index}", position=pos, tags=frozenset({PROP_TAG}))

    def _make_blocker(self, index: int) -> Blocker:
        center = self._random_ground_point(Domain.BLOCKER, index)
        half = self._config.blocker_half_size
        return Blocker(
            minimum=Vector3(center.x - half, center.y - half, -half),
            maximum=Vector3(center.x + half, center.y + half, half * 2.0),
        )

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def patrol(self, world: SandboxWorld, step: int, dt: float) -> None:
        """Move every live enemy one step along its patrol leg."""
        cfg = self._config
        leg = step // PATROL_LEG_STEPS
        for actor in world.actors():
            if not isinstance(actor, Enemy):
                continue
            offset = actor.position - actor.patrol_origin
            if offset.length_2d() > cfg.patrol_radius:
                heading = math.degrees(math.atan2(-offset.y, -offset.x))
            else:
                heading = self._rng.next_range(Domain.PATROL, actor.handle, leg, -180.0, 180.0)
            rotation = Rotator(yaw=heading)
            world.set_rotation(actor.handle, rotation)
            world.move(actor.handle, actor.position + rotation.forward() * (cfg.patrol_speed * dt))


def follow_camera(world: SandboxWorld, agent_handle: int, camera_handle: int) -> None:
    """Place the camera behind and above the agent, aiming along its control rotation."""
    agent = world.get_actor(agent_handle)
    camera = world.get_actor(camera_handle)
    if not isinstance(agent, Character) or camera is None:
        return
    aim = agent.control_rotation
    back = Rotator(yaw=aim.yaw).forward() * -CAMERA_BOOM_LENGTH
    world.move(camera_handle, agent.position + back + Vector3(0.0, 0.0, CAMERA_HEIGHT))
    world.set_rotation(camera_handle, aim)
