"""EngineManager — runs the SandboxLoop on a background thread.

The API reads from an atomically-swapped immutable ``SandboxSnapshot``. Every
mutation of the sandbox (loop steps and API commands alike) happens under a
single lock, so the targeting component only ever sees one caller at a time.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from soft_targeting.core.math3d import Rotator
from soft_targeting.core.models import Character, Pose, ScoredCandidate, is_valid
from soft_targeting.engine.sandbox_loop import build_sandbox
from soft_targeting.systems.generator import follow_camera
from soft_targeting.utils.event_log import EventLog

if TYPE_CHECKING:
    from soft_targeting.config import SandboxConfig, TargetingConfig
    from soft_targeting.engine.sandbox_loop import SandboxLoop

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActorView:
    handle: int
    name: str
    kind: str
    pose: Pose
    tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SandboxSnapshot:
    """Immutable view of the sandbox after a step."""

    step: int
    time: float
    current_target: int | None
    active: bool
    paused: bool
    phase: str
    evaluations: int
    ranked: tuple[ScoredCandidate, ...] = ()
    agent: Pose | None = None
    camera: Pose | None = None
    actors: tuple[ActorView, ...] = field(default_factory=tuple)


class EngineManager:
    """Manages the sandbox lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded buffer)
      - control commands (start / pause / resume / step / reset)
      - targeting commands (activate / deactivate / configure / facing)
    """

    def __init__(
        self,
        config: SandboxConfig,
        targeting_config: TargetingConfig | None = None,
    ) -> None:
        self._config = config
        self._targeting_config = targeting_config
        self._step_rate: float = 1.0 / config.step_seconds  # real-time steps per second

        self._loop: SandboxLoop | None = None
        self._sandbox_lock = threading.RLock()
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: SandboxSnapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def config(self) -> SandboxConfig:
        return self._config

    @property
    def targeting_config(self) -> TargetingConfig:
        assert self._loop is not None
        return self._loop.targeting.config

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def step_rate(self) -> float:
        return self._step_rate

    @step_rate.setter
    def step_rate(self, value: float) -> None:
        self._step_rate = max(1.0, min(value, 240.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> SandboxSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="sandbox-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (step_rate=%.1f/s)", self._step_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at step %d", self._current_step())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at step %d", self._current_step())

    def step(self) -> None:
        """Execute exactly one step.

        With the loop thread running the step is handed to it (and the loop
        is paused); otherwise the step runs inline on the caller's thread.
        """
        if self._running.is_set():
            if not self._paused.is_set():
                self.pause()
            self._step_requested.set()
            return
        self._step_once()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave stopped ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- targeting commands --

    def activate_targeting(self) -> None:
        with self._sandbox_lock:
            assert self._loop is not None
            self._loop.targeting.activate_targeting()
            self._publish()

    def deactivate_targeting(self) -> None:
        with self._sandbox_lock:
            assert self._loop is not None
            self._loop.targeting.deactivate_targeting()
            self._publish()

    def configure(self, **changes: object) -> TargetingConfig:
        """Apply a targeting configuration change; raises ``ConfigurationError``."""
        with self._sandbox_lock:
            assert self._loop is not None
            new_config = self._loop.targeting.configure(**changes)
            self._targeting_config = new_config
            return new_config

    def set_facing(self, yaw: float, pitch: float = 0.0) -> None:
        """Point the agent body at *yaw* and its camera at (*pitch*, *yaw*)."""
        with self._sandbox_lock:
            assert self._loop is not None
            handles = self._loop.handles
            agent = self._loop.world.get_actor(handles.agent)
            if not isinstance(agent, Character) or not is_valid(agent):
                return
            agent.rotation = Rotator(yaw=yaw)
            agent.control_rotation = Rotator(pitch=pitch, yaw=yaw)
            follow_camera(self._loop.world, handles.agent, handles.camera)
            self._publish()

    # -- internals --

    def _build(self) -> None:
        """Construct the sandbox from config and publish the initial snapshot."""
        with self._sandbox_lock:
            self._loop = build_sandbox(self._config, self._targeting_config, self._event_log)
            self._publish()

    def _current_step(self) -> int:
        snap = self.get_snapshot()
        return snap.step if snap else 0

    def _step_once(self) -> None:
        with self._sandbox_lock:
            assert self._loop is not None
            self._loop.step()
            self._publish()

    def _publish(self) -> None:
        snap = self._capture()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _capture(self) -> SandboxSnapshot:
        loop = self._loop
        assert loop is not None
        targeting = loop.targeting
        world = loop.world

        def pose_of(handle: int) -> Pose | None:
            obj = world.get_actor(handle)
            return obj.pose if is_valid(obj) else None

        actors = tuple(
            ActorView(
                handle=a.handle,
                name=a.name,
                kind=type(a).__name__.lower(),
                pose=a.pose,
                tags=tuple(sorted(a.tags)),
            )
            for a in world.actors()
            if a.alive
        )
        return SandboxSnapshot(
            step=loop.step_count,
            time=loop.time,
            current_target=targeting.get_current_target(),
            active=targeting.active,
            paused=targeting.paused,
            phase=targeting.phase.name.lower(),
            evaluations=targeting.evaluation_count,
            ranked=targeting.get_ranked_targets(),
            agent=pose_of(loop.handles.agent),
            camera=pose_of(loop.handles.camera),
            actors=actors,
        )

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Sandbox thread started.")

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            if self._step_requested.is_set():
                self._step_requested.clear()

            t0 = time.perf_counter()
            try:
                self._step_once()
            except Exception:
                logger.exception("Sandbox step failed; stopping loop")
                break

            elapsed = time.perf_counter() - t0
            time.sleep(max(0.0, 1.0 / self._step_rate - elapsed))

        self._running.clear()
        logger.info("Sandbox thread exiting.")
