"""GET /api/v1/state and /api/v1/events: live targeting data polled by a debug UI."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from soft_targeting.api.dependencies import get_engine_manager, get_snapshot
from soft_targeting.api.engine_manager import EngineManager, SandboxSnapshot
from soft_targeting.api.schemas import (
    ActorSchema,
    EventSchema,
    LockStateSchema,
    PoseSchema,
    ScoredTargetSchema,
    StateResponse,
    Vector3Schema,
)
from soft_targeting.core.math3d import Vector3
from soft_targeting.core.models import Pose

router = APIRouter()


def _vec(v: Vector3) -> Vector3Schema:
    return Vector3Schema(x=v.x, y=v.y, z=v.z)


def _pose(p: Pose | None) -> PoseSchema | None:
    if p is None:
        return None
    return PoseSchema(position=_vec(p.position), pitch=p.rotation.pitch, yaw=p.rotation.yaw)


@router.get("/state", response_model=StateResponse)
def get_state(
    snap: SandboxSnapshot = Depends(get_snapshot),
    manager: EngineManager = Depends(get_engine_manager),
) -> StateResponse:
    return StateResponse(
        step=snap.step,
        time=snap.time,
        running=manager.running and not manager.paused,
        lock=LockStateSchema(
            current_target=snap.current_target,
            active=snap.active,
            paused=snap.paused,
            phase=snap.phase,
            evaluations=snap.evaluations,
        ),
        ranked_targets=[ScoredTargetSchema(handle=sc.handle, score=sc.score) for sc in snap.ranked],
        agent=_pose(snap.agent),
        camera=_pose(snap.camera),
        actors=[
            ActorSchema(
                handle=a.handle,
                name=a.name,
                kind=a.kind,
                position=_vec(a.pose.position),
                yaw=a.pose.rotation.yaw,
                tags=list(a.tags),
            )
            for a in snap.actors
        ],
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since: int = Query(0, ge=0, description="Return events recorded at or after this step"),
    limit: int = Query(200, ge=1, le=5000),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    events = manager.event_log.since_step(since)[-limit:]
    return [
        EventSchema(step=e.step, time=e.time, kind=e.kind.name.lower(), handle=e.handle)
        for e in events
    ]
